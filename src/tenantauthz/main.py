"""Application entry point and composition root."""

import falcon.asgi

from tenantauthz import __version__
from tenantauthz.application.use_cases.membership.add_membership import (
    ActivateMembershipUseCase,
    AddMembershipUseCase,
)
from tenantauthz.application.use_cases.membership.remove_override import RemoveOverrideUseCase
from tenantauthz.application.use_cases.membership.resolve_permissions import (
    CheckPermissionUseCase,
    ResolveEffectivePermissionsUseCase,
)
from tenantauthz.application.use_cases.membership.set_override import SetOverrideUseCase
from tenantauthz.application.use_cases.membership.suspend_membership import (
    SuspendMembershipUseCase,
    UnsuspendMembershipUseCase,
)
from tenantauthz.application.use_cases.membership.update_membership_roles import (
    UpdateMembershipRolesUseCase,
)
from tenantauthz.application.use_cases.permission.create_permission import (
    CreatePermissionUseCase,
)
from tenantauthz.application.use_cases.permission.deprecate_permission import (
    DeprecatePermissionUseCase,
)
from tenantauthz.application.use_cases.permission.list_permissions import (
    ListPermissionsUseCase,
)
from tenantauthz.application.use_cases.role.create_role import CreateRoleUseCase
from tenantauthz.application.use_cases.role.list_roles import ListRolesUseCase
from tenantauthz.application.use_cases.role.update_role_permissions import (
    UpdateRolePermissionsUseCase,
)
from tenantauthz.config import Settings, get_settings
from tenantauthz.infrastructure.persistence.postgres.connection import create_pool
from tenantauthz.infrastructure.persistence.postgres.unit_of_work import create_uow_factory
from tenantauthz.interfaces.api.errors import register_error_handlers
from tenantauthz.interfaces.api.middleware.cors import CORSMiddleware
from tenantauthz.interfaces.api.middleware.pool_lifespan import PoolLifespanMiddleware
from tenantauthz.interfaces.api.resources.health import HealthResource
from tenantauthz.interfaces.api.resources.memberships import (
    EffectivePermissionsResource,
    MembershipResource,
    MembershipRolesResource,
    MembershipStatusResource,
    OverrideResource,
    OverridesResource,
)
from tenantauthz.interfaces.api.resources.pagination import PageParams
from tenantauthz.interfaces.api.resources.permissions import (
    PermissionDeprecateResource,
    PermissionResource,
    PermissionsResource,
)
from tenantauthz.interfaces.api.resources.roles import (
    RolePermissionsResource,
    RoleResource,
    RolesResource,
)
from tenantauthz.telemetry import get_logger, setup_logging

logger = get_logger(__name__)


def main() -> None:
    """CLI entry point."""
    print(f"tenantauthz v{__version__}")


def add_routes(
    app: falcon.asgi.App,
    uow_factory,
    settings: Settings,
    health_resource: HealthResource | None = None,
) -> falcon.asgi.App:
    """Build use cases and resources over `uow_factory` and mount them on `app`."""
    strict = settings.reject_deprecated_attachments
    page_params = PageParams(settings.default_page_limit, settings.max_page_limit)

    permissions_resource = PermissionsResource(
        ListPermissionsUseCase(uow_factory),
        CreatePermissionUseCase(uow_factory),
        page_params,
    )
    permission_resource = PermissionResource(uow_factory)
    deprecate_resource = PermissionDeprecateResource(DeprecatePermissionUseCase(uow_factory))

    roles_resource = RolesResource(
        ListRolesUseCase(uow_factory),
        CreateRoleUseCase(uow_factory),
        page_params,
    )
    role_resource = RoleResource(uow_factory)
    role_permissions_resource = RolePermissionsResource(
        UpdateRolePermissionsUseCase(uow_factory, reject_deprecated_attachments=strict)
    )

    membership_resource = MembershipResource(
        uow_factory,
        AddMembershipUseCase(uow_factory),
        ActivateMembershipUseCase(uow_factory),
    )
    membership_roles_resource = MembershipRolesResource(UpdateMembershipRolesUseCase(uow_factory))
    membership_status_resource = MembershipStatusResource(
        SuspendMembershipUseCase(uow_factory),
        UnsuspendMembershipUseCase(uow_factory),
    )
    overrides_resource = OverridesResource(
        uow_factory,
        SetOverrideUseCase(uow_factory, reject_deprecated_attachments=strict),
    )
    override_resource = OverrideResource(RemoveOverrideUseCase(uow_factory))
    effective_resource = EffectivePermissionsResource(
        ResolveEffectivePermissionsUseCase(uow_factory),
        CheckPermissionUseCase(uow_factory),
    )
    health_resource = health_resource or HealthResource()

    member = "/v1/tenants/{tenant_id}/users/{user_id}"
    app.add_route("/v1/health", health_resource)
    app.add_route("/v1/health/ready", health_resource, suffix="ready")
    app.add_route("/v1/permissions", permissions_resource)
    app.add_route("/v1/permissions/{permission_id}", permission_resource)
    app.add_route("/v1/permissions/{permission_id}/deprecate", deprecate_resource)
    app.add_route("/v1/tenants/{tenant_id}/roles", roles_resource)
    app.add_route("/v1/tenants/{tenant_id}/roles/{role_id}", role_resource)
    app.add_route("/v1/tenants/{tenant_id}/roles/{role_id}/permissions", role_permissions_resource)
    app.add_route(member, membership_resource)
    app.add_route(f"{member}/activate", membership_resource, suffix="activate")
    app.add_route(f"{member}/roles", membership_roles_resource)
    app.add_route(f"{member}/suspend", membership_status_resource, suffix="suspend")
    app.add_route(f"{member}/unsuspend", membership_status_resource, suffix="unsuspend")
    app.add_route(f"{member}/permissions/overrides", overrides_resource)
    app.add_route(f"{member}/permissions/allow", overrides_resource, suffix="allow")
    app.add_route(f"{member}/permissions/deny", overrides_resource, suffix="deny")
    app.add_route(f"{member}/permissions/effective", effective_resource)
    app.add_route(f"{member}/permissions/{{permission_id}}", override_resource)
    register_error_handlers(app)
    return app


def create_tenantauthz_app() -> falcon.asgi.App:
    """Composition root - build Falcon app with all dependencies."""
    settings = get_settings()
    setup_logging()
    pool = create_pool(
        settings.database_url,
        min_size=settings.db_pool_min_size,
        max_size=settings.db_pool_max_size,
    )
    uow_factory = create_uow_factory(pool)

    app = falcon.asgi.App(
        middleware=[
            CORSMiddleware(settings.cors_origins_list),
            PoolLifespanMiddleware(pool),
        ],
    )
    add_routes(app, uow_factory, settings, HealthResource(pool))
    logger.info("tenantauthz v%s configured environment=%s", __version__, settings.environment)
    return app


def run_server() -> None:
    """Run uvicorn server."""
    import uvicorn

    uvicorn.run(
        "tenantauthz.main:create_tenantauthz_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
    )
