"""Role API resources."""

import falcon.asgi

from tenantauthz.application.use_cases.role.create_role import CreateRoleUseCase
from tenantauthz.application.use_cases.role.list_roles import ListRolesUseCase
from tenantauthz.application.use_cases.role.update_role_permissions import (
    UpdateRolePermissionsUseCase,
)
from tenantauthz.domain.exceptions import NotFound
from tenantauthz.interfaces.api.resources.pagination import PageParams
from tenantauthz.interfaces.api.schemas import CreateRoleBody, IdSetUpdateBody, parse_body
from tenantauthz.interfaces.api.serializers import page_to_dict, role_to_dict


class RolesResource:
    """GET/POST /v1/tenants/{tenant_id}/roles - list and create roles."""

    def __init__(
        self,
        list_roles: ListRolesUseCase,
        create_role: CreateRoleUseCase,
        page_params: PageParams | None = None,
    ) -> None:
        self._list = list_roles
        self._create = create_role
        self._page_params = page_params or PageParams()

    async def on_get(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, tenant_id: str
    ) -> None:
        """List roles of tenant."""
        limit, cursor = self._page_params.read(req)
        page = await self._list.execute(tenant_id, limit=limit, cursor=cursor)
        resp.media = page_to_dict(page, role_to_dict)
        resp.status = falcon.HTTP_200

    async def on_post(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, tenant_id: str
    ) -> None:
        """Create role in tenant."""
        body = await parse_body(req, CreateRoleBody)
        role = await self._create.execute(tenant_id, body.name)
        resp.media = role_to_dict(role)
        resp.status = falcon.HTTP_201


class RoleResource:
    """GET /v1/tenants/{tenant_id}/roles/{role_id}."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def on_get(
        self,
        req: falcon.asgi.Request,
        resp: falcon.asgi.Response,
        tenant_id: str,
        role_id: str,
    ) -> None:
        async with self._uow_factory() as uow:
            role = await uow.roles.get_by_id(tenant_id, role_id)
        if not role:
            raise NotFound("Role", role_id)
        resp.media = role_to_dict(role)
        resp.status = falcon.HTTP_200


class RolePermissionsResource:
    """PATCH /v1/tenants/{tenant_id}/roles/{role_id}/permissions."""

    def __init__(self, update_role_permissions: UpdateRolePermissionsUseCase) -> None:
        self._update = update_role_permissions

    async def on_patch(
        self,
        req: falcon.asgi.Request,
        resp: falcon.asgi.Response,
        tenant_id: str,
        role_id: str,
    ) -> None:
        body = await parse_body(req, IdSetUpdateBody)
        role = await self._update.execute(tenant_id, role_id, body.add, body.remove)
        resp.media = {
            "role_id": role.role_id,
            "tenant_id": role.tenant_id,
            "role_version": role.role_version,
            "permissions": list(role.permissions),
        }
        resp.status = falcon.HTTP_200
