"""Tenant membership, role assignment and override API resources."""

import falcon.asgi

from tenantauthz.application.use_cases.membership.add_membership import (
    ActivateMembershipUseCase,
    AddMembershipUseCase,
)
from tenantauthz.application.use_cases.membership.remove_override import (
    RemoveOverrideUseCase,
)
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
from tenantauthz.domain.exceptions import NotFound
from tenantauthz.domain.value_objects import MembershipStatus, OverrideEffect
from tenantauthz.interfaces.api.schemas import (
    AddMembershipBody,
    IdSetUpdateBody,
    OverrideBody,
    StatusChangeBody,
    parse_body,
)
from tenantauthz.interfaces.api.serializers import (
    effective_to_dict,
    membership_to_dict,
    output_to_dict,
    override_to_dict,
)


class MembershipResource:
    """GET/POST /v1/tenants/{tenant_id}/users/{user_id} - read or add membership."""

    def __init__(
        self,
        unit_of_work_factory: type,
        add_membership: AddMembershipUseCase,
        activate_membership: ActivateMembershipUseCase,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._add = add_membership
        self._activate = activate_membership

    async def on_get(
        self,
        req: falcon.asgi.Request,
        resp: falcon.asgi.Response,
        tenant_id: str,
        user_id: str,
    ) -> None:
        async with self._uow_factory() as uow:
            membership = await uow.memberships.get(tenant_id, user_id)
        if not membership:
            raise NotFound("Membership", f"{tenant_id}/{user_id}")
        resp.media = membership_to_dict(membership)
        resp.status = falcon.HTTP_200

    async def on_post(
        self,
        req: falcon.asgi.Request,
        resp: falcon.asgi.Response,
        tenant_id: str,
        user_id: str,
    ) -> None:
        """Add user to tenant (ACTIVE or INVITED)."""
        body = await parse_body(req, AddMembershipBody)
        membership = await self._add.execute(
            tenant_id,
            user_id,
            status=MembershipStatus(body.status),
            expires_at=body.expires_at,
        )
        resp.media = membership_to_dict(membership)
        resp.status = falcon.HTTP_201 if membership.membership_version == 1 else falcon.HTTP_200

    async def on_post_activate(
        self,
        req: falcon.asgi.Request,
        resp: falcon.asgi.Response,
        tenant_id: str,
        user_id: str,
    ) -> None:
        """POST .../activate - accept invitation."""
        membership = await self._activate.execute(tenant_id, user_id)
        resp.media = membership_to_dict(membership)
        resp.status = falcon.HTTP_200


class MembershipRolesResource:
    """PATCH /v1/tenants/{tenant_id}/users/{user_id}/roles."""

    def __init__(self, update_membership_roles: UpdateMembershipRolesUseCase) -> None:
        self._update = update_membership_roles

    async def on_patch(
        self,
        req: falcon.asgi.Request,
        resp: falcon.asgi.Response,
        tenant_id: str,
        user_id: str,
    ) -> None:
        body = await parse_body(req, IdSetUpdateBody)
        result = await self._update.execute(tenant_id, user_id, body.add, body.remove)
        resp.media = output_to_dict(result)
        resp.status = falcon.HTTP_200


class MembershipStatusResource:
    """POST .../suspend and .../unsuspend."""

    def __init__(
        self,
        suspend_membership: SuspendMembershipUseCase,
        unsuspend_membership: UnsuspendMembershipUseCase,
    ) -> None:
        self._suspend = suspend_membership
        self._unsuspend = unsuspend_membership

    async def on_post_suspend(
        self,
        req: falcon.asgi.Request,
        resp: falcon.asgi.Response,
        tenant_id: str,
        user_id: str,
    ) -> None:
        body = await parse_body(req, StatusChangeBody)
        result = await self._suspend.execute(tenant_id, user_id, body.reason)
        resp.media = output_to_dict(result)
        resp.status = falcon.HTTP_200

    async def on_post_unsuspend(
        self,
        req: falcon.asgi.Request,
        resp: falcon.asgi.Response,
        tenant_id: str,
        user_id: str,
    ) -> None:
        body = await parse_body(req, StatusChangeBody)
        result = await self._unsuspend.execute(tenant_id, user_id, body.reason)
        resp.media = output_to_dict(result)
        resp.status = falcon.HTTP_200


class OverridesResource:
    """GET .../permissions/overrides, POST .../permissions/allow and .../deny."""

    def __init__(self, unit_of_work_factory: type, set_override: SetOverrideUseCase) -> None:
        self._uow_factory = unit_of_work_factory
        self._set = set_override

    async def on_get(
        self,
        req: falcon.asgi.Request,
        resp: falcon.asgi.Response,
        tenant_id: str,
        user_id: str,
    ) -> None:
        async with self._uow_factory() as uow:
            overrides = await uow.overrides.list_for_membership(tenant_id, user_id)
        resp.media = {"items": [override_to_dict(o) for o in overrides]}
        resp.status = falcon.HTTP_200

    async def _set_effect(
        self,
        req: falcon.asgi.Request,
        resp: falcon.asgi.Response,
        tenant_id: str,
        user_id: str,
        effect: OverrideEffect,
    ) -> None:
        body = await parse_body(req, OverrideBody)
        result = await self._set.execute(
            tenant_id, user_id, body.permission_id, effect, body.reason
        )
        resp.media = output_to_dict(result)
        resp.status = falcon.HTTP_201

    async def on_post_allow(self, req, resp, tenant_id: str, user_id: str) -> None:
        await self._set_effect(req, resp, tenant_id, user_id, OverrideEffect.ALLOW)

    async def on_post_deny(self, req, resp, tenant_id: str, user_id: str) -> None:
        await self._set_effect(req, resp, tenant_id, user_id, OverrideEffect.DENY)


class OverrideResource:
    """DELETE /v1/tenants/{tenant_id}/users/{user_id}/permissions/{permission_id}."""

    def __init__(self, remove_override: RemoveOverrideUseCase) -> None:
        self._remove = remove_override

    async def on_delete(
        self,
        req: falcon.asgi.Request,
        resp: falcon.asgi.Response,
        tenant_id: str,
        user_id: str,
        permission_id: str,
    ) -> None:
        result = await self._remove.execute(tenant_id, user_id, permission_id)
        resp.media = output_to_dict(result)
        resp.status = falcon.HTTP_200


class EffectivePermissionsResource:
    """GET .../permissions/effective[?permission_id=] - resolved permissions."""

    def __init__(
        self,
        resolve_permissions: ResolveEffectivePermissionsUseCase,
        check_permission: CheckPermissionUseCase,
    ) -> None:
        self._resolve = resolve_permissions
        self._check = check_permission

    async def on_get(
        self,
        req: falcon.asgi.Request,
        resp: falcon.asgi.Response,
        tenant_id: str,
        user_id: str,
    ) -> None:
        permission_id = req.get_param("permission_id")
        if permission_id:
            decision = await self._check.execute(tenant_id, user_id, permission_id)
            resp.media = {
                "tenant_id": tenant_id,
                "user_id": user_id,
                "permission_id": permission_id,
                "decision": decision.value,
            }
        else:
            effective = await self._resolve.execute(tenant_id, user_id)
            resp.media = effective_to_dict(effective)
        resp.status = falcon.HTTP_200
