"""Effective permission resolution use cases."""

from tenantauthz.application.dto import EffectivePermissions
from tenantauthz.domain.precedence import decide, effective_permission_set, split_overrides
from tenantauthz.domain.value_objects import Decision, OverrideEffect


class ResolveEffectivePermissionsUseCase:
    """Compute the full effective permission set of a (tenant, user) pair."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self, tenant_id: str, user_id: str) -> EffectivePermissions:
        """Read membership roles, role sets and overrides; apply precedence.

        Role ids that no longer resolve to a role in the tenant contribute
        nothing. A missing membership contributes no roles.
        """
        async with self._uow_factory() as uow:
            membership = await uow.memberships.get(tenant_id, user_id)
            overrides = await uow.overrides.list_for_membership(tenant_id, user_id)
            roles = []
            if membership and membership.roles:
                roles = await uow.roles.find_by_ids(tenant_id, list(membership.roles))

        _, denied = split_overrides(overrides)
        return EffectivePermissions(
            tenant_id=tenant_id,
            user_id=user_id,
            allowed=frozenset(effective_permission_set(roles, overrides)),
            denied=frozenset(denied),
            membership_version=membership.membership_version if membership else None,
            role_versions={r.role_id: r.role_version for r in roles},
        )


class CheckPermissionUseCase:
    """Decide ALLOW/DENY for one (tenant, user, permission)."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self, tenant_id: str, user_id: str, permission_id: str) -> Decision:
        async with self._uow_factory() as uow:
            override = await uow.overrides.get(tenant_id, user_id, permission_id)
            membership = await uow.memberships.get(tenant_id, user_id)
            role_grants = False
            if membership and membership.roles:
                roles = await uow.roles.find_by_ids(tenant_id, list(membership.roles))
                role_grants = any(permission_id in r.permissions for r in roles)

        effect = override.effect if override else None
        return decide(
            role_grants=role_grants,
            has_allow_override=effect == OverrideEffect.ALLOW,
            has_deny_override=effect == OverrideEffect.DENY,
        )
