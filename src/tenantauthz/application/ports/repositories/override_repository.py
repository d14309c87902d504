"""Membership permission override repository port."""

from typing import Protocol

from tenantauthz.domain.entities import MembershipPermissionOverride
from tenantauthz.domain.value_objects import OverrideEffect


class OverrideRepository(Protocol):
    """Port for override persistence keyed by (tenant_id, user_id, permission_id)."""

    async def upsert(
        self,
        tenant_id: str,
        user_id: str,
        permission_id: str,
        effect: OverrideEffect,
        reason: str | None,
    ) -> MembershipPermissionOverride: ...

    async def delete(
        self, tenant_id: str, user_id: str, permission_id: str
    ) -> MembershipPermissionOverride | None:
        """Delete and return the override, or None when absent."""
        ...

    async def get(
        self, tenant_id: str, user_id: str, permission_id: str
    ) -> MembershipPermissionOverride | None: ...

    async def list_for_membership(
        self, tenant_id: str, user_id: str
    ) -> list[MembershipPermissionOverride]: ...
