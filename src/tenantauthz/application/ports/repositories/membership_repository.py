"""Tenant membership repository port."""

from typing import Protocol

from tenantauthz.domain.entities import TenantMembership
from tenantauthz.domain.value_objects import MembershipStatus


class MembershipRepository(Protocol):
    """Port for tenant membership persistence."""

    async def get(self, tenant_id: str, user_id: str) -> TenantMembership | None: ...

    async def create(self, membership: TenantMembership) -> TenantMembership:
        """Insert membership. Raises Conflict when (tenant_id, user_id) exists."""
        ...

    async def update_roles_atomic(
        self,
        tenant_id: str,
        user_id: str,
        add: list[str],
        remove: list[str],
    ) -> TenantMembership | None: ...

    async def update_status(
        self,
        tenant_id: str,
        user_id: str,
        status: MembershipStatus,
        *,
        expected: MembershipStatus | None = None,
    ) -> TenantMembership | None:
        """Set status and bump version; only when current status is `expected` if given."""
        ...

    async def increment_version(
        self, tenant_id: str, user_id: str
    ) -> TenantMembership | None: ...
