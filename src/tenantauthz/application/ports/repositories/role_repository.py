"""Role repository port."""

from datetime import datetime
from typing import Protocol

from tenantauthz.domain.entities import Role


class RoleRepository(Protocol):
    """Port for role persistence."""

    async def get_by_id(self, tenant_id: str, role_id: str) -> Role | None: ...

    async def find_by_ids(self, tenant_id: str, role_ids: list[str]) -> list[Role]: ...

    async def create(self, role: Role) -> Role:
        """Insert role. Raises Conflict when (tenant_id, name) exists."""
        ...

    async def update_permissions_atomic(
        self,
        tenant_id: str,
        role_id: str,
        add: list[str],
        remove: list[str],
    ) -> Role | None:
        """Add, pull and bump role_version in one atomic operation."""
        ...

    async def list_by_tenant(
        self,
        tenant_id: str,
        *,
        after: tuple[datetime, str] | None = None,
        limit: int = 50,
    ) -> list[Role]:
        """Return up to `limit` roles ordered by (created_at, role_id)."""
        ...
