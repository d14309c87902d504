"""Permission registry repository port."""

from typing import Protocol

from tenantauthz.domain.entities import Permission
from tenantauthz.domain.value_objects import PermissionStatus


class PermissionRepository(Protocol):
    """Port for permission registry persistence."""

    async def get_by_id(self, permission_id: str) -> Permission | None: ...

    async def get_by_key(self, key: str) -> Permission | None: ...

    async def find_by_ids(self, permission_ids: list[str]) -> list[Permission]: ...

    async def create(self, permission: Permission) -> Permission: ...

    async def update_status(
        self, permission_id: str, status: PermissionStatus
    ) -> Permission | None: ...

    async def list(
        self,
        *,
        status: PermissionStatus | None = None,
        query: str | None = None,
        after_seq: int | None = None,
        limit: int = 50,
    ) -> list[Permission]:
        """Return up to `limit` rows ordered by insertion sequence."""
        ...
