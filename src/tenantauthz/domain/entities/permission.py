"""Permission entity - registry catalog entry."""

from dataclasses import dataclass
from datetime import datetime

from tenantauthz.domain.value_objects import PermissionStatus


def normalize_permission_key(key: str) -> str:
    """Registry keys are stored trimmed and uppercase."""
    return key.strip().upper()


@dataclass
class Permission:
    """Permission - globally unique key; never hard-deleted, only deprecated."""

    permission_id: str
    key: str
    description: str
    status: PermissionStatus
    created_at: datetime
    updated_at: datetime
    seq: int | None = None

    @property
    def is_deprecated(self) -> bool:
        return self.status == PermissionStatus.DEPRECATED
