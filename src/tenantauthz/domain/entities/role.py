"""Role entity - tenant-scoped named permission set."""

from dataclasses import dataclass, field
from datetime import datetime

from tenantauthz.domain.value_objects import RoleStatus


def normalize_role_name(name: str) -> str:
    """Role names are unique per tenant in trimmed uppercase form."""
    return name.strip().upper()


@dataclass
class Role:
    """Role - (tenant_id, name) is unique; role_version bumps on every accepted edit."""

    role_id: str
    tenant_id: str
    name: str
    status: RoleStatus
    role_version: int
    created_at: datetime
    updated_at: datetime
    permissions: list[str] = field(default_factory=list)
