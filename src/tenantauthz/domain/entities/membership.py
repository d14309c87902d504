"""Tenant membership entity."""

from dataclasses import dataclass, field
from datetime import datetime

from tenantauthz.domain.value_objects import MembershipStatus


@dataclass
class TenantMembership:
    """Membership of a user in a tenant.

    (tenant_id, user_id) is unique. membership_version bumps on role edits,
    status transitions and override writes for this membership.
    """

    membership_id: str
    tenant_id: str
    user_id: str
    status: MembershipStatus
    membership_version: int
    created_at: datetime
    updated_at: datetime
    roles: list[str] = field(default_factory=list)
    expires_at: datetime | None = None
