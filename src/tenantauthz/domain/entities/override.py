"""Membership permission override entity."""

from dataclasses import dataclass
from datetime import datetime

from tenantauthz.domain.value_objects import OverrideEffect


@dataclass
class MembershipPermissionOverride:
    """ALLOW/DENY exception for one permission of one membership."""

    tenant_id: str
    user_id: str
    permission_id: str
    effect: OverrideEffect
    created_at: datetime
    updated_at: datetime
    reason: str | None = None
