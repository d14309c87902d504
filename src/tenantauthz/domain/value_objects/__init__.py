"""Domain value objects."""

from tenantauthz.domain.value_objects.override_effect import Decision, OverrideEffect
from tenantauthz.domain.value_objects.page_cursor import CreatedAtCursor, SequenceCursor
from tenantauthz.domain.value_objects.statuses import (
    MembershipStatus,
    PermissionStatus,
    RoleStatus,
)

__all__ = [
    "CreatedAtCursor",
    "Decision",
    "MembershipStatus",
    "OverrideEffect",
    "PermissionStatus",
    "RoleStatus",
    "SequenceCursor",
]
