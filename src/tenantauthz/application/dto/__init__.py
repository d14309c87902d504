"""Application DTOs."""

from tenantauthz.application.dto.pagination import Page, clamp_limit
from tenantauthz.application.dto.results import (
    EffectivePermissions,
    MembershipRolesOutput,
    MembershipStatusOutput,
    OverrideRemovedOutput,
    OverrideSetOutput,
)

__all__ = [
    "EffectivePermissions",
    "MembershipRolesOutput",
    "MembershipStatusOutput",
    "OverrideRemovedOutput",
    "OverrideSetOutput",
    "Page",
    "clamp_limit",
]
