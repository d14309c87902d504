"""Output DTOs for mutation and resolution use cases."""

from dataclasses import dataclass, field
from datetime import datetime

from tenantauthz.domain.value_objects import MembershipStatus, OverrideEffect


@dataclass
class MembershipRolesOutput:
    """Result of a membership role edit."""

    tenant_id: str
    user_id: str
    role_ids: list[str]
    membership_version: int
    updated_at: datetime


@dataclass
class MembershipStatusOutput:
    """Result of a membership status transition."""

    tenant_id: str
    user_id: str
    status: MembershipStatus
    membership_version: int


@dataclass
class OverrideSetOutput:
    """Result of an override upsert.

    membership_version is the post-increment version, or None when the
    version bump after the override write did not go through.
    """

    tenant_id: str
    user_id: str
    permission_id: str
    effect: OverrideEffect
    created_at: datetime
    membership_version: int | None
    version_bumped: bool = True


@dataclass
class OverrideRemovedOutput:
    """Result of an override removal."""

    tenant_id: str
    user_id: str
    permission_id: str
    membership_version: int | None
    deleted: bool = True
    version_bumped: bool = True


@dataclass
class EffectivePermissions:
    """Effective permission set of a (tenant, user) pair.

    membership_version and role_versions together fingerprint the inputs;
    a cached copy is stale as soon as either differs.
    """

    tenant_id: str
    user_id: str
    allowed: frozenset[str]
    denied: frozenset[str]
    membership_version: int | None
    role_versions: dict[str, int] = field(default_factory=dict)

    def is_allowed(self, permission_id: str) -> bool:
        return permission_id in self.allowed
