"""Lifecycle statuses for registry, role and membership records."""

from enum import StrEnum


class PermissionStatus(StrEnum):
    """Permission lifecycle. Deprecation is one-directional."""

    ACTIVE = "ACTIVE"
    DEPRECATED = "DEPRECATED"


class RoleStatus(StrEnum):
    """Role lifecycle. Roles are never deleted, only deprecated."""

    ACTIVE = "ACTIVE"
    DEPRECATED = "DEPRECATED"


class MembershipStatus(StrEnum):
    """Tenant membership lifecycle."""

    INVITED = "INVITED"
    ACTIVE = "ACTIVE"
    SUSPENDED = "SUSPENDED"
    REVOKED = "REVOKED"
