"""Override precedence - the effective permission contract.

For one (tenant, user, permission):

1. a DENY override wins unconditionally;
2. otherwise an ALLOW override grants;
3. otherwise the permission is granted iff some resolvable role assigned
   to the membership carries it;
4. otherwise deny.
"""

from collections.abc import Iterable

from tenantauthz.domain.entities import MembershipPermissionOverride, Role
from tenantauthz.domain.value_objects import Decision, OverrideEffect


def decide(
    role_grants: bool,
    has_allow_override: bool,
    has_deny_override: bool,
) -> Decision:
    """Apply the three-tier, DENY-dominant precedence."""
    if has_deny_override:
        return Decision.DENY
    if has_allow_override:
        return Decision.ALLOW
    if role_grants:
        return Decision.ALLOW
    return Decision.DENY


def role_granted_permissions(roles: Iterable[Role]) -> set[str]:
    """Union of the permission sets of the given roles."""
    granted: set[str] = set()
    for role in roles:
        granted.update(role.permissions)
    return granted


def split_overrides(
    overrides: Iterable[MembershipPermissionOverride],
) -> tuple[set[str], set[str]]:
    """Return (allowed, denied) permission ids from overrides."""
    allowed: set[str] = set()
    denied: set[str] = set()
    for override in overrides:
        if override.effect == OverrideEffect.DENY:
            denied.add(override.permission_id)
        else:
            allowed.add(override.permission_id)
    return allowed, denied


def effective_permission_set(
    roles: Iterable[Role],
    overrides: Iterable[MembershipPermissionOverride],
) -> set[str]:
    """All permission ids that resolve to ALLOW."""
    allowed, denied = split_overrides(overrides)
    return (role_granted_permissions(roles) | allowed) - denied
