"""Domain entities."""

from tenantauthz.domain.entities.membership import TenantMembership
from tenantauthz.domain.entities.override import MembershipPermissionOverride
from tenantauthz.domain.entities.permission import Permission, normalize_permission_key
from tenantauthz.domain.entities.role import Role, normalize_role_name

__all__ = [
    "MembershipPermissionOverride",
    "Permission",
    "Role",
    "TenantMembership",
    "normalize_permission_key",
    "normalize_role_name",
]
