"""Repository ports."""

from tenantauthz.application.ports.repositories.membership_repository import (
    MembershipRepository,
)
from tenantauthz.application.ports.repositories.override_repository import (
    OverrideRepository,
)
from tenantauthz.application.ports.repositories.permission_repository import (
    PermissionRepository,
)
from tenantauthz.application.ports.repositories.role_repository import RoleRepository

__all__ = [
    "MembershipRepository",
    "OverrideRepository",
    "PermissionRepository",
    "RoleRepository",
]
