"""Create role use case."""

from datetime import UTC, datetime
from uuid import uuid4

from tenantauthz.domain.entities import Role, normalize_role_name
from tenantauthz.domain.exceptions import ValidationError
from tenantauthz.domain.value_objects import RoleStatus
from tenantauthz.telemetry import get_logger

logger = get_logger(__name__)


class CreateRoleUseCase:
    """Create an empty role in a tenant."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self, tenant_id: str, name: str) -> Role:
        """Create role with no permissions and role_version 1.

        Uniqueness of (tenant_id, name) is left to the store constraint;
        the repository raises Conflict on a duplicate.
        """
        normalized_name = normalize_role_name(name or "")
        if not normalized_name:
            raise ValidationError("Role name is required")

        now = datetime.now(UTC)
        role = Role(
            role_id=str(uuid4()),
            tenant_id=tenant_id,
            name=normalized_name,
            status=RoleStatus.ACTIVE,
            role_version=1,
            created_at=now,
            updated_at=now,
        )
        async with self._uow_factory() as uow:
            role = await uow.roles.create(role)

        logger.info("role created tenant=%s role=%s name=%s", tenant_id, role.role_id, role.name)
        return role
