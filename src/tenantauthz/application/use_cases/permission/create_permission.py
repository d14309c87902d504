"""Create permission use case."""

from datetime import UTC, datetime
from uuid import uuid4

from tenantauthz.domain.entities import Permission, normalize_permission_key
from tenantauthz.domain.exceptions import Conflict, ValidationError
from tenantauthz.domain.value_objects import PermissionStatus
from tenantauthz.telemetry import get_logger

logger = get_logger(__name__)


class CreatePermissionUseCase:
    """Register a new permission key in the global catalog."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self, key: str, description: str) -> Permission:
        """Create ACTIVE permission. Key is stored trimmed and uppercase."""
        normalized_key = normalize_permission_key(key or "")
        if not normalized_key or not (description or "").strip():
            raise ValidationError("Key and description are required")

        async with self._uow_factory() as uow:
            if await uow.permissions.get_by_key(normalized_key):
                raise Conflict("Permission key already exists")

            now = datetime.now(UTC)
            permission = Permission(
                permission_id=str(uuid4()),
                key=normalized_key,
                description=description,
                status=PermissionStatus.ACTIVE,
                created_at=now,
                updated_at=now,
            )
            permission = await uow.permissions.create(permission)

        logger.info("permission created key=%s id=%s", permission.key, permission.permission_id)
        return permission
