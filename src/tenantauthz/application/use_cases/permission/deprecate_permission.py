"""Deprecate permission use case."""

from tenantauthz.domain.entities import Permission
from tenantauthz.domain.exceptions import NotFound
from tenantauthz.domain.value_objects import PermissionStatus
from tenantauthz.telemetry import get_logger

logger = get_logger(__name__)


class DeprecatePermissionUseCase:
    """Move a permission from ACTIVE to DEPRECATED.

    Deprecated permissions stay valid on existing roles and overrides.
    """

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self, permission_id: str) -> Permission:
        async with self._uow_factory() as uow:
            updated = await uow.permissions.update_status(
                permission_id, PermissionStatus.DEPRECATED
            )
            if not updated:
                raise NotFound("Permission", permission_id)

        logger.info("permission deprecated id=%s", permission_id)
        return updated
