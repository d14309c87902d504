"""Remove permission override use case."""

from tenantauthz.application.dto import OverrideRemovedOutput
from tenantauthz.application.use_cases.membership.set_override import (
    bump_membership_version,
)
from tenantauthz.domain.exceptions import NotFound
from tenantauthz.telemetry import get_logger

logger = get_logger(__name__)


class RemoveOverrideUseCase:
    """Delete the override of one permission.

    Not idempotent: removing an absent override is NotFound.
    """

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(
        self, tenant_id: str, user_id: str, permission_id: str
    ) -> OverrideRemovedOutput:
        async with self._uow_factory() as uow:
            deleted = await uow.overrides.delete(tenant_id, user_id, permission_id)
            if not deleted:
                raise NotFound("Override", permission_id)
            await uow.commit()

            version = await bump_membership_version(uow, tenant_id, user_id)

        logger.info(
            "override removed tenant=%s user=%s permission=%s version=%s",
            tenant_id,
            user_id,
            permission_id,
            version,
        )
        return OverrideRemovedOutput(
            tenant_id=tenant_id,
            user_id=user_id,
            permission_id=permission_id,
            membership_version=version,
            version_bumped=version is not None,
        )
