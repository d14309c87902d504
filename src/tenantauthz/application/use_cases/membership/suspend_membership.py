"""Suspend and unsuspend membership use cases."""

from tenantauthz.application.dto import MembershipStatusOutput
from tenantauthz.domain.exceptions import NotFound
from tenantauthz.domain.value_objects import MembershipStatus
from tenantauthz.telemetry import get_logger

logger = get_logger(__name__)


class _SetMembershipStatusUseCase:
    """Unconditional status transition; bumps the version every call."""

    target_status: MembershipStatus

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(
        self, tenant_id: str, user_id: str, reason: str | None = None
    ) -> MembershipStatusOutput:
        """Set target_status; `reason` is recorded in the audit log line only."""
        async with self._uow_factory() as uow:
            membership = await uow.memberships.update_status(
                tenant_id, user_id, self.target_status
            )
            if not membership:
                raise NotFound("Membership", f"{tenant_id}/{user_id}")

        logger.info(
            "membership status set tenant=%s user=%s status=%s version=%d reason=%s",
            tenant_id,
            user_id,
            membership.status,
            membership.membership_version,
            reason,
        )
        return MembershipStatusOutput(
            tenant_id=membership.tenant_id,
            user_id=membership.user_id,
            status=membership.status,
            membership_version=membership.membership_version,
        )


class SuspendMembershipUseCase(_SetMembershipStatusUseCase):
    """Set membership SUSPENDED."""

    target_status = MembershipStatus.SUSPENDED


class UnsuspendMembershipUseCase(_SetMembershipStatusUseCase):
    """Set membership ACTIVE."""

    target_status = MembershipStatus.ACTIVE
