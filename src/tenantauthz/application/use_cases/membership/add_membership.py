"""Add and activate membership use cases."""

from datetime import UTC, datetime
from uuid import uuid4

from tenantauthz.domain.entities import TenantMembership
from tenantauthz.domain.exceptions import Conflict, NotFound, ValidationError
from tenantauthz.domain.value_objects import MembershipStatus
from tenantauthz.telemetry import get_logger

logger = get_logger(__name__)

_INITIAL_STATUSES = (MembershipStatus.ACTIVE, MembershipStatus.INVITED)


async def _activate(uow, tenant_id: str, user_id: str) -> TenantMembership:
    """Conditionally move INVITED -> ACTIVE inside an open unit of work."""
    activated = await uow.memberships.update_status(
        tenant_id,
        user_id,
        MembershipStatus.ACTIVE,
        expected=MembershipStatus.INVITED,
    )
    if activated:
        logger.info(
            "membership activated tenant=%s user=%s version=%d",
            tenant_id,
            user_id,
            activated.membership_version,
        )
        return activated

    current = await uow.memberships.get(tenant_id, user_id)
    if not current:
        raise NotFound("Membership", f"{tenant_id}/{user_id}")
    raise Conflict(f"User already has {current.status} membership in this tenant")


class AddMembershipUseCase:
    """Add a user to a tenant, or accept a pending invitation."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(
        self,
        tenant_id: str,
        user_id: str,
        status: MembershipStatus = MembershipStatus.ACTIVE,
        expires_at: datetime | None = None,
    ) -> TenantMembership:
        """Create membership with no roles and membership_version 1.

        An existing INVITED membership asked to become ACTIVE is activated
        instead. Any other existing membership is a Conflict.
        """
        if status not in _INITIAL_STATUSES:
            raise ValidationError("Membership can only start ACTIVE or INVITED")

        async with self._uow_factory() as uow:
            existing = await uow.memberships.get(tenant_id, user_id)
            if existing:
                if (
                    existing.status == MembershipStatus.INVITED
                    and status == MembershipStatus.ACTIVE
                ):
                    return await _activate(uow, tenant_id, user_id)
                raise Conflict(
                    f"User already has {existing.status} membership in this tenant"
                )

            now = datetime.now(UTC)
            membership = TenantMembership(
                membership_id=str(uuid4()),
                tenant_id=tenant_id,
                user_id=user_id,
                status=status,
                membership_version=1,
                created_at=now,
                updated_at=now,
                expires_at=expires_at,
            )
            membership = await uow.memberships.create(membership)

        logger.info("membership created tenant=%s user=%s status=%s", tenant_id, user_id, status)
        return membership


class ActivateMembershipUseCase:
    """INVITED -> ACTIVE, exactly once."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self, tenant_id: str, user_id: str) -> TenantMembership:
        async with self._uow_factory() as uow:
            return await _activate(uow, tenant_id, user_id)
