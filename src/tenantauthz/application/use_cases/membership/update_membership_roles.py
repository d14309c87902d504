"""Update membership roles use case."""

from tenantauthz.application.dto import MembershipRolesOutput
from tenantauthz.application.use_cases.role.update_role_permissions import unique_ids
from tenantauthz.domain.exceptions import NotFound, UnknownReference, ValidationError
from tenantauthz.telemetry import get_logger

logger = get_logger(__name__)


class UpdateMembershipRolesUseCase:
    """Atomically assign and unassign tenant roles on a membership."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(
        self,
        tenant_id: str,
        user_id: str,
        add: list[str],
        remove: list[str],
    ) -> MembershipRolesOutput:
        """Add-to-set, pull-all and bump membership_version in one operation.

        Every role id must belong to `tenant_id`; a role id from another
        tenant is rejected like an unknown one. Membership status is not
        checked.
        """
        add = unique_ids(add)
        remove = unique_ids(remove)
        if not add and not remove:
            raise ValidationError("Nothing to update")

        async with self._uow_factory() as uow:
            requested = set(add) | set(remove)
            found = await uow.roles.find_by_ids(tenant_id, sorted(requested))
            missing = requested - {r.role_id for r in found}
            if missing:
                raise UnknownReference("Invalid role ID(s) for tenant", sorted(missing))

            updated = await uow.memberships.update_roles_atomic(tenant_id, user_id, add, remove)
            if not updated:
                raise NotFound("Tenant membership", f"{tenant_id}/{user_id}")

        logger.info(
            "membership roles updated tenant=%s user=%s version=%d",
            tenant_id,
            user_id,
            updated.membership_version,
        )
        return MembershipRolesOutput(
            tenant_id=updated.tenant_id,
            user_id=updated.user_id,
            role_ids=updated.roles,
            membership_version=updated.membership_version,
            updated_at=updated.updated_at,
        )
