"""Update role permissions use case."""

from tenantauthz.domain.entities import Role
from tenantauthz.domain.exceptions import NotFound, UnknownReference, ValidationError
from tenantauthz.telemetry import get_logger

logger = get_logger(__name__)


def unique_ids(ids: list[str]) -> list[str]:
    """Drop duplicate ids, keeping first occurrence order."""
    return list(dict.fromkeys(ids))


class UpdateRolePermissionsUseCase:
    """Atomically add and remove permission ids on a role."""

    def __init__(
        self,
        unit_of_work_factory: type,
        reject_deprecated_attachments: bool = False,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._reject_deprecated = reject_deprecated_attachments

    async def execute(
        self,
        tenant_id: str,
        role_id: str,
        add: list[str],
        remove: list[str],
    ) -> Role:
        """Apply add then remove and bump role_version by exactly one.

        The batch is all-or-nothing: one unknown permission id rejects it.
        The version bumps even when the resulting set does not change.
        """
        add = unique_ids(add)
        remove = unique_ids(remove)
        if not add and not remove:
            raise ValidationError("Nothing to update")

        async with self._uow_factory() as uow:
            requested = set(add) | set(remove)
            found = await uow.permissions.find_by_ids(sorted(requested))
            missing = requested - {p.permission_id for p in found}
            if missing:
                raise UnknownReference("Invalid permission ID(s)", sorted(missing))

            if self._reject_deprecated:
                added = set(add)
                if any(p.is_deprecated and p.permission_id in added for p in found):
                    raise ValidationError("Deprecated permission ID(s) cannot be attached")

            updated = await uow.roles.update_permissions_atomic(tenant_id, role_id, add, remove)
            if not updated:
                raise NotFound("Role", role_id)

        logger.info(
            "role permissions updated tenant=%s role=%s added=%d removed=%d version=%d",
            tenant_id,
            role_id,
            len(add),
            len(remove),
            updated.role_version,
        )
        return updated
