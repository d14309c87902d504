"""Set permission override use case."""

from tenantauthz.application.dto import OverrideSetOutput
from tenantauthz.domain.exceptions import NotFound, ValidationError
from tenantauthz.domain.value_objects import OverrideEffect
from tenantauthz.telemetry import get_logger

logger = get_logger(__name__)


async def bump_membership_version(uow, tenant_id: str, user_id: str) -> int | None:
    """Second step after an override write: bump membership_version.

    The override write is already committed. A failure here leaves the
    override in place with a stale version, so it is logged and reported as
    None instead of failing the request.
    """
    try:
        membership = await uow.memberships.increment_version(tenant_id, user_id)
    except Exception:
        logger.warning(
            "membership version bump failed tenant=%s user=%s",
            tenant_id,
            user_id,
            exc_info=True,
        )
        try:
            await uow.rollback()
        except Exception:
            logger.warning(
                "rollback after failed version bump failed tenant=%s user=%s",
                tenant_id,
                user_id,
                exc_info=True,
            )
        return None
    if not membership:
        logger.warning(
            "membership vanished before version bump tenant=%s user=%s", tenant_id, user_id
        )
        return None
    return membership.membership_version


class SetOverrideUseCase:
    """Create or replace the ALLOW/DENY override of one permission."""

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
        user_id: str,
        permission_id: str,
        effect: OverrideEffect,
        reason: str | None = None,
    ) -> OverrideSetOutput:
        """Upsert override, commit, then bump membership_version.

        The version bumps on every call, even when the effect is unchanged.
        """
        async with self._uow_factory() as uow:
            permission = await uow.permissions.get_by_id(permission_id)
            if not permission:
                raise ValidationError("Invalid permissionId")
            if self._reject_deprecated and permission.is_deprecated:
                raise ValidationError("Deprecated permission cannot be attached")

            membership = await uow.memberships.get(tenant_id, user_id)
            if not membership:
                raise NotFound("Membership", f"{tenant_id}/{user_id}")

            override = await uow.overrides.upsert(
                tenant_id, user_id, permission_id, effect, reason
            )
            await uow.commit()

            version = await bump_membership_version(uow, tenant_id, user_id)

        logger.info(
            "override set tenant=%s user=%s permission=%s effect=%s version=%s",
            tenant_id,
            user_id,
            permission_id,
            override.effect,
            version,
        )
        return OverrideSetOutput(
            tenant_id=tenant_id,
            user_id=user_id,
            permission_id=permission_id,
            effect=override.effect,
            created_at=override.created_at,
            membership_version=version,
            version_bumped=version is not None,
        )
