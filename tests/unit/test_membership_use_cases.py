"""Unit tests for membership, override and resolution use cases."""

import asyncio
import logging
from unittest.mock import AsyncMock

import pytest

from tenantauthz.application.use_cases.membership.add_membership import (
    ActivateMembershipUseCase,
    AddMembershipUseCase,
)
from tenantauthz.application.use_cases.membership.remove_override import (
    RemoveOverrideUseCase,
)
from tenantauthz.application.use_cases.membership.resolve_permissions import (
    CheckPermissionUseCase,
    ResolveEffectivePermissionsUseCase,
)
from tenantauthz.application.use_cases.membership.set_override import SetOverrideUseCase
from tenantauthz.application.use_cases.membership.suspend_membership import (
    SuspendMembershipUseCase,
    UnsuspendMembershipUseCase,
)
from tenantauthz.application.use_cases.membership.update_membership_roles import (
    UpdateMembershipRolesUseCase,
)
from tenantauthz.domain.exceptions import Conflict, NotFound, UnknownReference, ValidationError
from tenantauthz.domain.value_objects import (
    Decision,
    MembershipStatus,
    OverrideEffect,
    PermissionStatus,
)

from tests.conftest import FakeUnitOfWork, make_membership, make_permission, make_role


@pytest.fixture
def seeded(fake_uow: FakeUnitOfWork) -> dict[str, str]:
    """Tenant t1 with permissions P1..P3, role MANAGER{P1,P2}, role VIEWER{P3}, user u1."""
    ids = {}
    for key in ("P1", "P2", "P3"):
        ids[key] = fake_uow.permissions.add_permission(make_permission(key)).permission_id
    ids["MANAGER"] = fake_uow.roles.add_role(
        make_role("t1", "MANAGER", [ids["P1"], ids["P2"]])
    ).role_id
    ids["VIEWER"] = fake_uow.roles.add_role(make_role("t1", "VIEWER", [ids["P3"]])).role_id
    ids["FOREIGN"] = fake_uow.roles.add_role(make_role("t2", "MANAGER", [ids["P3"]])).role_id
    fake_uow.memberships.add_membership(make_membership("t1", "u1"))
    return ids


# --- AddMembershipUseCase / ActivateMembershipUseCase ---


@pytest.mark.asyncio
async def test_add_membership(uow_factory) -> None:
    membership = await AddMembershipUseCase(uow_factory).execute("t1", "u9")

    assert membership.status == MembershipStatus.ACTIVE
    assert membership.roles == []
    assert membership.membership_version == 1


@pytest.mark.asyncio
async def test_add_membership_twice_conflicts(uow_factory) -> None:
    use_case = AddMembershipUseCase(uow_factory)
    await use_case.execute("t1", "u9")

    with pytest.raises(Conflict, match="ACTIVE"):
        await use_case.execute("t1", "u9")


@pytest.mark.asyncio
async def test_add_membership_rejects_suspended_start(uow_factory) -> None:
    with pytest.raises(ValidationError):
        await AddMembershipUseCase(uow_factory).execute(
            "t1", "u9", status=MembershipStatus.SUSPENDED
        )


@pytest.mark.asyncio
async def test_invited_membership_activated_by_add(uow_factory) -> None:
    use_case = AddMembershipUseCase(uow_factory)
    await use_case.execute("t1", "u9", status=MembershipStatus.INVITED)

    membership = await use_case.execute("t1", "u9")

    assert membership.status == MembershipStatus.ACTIVE
    assert membership.membership_version == 2


@pytest.mark.asyncio
async def test_activate_only_once(uow_factory) -> None:
    await AddMembershipUseCase(uow_factory).execute("t1", "u9", status=MembershipStatus.INVITED)
    activate = ActivateMembershipUseCase(uow_factory)

    activated = await activate.execute("t1", "u9")
    assert activated.status == MembershipStatus.ACTIVE

    with pytest.raises(Conflict):
        await activate.execute("t1", "u9")


@pytest.mark.asyncio
async def test_activate_missing_membership_not_found(uow_factory) -> None:
    with pytest.raises(NotFound):
        await ActivateMembershipUseCase(uow_factory).execute("t1", "nobody")


# --- UpdateMembershipRolesUseCase ---


@pytest.mark.asyncio
async def test_assign_and_unassign_roles(uow_factory, seeded) -> None:
    use_case = UpdateMembershipRolesUseCase(uow_factory)

    assigned = await use_case.execute("t1", "u1", [seeded["MANAGER"], seeded["VIEWER"]], [])
    assert assigned.role_ids == [seeded["MANAGER"], seeded["VIEWER"]]
    assert assigned.membership_version == 2

    unassigned = await use_case.execute("t1", "u1", [], [seeded["VIEWER"]])
    assert unassigned.role_ids == [seeded["MANAGER"]]
    assert unassigned.membership_version == 3


@pytest.mark.asyncio
async def test_role_from_other_tenant_rejected(uow_factory, fake_uow, seeded) -> None:
    with pytest.raises(UnknownReference) as exc_info:
        await UpdateMembershipRolesUseCase(uow_factory).execute(
            "t1", "u1", [seeded["MANAGER"], seeded["FOREIGN"]], []
        )

    assert exc_info.value.missing == [seeded["FOREIGN"]]
    assert fake_uow.memberships.update_calls == 0
    assert (await fake_uow.memberships.get("t1", "u1")).roles == []


@pytest.mark.asyncio
async def test_roles_nothing_to_update(uow_factory, fake_uow, seeded) -> None:
    with pytest.raises(ValidationError, match="Nothing to update"):
        await UpdateMembershipRolesUseCase(uow_factory).execute("t1", "u1", [], [])
    assert fake_uow.memberships.update_calls == 0


@pytest.mark.asyncio
async def test_roles_missing_membership_not_found(uow_factory, seeded) -> None:
    with pytest.raises(NotFound, match="Tenant membership"):
        await UpdateMembershipRolesUseCase(uow_factory).execute(
            "t1", "nobody", [seeded["MANAGER"]], []
        )


@pytest.mark.asyncio
async def test_roles_editable_while_suspended(uow_factory, fake_uow, seeded) -> None:
    await SuspendMembershipUseCase(uow_factory).execute("t1", "u1")

    result = await UpdateMembershipRolesUseCase(uow_factory).execute(
        "t1", "u1", [seeded["MANAGER"]], []
    )

    assert result.role_ids == [seeded["MANAGER"]]


@pytest.mark.asyncio
async def test_concurrent_role_edits_lose_nothing(uow_factory, fake_uow, seeded) -> None:
    use_case = UpdateMembershipRolesUseCase(uow_factory)
    await use_case.execute("t1", "u1", [seeded["MANAGER"]], [])

    await asyncio.gather(
        use_case.execute("t1", "u1", [seeded["VIEWER"]], []),
        use_case.execute("t1", "u1", [], [seeded["MANAGER"]]),
    )

    current = await fake_uow.memberships.get("t1", "u1")
    assert current.roles == [seeded["VIEWER"]]
    assert current.membership_version == 4


# --- Suspend / Unsuspend ---


@pytest.mark.asyncio
async def test_suspend_twice_bumps_twice(uow_factory, seeded) -> None:
    """Status writes are unconditional; each one bumps the version."""
    suspend = SuspendMembershipUseCase(uow_factory)

    first = await suspend.execute("t1", "u1")
    second = await suspend.execute("t1", "u1")

    assert first.status == MembershipStatus.SUSPENDED
    assert second.status == MembershipStatus.SUSPENDED
    assert (first.membership_version, second.membership_version) == (2, 3)


@pytest.mark.asyncio
async def test_unsuspend(uow_factory, seeded) -> None:
    await SuspendMembershipUseCase(uow_factory).execute("t1", "u1")

    result = await UnsuspendMembershipUseCase(uow_factory).execute("t1", "u1")

    assert result.status == MembershipStatus.ACTIVE
    assert result.membership_version == 3


@pytest.mark.asyncio
async def test_suspend_reason_is_logged(uow_factory, seeded, caplog) -> None:
    caplog.set_level(logging.INFO, logger="tenantauthz.application.use_cases.membership")

    await SuspendMembershipUseCase(uow_factory).execute("t1", "u1", reason="chargeback")

    assert "status=SUSPENDED" in caplog.text
    assert "reason=chargeback" in caplog.text


@pytest.mark.asyncio
async def test_suspend_missing_membership_not_found(uow_factory) -> None:
    with pytest.raises(NotFound):
        await SuspendMembershipUseCase(uow_factory).execute("t1", "nobody")


# --- SetOverrideUseCase / RemoveOverrideUseCase ---


@pytest.mark.asyncio
async def test_set_override_twice_bumps_twice(uow_factory, fake_uow, seeded) -> None:
    use_case = SetOverrideUseCase(uow_factory)

    first = await use_case.execute("t1", "u1", seeded["P1"], OverrideEffect.ALLOW)
    second = await use_case.execute("t1", "u1", seeded["P1"], OverrideEffect.ALLOW)

    assert first.membership_version == 2
    assert second.membership_version == 3
    assert second.version_bumped
    assert len(await fake_uow.overrides.list_for_membership("t1", "u1")) == 1
    assert fake_uow.commits == 2


@pytest.mark.asyncio
async def test_set_override_replaces_effect(uow_factory, fake_uow, seeded) -> None:
    use_case = SetOverrideUseCase(uow_factory)
    await use_case.execute("t1", "u1", seeded["P1"], OverrideEffect.ALLOW, reason="trial")

    result = await use_case.execute("t1", "u1", seeded["P1"], OverrideEffect.DENY)

    stored = await fake_uow.overrides.get("t1", "u1", seeded["P1"])
    assert result.effect == OverrideEffect.DENY
    assert stored.effect == OverrideEffect.DENY
    assert stored.reason is None


@pytest.mark.asyncio
async def test_set_override_unknown_permission(uow_factory, seeded) -> None:
    with pytest.raises(ValidationError, match="Invalid permissionId"):
        await SetOverrideUseCase(uow_factory).execute("t1", "u1", "P404", OverrideEffect.DENY)


@pytest.mark.asyncio
async def test_set_override_missing_membership(uow_factory, fake_uow, seeded) -> None:
    with pytest.raises(NotFound):
        await SetOverrideUseCase(uow_factory).execute(
            "t1", "nobody", seeded["P1"], OverrideEffect.ALLOW
        )
    assert await fake_uow.overrides.list_for_membership("t1", "nobody") == []


@pytest.mark.asyncio
async def test_set_override_deprecated_permission(uow_factory, fake_uow, seeded) -> None:
    deprecated = fake_uow.permissions.add_permission(
        make_permission("OLD", status=PermissionStatus.DEPRECATED)
    )

    result = await SetOverrideUseCase(uow_factory).execute(
        "t1", "u1", deprecated.permission_id, OverrideEffect.ALLOW
    )
    assert result.effect == OverrideEffect.ALLOW

    strict = SetOverrideUseCase(uow_factory, reject_deprecated_attachments=True)
    with pytest.raises(ValidationError, match="Deprecated"):
        await strict.execute("t1", "u1", deprecated.permission_id, OverrideEffect.ALLOW)


@pytest.mark.asyncio
async def test_override_survives_failed_version_bump(uow_factory, fake_uow, seeded) -> None:
    """The committed override stays; the result reports the missed bump."""
    fake_uow.memberships.fail_increment = True

    result = await SetOverrideUseCase(uow_factory).execute(
        "t1", "u1", seeded["P1"], OverrideEffect.DENY
    )

    assert result.version_bumped is False
    assert result.membership_version is None
    assert fake_uow.rollbacks == 1
    assert await fake_uow.overrides.get("t1", "u1", seeded["P1"]) is not None
    assert (await fake_uow.memberships.get("t1", "u1")).membership_version == 1


@pytest.mark.asyncio
async def test_override_survives_failed_bump_and_failed_rollback(
    uow_factory, fake_uow, seeded
) -> None:
    fake_uow.memberships.fail_increment = True
    fake_uow.rollback = AsyncMock(side_effect=ConnectionError("connection lost"))

    result = await SetOverrideUseCase(uow_factory).execute(
        "t1", "u1", seeded["P1"], OverrideEffect.ALLOW
    )

    assert result.version_bumped is False
    assert result.membership_version is None
    fake_uow.rollback.assert_awaited_once()
    assert (await fake_uow.overrides.get("t1", "u1", seeded["P1"])).effect == OverrideEffect.ALLOW


@pytest.mark.asyncio
async def test_remove_override_not_idempotent(uow_factory, seeded) -> None:
    await SetOverrideUseCase(uow_factory).execute("t1", "u1", seeded["P1"], OverrideEffect.ALLOW)
    remove = RemoveOverrideUseCase(uow_factory)

    removed = await remove.execute("t1", "u1", seeded["P1"])
    assert removed.deleted
    assert removed.membership_version == 3

    with pytest.raises(NotFound, match="Override"):
        await remove.execute("t1", "u1", seeded["P1"])


# --- Resolution ---


@pytest.mark.asyncio
async def test_deny_override_then_removal_restores_role_grant(uow_factory, seeded) -> None:
    """MANAGER grants P1; a DENY override revokes it until the override is removed."""
    await UpdateMembershipRolesUseCase(uow_factory).execute("t1", "u1", [seeded["MANAGER"]], [])
    check = CheckPermissionUseCase(uow_factory)
    resolve = ResolveEffectivePermissionsUseCase(uow_factory)

    assert await check.execute("t1", "u1", seeded["P1"]) == Decision.ALLOW

    await SetOverrideUseCase(uow_factory).execute("t1", "u1", seeded["P1"], OverrideEffect.DENY)
    assert await check.execute("t1", "u1", seeded["P1"]) == Decision.DENY
    effective = await resolve.execute("t1", "u1")
    assert effective.allowed == {seeded["P2"]}
    assert effective.denied == {seeded["P1"]}
    assert effective.membership_version == 3

    await RemoveOverrideUseCase(uow_factory).execute("t1", "u1", seeded["P1"])
    assert await check.execute("t1", "u1", seeded["P1"]) == Decision.ALLOW
    effective = await resolve.execute("t1", "u1")
    assert effective.allowed == {seeded["P1"], seeded["P2"]}
    assert effective.membership_version == 4


@pytest.mark.asyncio
async def test_allow_override_grants_without_role(uow_factory, seeded) -> None:
    await SetOverrideUseCase(uow_factory).execute("t1", "u1", seeded["P3"], OverrideEffect.ALLOW)

    effective = await ResolveEffectivePermissionsUseCase(uow_factory).execute("t1", "u1")

    assert effective.is_allowed(seeded["P3"])
    assert effective.role_versions == {}


@pytest.mark.asyncio
async def test_check_defaults_to_deny(uow_factory, seeded) -> None:
    assert await CheckPermissionUseCase(uow_factory).execute("t1", "u1", seeded["P1"]) == Decision.DENY
    assert (
        await CheckPermissionUseCase(uow_factory).execute("t1", "nobody", seeded["P1"])
        == Decision.DENY
    )


@pytest.mark.asyncio
async def test_resolve_reports_role_versions(uow_factory, seeded) -> None:
    await UpdateMembershipRolesUseCase(uow_factory).execute(
        "t1", "u1", [seeded["MANAGER"], seeded["VIEWER"]], []
    )

    effective = await ResolveEffectivePermissionsUseCase(uow_factory).execute("t1", "u1")

    assert effective.allowed == {seeded["P1"], seeded["P2"], seeded["P3"]}
    assert effective.role_versions == {seeded["MANAGER"]: 1, seeded["VIEWER"]: 1}


@pytest.mark.asyncio
async def test_resolve_missing_membership(uow_factory) -> None:
    effective = await ResolveEffectivePermissionsUseCase(uow_factory).execute("t1", "nobody")

    assert effective.allowed == frozenset()
    assert effective.membership_version is None
