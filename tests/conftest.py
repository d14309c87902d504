"""Pytest fixtures for tenantauthz tests."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import replace
from datetime import UTC, datetime, timedelta
from uuid import uuid4

import pytest

from tenantauthz.domain.entities import (
    MembershipPermissionOverride,
    Permission,
    Role,
    TenantMembership,
)
from tenantauthz.domain.exceptions import Conflict
from tenantauthz.domain.value_objects import (
    MembershipStatus,
    OverrideEffect,
    PermissionStatus,
    RoleStatus,
)

# Fake repository methods never await between read and write, so each call
# is atomic under asyncio like the single-statement SQL they stand in for.


def apply_set_mutation(current: list[str], add: list[str], remove: list[str]) -> list[str]:
    """Add-to-set then pull-all, preserving first-seen order."""
    result = list(current)
    for item in add:
        if item not in result:
            result.append(item)
    pulled = set(remove)
    return [item for item in result if item not in pulled]


# --- Fake repositories ---


class FakePermissionRepository:
    """In-memory permission registry with an insertion sequence."""

    def __init__(self) -> None:
        self._by_id: dict[str, Permission] = {}
        self._seq = 0

    def add_permission(self, permission: Permission) -> Permission:
        self._seq += 1
        permission.seq = self._seq
        self._by_id[permission.permission_id] = permission
        return permission

    async def get_by_id(self, permission_id: str) -> Permission | None:
        return self._by_id.get(permission_id)

    async def get_by_key(self, key: str) -> Permission | None:
        for p in self._by_id.values():
            if p.key == key:
                return p
        return None

    async def find_by_ids(self, permission_ids: list[str]) -> list[Permission]:
        return [self._by_id[pid] for pid in permission_ids if pid in self._by_id]

    async def create(self, permission: Permission) -> Permission:
        if any(p.key == permission.key for p in self._by_id.values()):
            raise Conflict("Permission key already exists")
        return self.add_permission(permission)

    async def update_status(
        self, permission_id: str, status: PermissionStatus
    ) -> Permission | None:
        p = self._by_id.get(permission_id)
        if not p:
            return None
        p.status = status
        p.updated_at = datetime.now(UTC)
        return p

    async def list(
        self,
        *,
        status: PermissionStatus | None = None,
        query: str | None = None,
        after_seq: int | None = None,
        limit: int = 50,
    ) -> list[Permission]:
        items = sorted(self._by_id.values(), key=lambda p: p.seq)
        if status:
            items = [p for p in items if p.status == status]
        if query:
            q = query.lower()
            items = [p for p in items if q in p.key.lower() or q in p.description.lower()]
        if after_seq is not None:
            items = [p for p in items if p.seq > after_seq]
        return items[:limit]


class FakeRoleRepository:
    """In-memory role store keyed by (tenant_id, role_id)."""

    def __init__(self) -> None:
        self._by_key: dict[tuple[str, str], Role] = {}
        self.update_calls = 0

    def add_role(self, role: Role) -> Role:
        self._by_key[(role.tenant_id, role.role_id)] = role
        return role

    async def get_by_id(self, tenant_id: str, role_id: str) -> Role | None:
        return self._by_key.get((tenant_id, role_id))

    async def find_by_ids(self, tenant_id: str, role_ids: list[str]) -> list[Role]:
        return [self._by_key[(tenant_id, rid)] for rid in role_ids if (tenant_id, rid) in self._by_key]

    async def create(self, role: Role) -> Role:
        if any(r.tenant_id == role.tenant_id and r.name == role.name for r in self._by_key.values()):
            raise Conflict(f"Role {role.name} already exists in tenant")
        return self.add_role(role)

    async def update_permissions_atomic(
        self,
        tenant_id: str,
        role_id: str,
        add: list[str],
        remove: list[str],
    ) -> Role | None:
        self.update_calls += 1
        role = self._by_key.get((tenant_id, role_id))
        if not role:
            return None
        role.permissions = apply_set_mutation(role.permissions, add, remove)
        role.role_version += 1
        role.updated_at = datetime.now(UTC)
        return replace(role, permissions=list(role.permissions))

    async def list_by_tenant(
        self,
        tenant_id: str,
        *,
        after: tuple[datetime, str] | None = None,
        limit: int = 50,
    ) -> list[Role]:
        items = sorted(
            (r for r in self._by_key.values() if r.tenant_id == tenant_id),
            key=lambda r: (r.created_at, r.role_id),
        )
        if after:
            items = [r for r in items if (r.created_at, r.role_id) > after]
        return items[:limit]


class FakeMembershipRepository:
    """In-memory membership store keyed by (tenant_id, user_id)."""

    def __init__(self) -> None:
        self._by_key: dict[tuple[str, str], TenantMembership] = {}
        self.update_calls = 0
        self.fail_increment = False

    def add_membership(self, membership: TenantMembership) -> TenantMembership:
        self._by_key[(membership.tenant_id, membership.user_id)] = membership
        return membership

    def _bump(self, membership: TenantMembership) -> TenantMembership:
        membership.membership_version += 1
        membership.updated_at = datetime.now(UTC)
        return replace(membership, roles=list(membership.roles))

    async def get(self, tenant_id: str, user_id: str) -> TenantMembership | None:
        m = self._by_key.get((tenant_id, user_id))
        return replace(m, roles=list(m.roles)) if m else None

    async def create(self, membership: TenantMembership) -> TenantMembership:
        if (membership.tenant_id, membership.user_id) in self._by_key:
            raise Conflict("User already has a membership in this tenant")
        return self.add_membership(membership)

    async def update_roles_atomic(
        self,
        tenant_id: str,
        user_id: str,
        add: list[str],
        remove: list[str],
    ) -> TenantMembership | None:
        self.update_calls += 1
        m = self._by_key.get((tenant_id, user_id))
        if not m:
            return None
        m.roles = apply_set_mutation(m.roles, add, remove)
        return self._bump(m)

    async def update_status(
        self,
        tenant_id: str,
        user_id: str,
        status: MembershipStatus,
        *,
        expected: MembershipStatus | None = None,
    ) -> TenantMembership | None:
        m = self._by_key.get((tenant_id, user_id))
        if not m or (expected is not None and m.status != expected):
            return None
        m.status = status
        return self._bump(m)

    async def increment_version(
        self, tenant_id: str, user_id: str
    ) -> TenantMembership | None:
        if self.fail_increment:
            raise RuntimeError("store unavailable")
        m = self._by_key.get((tenant_id, user_id))
        if not m:
            return None
        return self._bump(m)


class FakeOverrideRepository:
    """In-memory override store keyed by (tenant_id, user_id, permission_id)."""

    def __init__(self) -> None:
        self._by_key: dict[tuple[str, str, str], MembershipPermissionOverride] = {}

    async def upsert(
        self,
        tenant_id: str,
        user_id: str,
        permission_id: str,
        effect: OverrideEffect,
        reason: str | None,
    ) -> MembershipPermissionOverride:
        key = (tenant_id, user_id, permission_id)
        now = datetime.now(UTC)
        existing = self._by_key.get(key)
        override = MembershipPermissionOverride(
            tenant_id=tenant_id,
            user_id=user_id,
            permission_id=permission_id,
            effect=effect,
            created_at=existing.created_at if existing else now,
            updated_at=now,
            reason=reason,
        )
        self._by_key[key] = override
        return override

    async def delete(
        self, tenant_id: str, user_id: str, permission_id: str
    ) -> MembershipPermissionOverride | None:
        return self._by_key.pop((tenant_id, user_id, permission_id), None)

    async def get(
        self, tenant_id: str, user_id: str, permission_id: str
    ) -> MembershipPermissionOverride | None:
        return self._by_key.get((tenant_id, user_id, permission_id))

    async def list_for_membership(
        self, tenant_id: str, user_id: str
    ) -> list[MembershipPermissionOverride]:
        return [
            o
            for (t, u, _), o in self._by_key.items()
            if t == tenant_id and u == user_id
        ]


class FakeUnitOfWork:
    """In-memory Unit of Work with fake repositories."""

    def __init__(self) -> None:
        self.permissions = FakePermissionRepository()
        self.roles = FakeRoleRepository()
        self.memberships = FakeMembershipRepository()
        self.overrides = FakeOverrideRepository()
        self.commits = 0
        self.rollbacks = 0

    async def commit(self) -> None:
        self.commits += 1

    async def rollback(self) -> None:
        self.rollbacks += 1


def make_uow_factory(uow: FakeUnitOfWork):
    """Factory that yields the same FakeUnitOfWork on every call."""

    @asynccontextmanager
    async def _factory() -> AsyncIterator[FakeUnitOfWork]:
        yield uow

    return _factory


# --- Builders ---

EPOCH = datetime(2024, 1, 1, tzinfo=UTC)


def make_permission(
    key: str,
    status: PermissionStatus = PermissionStatus.ACTIVE,
    permission_id: str | None = None,
) -> Permission:
    return Permission(
        permission_id=permission_id or str(uuid4()),
        key=key,
        description=f"{key} permission",
        status=status,
        created_at=EPOCH,
        updated_at=EPOCH,
    )


def make_role(
    tenant_id: str,
    name: str,
    permissions: list[str] | None = None,
    role_id: str | None = None,
    created_offset: int = 0,
) -> Role:
    created_at = EPOCH + timedelta(seconds=created_offset)
    return Role(
        role_id=role_id or str(uuid4()),
        tenant_id=tenant_id,
        name=name,
        status=RoleStatus.ACTIVE,
        role_version=1,
        created_at=created_at,
        updated_at=created_at,
        permissions=list(permissions or []),
    )


def make_membership(
    tenant_id: str,
    user_id: str,
    roles: list[str] | None = None,
    status: MembershipStatus = MembershipStatus.ACTIVE,
) -> TenantMembership:
    return TenantMembership(
        membership_id=str(uuid4()),
        tenant_id=tenant_id,
        user_id=user_id,
        status=status,
        membership_version=1,
        created_at=EPOCH,
        updated_at=EPOCH,
        roles=list(roles or []),
    )


# --- Fixtures ---


@pytest.fixture
def fake_uow() -> FakeUnitOfWork:
    """Fresh in-memory UnitOfWork for each test."""
    return FakeUnitOfWork()


@pytest.fixture
def uow_factory(fake_uow: FakeUnitOfWork):
    """Factory returning async context manager over the test's FakeUnitOfWork."""
    return make_uow_factory(fake_uow)
