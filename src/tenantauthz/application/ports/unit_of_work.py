"""Unit of Work port - transactional boundary."""

from collections.abc import AsyncIterator
from typing import Protocol

from tenantauthz.application.ports.repositories import (
    MembershipRepository,
    OverrideRepository,
    PermissionRepository,
    RoleRepository,
)


class UnitOfWork(Protocol):
    """Unit of Work - manages transaction and repository access."""

    @property
    def permissions(self) -> PermissionRepository: ...

    @property
    def roles(self) -> RoleRepository: ...

    @property
    def memberships(self) -> MembershipRepository: ...

    @property
    def overrides(self) -> OverrideRepository: ...

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...


class UnitOfWorkFactory(Protocol):
    """Factory for creating UnitOfWork instances."""

    async def __call__(self) -> AsyncIterator[UnitOfWork]: ...
