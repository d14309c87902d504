"""PostgreSQL Unit of Work implementation."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from psycopg import AsyncConnection, errors
from psycopg_pool import AsyncConnectionPool

from tenantauthz.domain.exceptions import ValidationError
from tenantauthz.infrastructure.persistence.postgres.membership_repository import (
    PostgresMembershipRepository,
)
from tenantauthz.infrastructure.persistence.postgres.override_repository import (
    PostgresOverrideRepository,
)
from tenantauthz.infrastructure.persistence.postgres.permission_repository import (
    PostgresPermissionRepository,
)
from tenantauthz.infrastructure.persistence.postgres.role_repository import (
    PostgresRoleRepository,
)


class PostgresUnitOfWork:
    """PostgreSQL Unit of Work - one connection, one transaction at a time.

    commit() may be called mid-way; statements after it run in a new
    transaction on the same connection.

    Once a rollback fails the transaction is abandoned and commit() is a
    no-op; the pool discards the broken connection on release.
    """

    def __init__(self, pool: AsyncConnectionPool) -> None:
        self._pool = pool
        self._conn: AsyncConnection | None = None
        self._conn_cm: object | None = None
        self._abandoned = False

    async def __aenter__(self) -> "PostgresUnitOfWork":
        self._conn_cm = self._pool.connection()
        self._conn = await self._conn_cm.__aenter__()
        self._permissions = PostgresPermissionRepository(self._conn)
        self._roles = PostgresRoleRepository(self._conn)
        self._memberships = PostgresMembershipRepository(self._conn)
        self._overrides = PostgresOverrideRepository(self._conn)
        return self

    async def __aexit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        if exc_type and self._conn:
            await self._conn.rollback()
        if self._conn_cm:
            await self._conn_cm.__aexit__(exc_type, exc_val, exc_tb)

    @property
    def permissions(self) -> PostgresPermissionRepository:
        return self._permissions

    @property
    def roles(self) -> PostgresRoleRepository:
        return self._roles

    @property
    def memberships(self) -> PostgresMembershipRepository:
        return self._memberships

    @property
    def overrides(self) -> PostgresOverrideRepository:
        return self._overrides

    async def commit(self) -> None:
        if self._conn and not self._abandoned:
            await self._conn.commit()

    async def rollback(self) -> None:
        if not self._conn:
            return
        try:
            await self._conn.rollback()
        except errors.OperationalError:
            self._abandoned = True
            raise


def create_uow_factory(pool: AsyncConnectionPool) -> object:
    """Create UnitOfWork factory (async context manager)."""

    @asynccontextmanager
    async def factory() -> AsyncIterator[PostgresUnitOfWork]:
        uow = PostgresUnitOfWork(pool)
        async with uow:
            try:
                yield uow
                await uow.commit()
            except errors.DataError as e:
                await uow.rollback()
                raise ValidationError(f"Invalid value: {e.diag.message_primary or e}") from e
            except BaseException:
                await uow.rollback()
                raise

    return factory
