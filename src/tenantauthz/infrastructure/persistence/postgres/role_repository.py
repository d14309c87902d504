"""PostgreSQL role repository implementation."""

from datetime import datetime

from psycopg import AsyncConnection, errors

from tenantauthz.domain.entities import Role
from tenantauthz.domain.exceptions import Conflict
from tenantauthz.domain.value_objects import RoleStatus
from tenantauthz.infrastructure.persistence.postgres.set_mutation import set_mutation

_COLUMNS = "role_id, tenant_id, name, status, permissions, role_version, created_at, updated_at"


def _to_role(r: tuple) -> Role:
    return Role(
        role_id=r[0],
        tenant_id=r[1],
        name=r[2],
        status=RoleStatus(r[3]),
        permissions=list(r[4] or []),
        role_version=r[5],
        created_at=r[6],
        updated_at=r[7],
    )


class PostgresRoleRepository:
    """Role repository implementation."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def get_by_id(self, tenant_id: str, role_id: str) -> Role | None:
        """Get role by id within tenant."""
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM role WHERE tenant_id = %s AND role_id = %s",
            (tenant_id, role_id),
        )
        r = await cur.fetchone()
        return _to_role(r) if r else None

    async def find_by_ids(self, tenant_id: str, role_ids: list[str]) -> list[Role]:
        """Get the roles of this tenant among the given ids."""
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM role WHERE tenant_id = %s AND role_id = ANY(%s::text[])",
            (tenant_id, role_ids),
        )
        rows = await cur.fetchall()
        return [_to_role(r) for r in rows]

    async def create(self, role: Role) -> Role:
        """Create role. The (tenant_id, name) unique index is authoritative."""
        try:
            cur = await self._conn.execute(
                "INSERT INTO role (role_id, tenant_id, name, status, permissions, role_version, created_at, updated_at) "
                f"VALUES (%s, %s, %s, %s, %s::text[], %s, %s, %s) RETURNING {_COLUMNS}",
                (
                    role.role_id,
                    role.tenant_id,
                    role.name,
                    role.status.value,
                    role.permissions,
                    role.role_version,
                    role.created_at,
                    role.updated_at,
                ),
            )
        except errors.UniqueViolation as e:
            raise Conflict(f"Role {role.name} already exists in tenant") from e
        return _to_role(await cur.fetchone())

    async def update_permissions_atomic(
        self,
        tenant_id: str,
        role_id: str,
        add: list[str],
        remove: list[str],
    ) -> Role | None:
        """Single-statement add/pull/increment; the row lock serializes editors."""
        cur = await self._conn.execute(
            "UPDATE role SET "
            f"permissions = {set_mutation('permissions')}, "
            "role_version = role_version + 1, updated_at = NOW() "
            f"WHERE tenant_id = %s AND role_id = %s RETURNING {_COLUMNS}",
            (add, remove, tenant_id, role_id),
        )
        r = await cur.fetchone()
        return _to_role(r) if r else None

    async def list_by_tenant(
        self,
        tenant_id: str,
        *,
        after: tuple[datetime, str] | None = None,
        limit: int = 50,
    ) -> list[Role]:
        """List roles ordered by (created_at, role_id) after the given key."""
        conditions = ["tenant_id = %s"]
        _params: list[object] = [tenant_id]
        if after:
            created_at, last_id = after
            conditions.append("(created_at > %s OR (created_at = %s AND role_id > %s))")
            _params.extend([created_at, created_at, last_id])
        where = " AND ".join(conditions)
        params = tuple(_params) + (limit,)
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM role WHERE {where} ORDER BY created_at, role_id LIMIT %s",
            params,
        )
        rows = await cur.fetchall()
        return [_to_role(r) for r in rows]
