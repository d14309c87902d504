"""PostgreSQL membership permission override repository implementation."""

from psycopg import AsyncConnection

from tenantauthz.domain.entities import MembershipPermissionOverride
from tenantauthz.domain.value_objects import OverrideEffect

_COLUMNS = "tenant_id, user_id, permission_id, effect, reason, created_at, updated_at"


def _to_override(r: tuple) -> MembershipPermissionOverride:
    return MembershipPermissionOverride(
        tenant_id=r[0],
        user_id=r[1],
        permission_id=r[2],
        effect=OverrideEffect(r[3]),
        reason=r[4],
        created_at=r[5],
        updated_at=r[6],
    )


class PostgresOverrideRepository:
    """Override repository implementation."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def upsert(
        self,
        tenant_id: str,
        user_id: str,
        permission_id: str,
        effect: OverrideEffect,
        reason: str | None,
    ) -> MembershipPermissionOverride:
        """Create or replace effect/reason for the compound key."""
        cur = await self._conn.execute(
            "INSERT INTO membership_permission_override "
            "(tenant_id, user_id, permission_id, effect, reason, created_at, updated_at) "
            "VALUES (%s, %s, %s, %s, %s, NOW(), NOW()) "
            "ON CONFLICT (tenant_id, user_id, permission_id) "
            "DO UPDATE SET effect = EXCLUDED.effect, reason = EXCLUDED.reason, updated_at = NOW() "
            f"RETURNING {_COLUMNS}",
            (tenant_id, user_id, permission_id, effect.value, reason),
        )
        return _to_override(await cur.fetchone())

    async def delete(
        self, tenant_id: str, user_id: str, permission_id: str
    ) -> MembershipPermissionOverride | None:
        """Delete override and return it, None when absent."""
        cur = await self._conn.execute(
            "DELETE FROM membership_permission_override "
            f"WHERE tenant_id = %s AND user_id = %s AND permission_id = %s RETURNING {_COLUMNS}",
            (tenant_id, user_id, permission_id),
        )
        r = await cur.fetchone()
        return _to_override(r) if r else None

    async def get(
        self, tenant_id: str, user_id: str, permission_id: str
    ) -> MembershipPermissionOverride | None:
        """Get override for one permission."""
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM membership_permission_override "
            "WHERE tenant_id = %s AND user_id = %s AND permission_id = %s",
            (tenant_id, user_id, permission_id),
        )
        r = await cur.fetchone()
        return _to_override(r) if r else None

    async def list_for_membership(
        self, tenant_id: str, user_id: str
    ) -> list[MembershipPermissionOverride]:
        """List all overrides of a membership."""
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM membership_permission_override "
            "WHERE tenant_id = %s AND user_id = %s ORDER BY permission_id",
            (tenant_id, user_id),
        )
        rows = await cur.fetchall()
        return [_to_override(r) for r in rows]
