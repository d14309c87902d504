"""PostgreSQL permission registry repository implementation."""

from psycopg import AsyncConnection, errors

from tenantauthz.domain.entities import Permission
from tenantauthz.domain.exceptions import Conflict
from tenantauthz.domain.value_objects import PermissionStatus

_COLUMNS = "permission_id, key, description, status, created_at, updated_at, seq"


def _to_permission(r: tuple) -> Permission:
    return Permission(
        permission_id=r[0],
        key=r[1],
        description=r[2],
        status=PermissionStatus(r[3]),
        created_at=r[4],
        updated_at=r[5],
        seq=r[6],
    )


def _like_pattern(query: str) -> str:
    escaped = query.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class PostgresPermissionRepository:
    """Permission repository implementation."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def get_by_id(self, permission_id: str) -> Permission | None:
        """Get permission by id."""
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM permission WHERE permission_id = %s",
            (permission_id,),
        )
        r = await cur.fetchone()
        return _to_permission(r) if r else None

    async def get_by_key(self, key: str) -> Permission | None:
        """Get permission by normalized key."""
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM permission WHERE key = %s",
            (key,),
        )
        r = await cur.fetchone()
        return _to_permission(r) if r else None

    async def find_by_ids(self, permission_ids: list[str]) -> list[Permission]:
        """Get the permissions that exist among the given ids."""
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM permission WHERE permission_id = ANY(%s::text[])",
            (permission_ids,),
        )
        rows = await cur.fetchall()
        return [_to_permission(r) for r in rows]

    async def create(self, permission: Permission) -> Permission:
        """Insert permission; seq is assigned by the database."""
        try:
            cur = await self._conn.execute(
                "INSERT INTO permission (permission_id, key, description, status, created_at, updated_at) "
                f"VALUES (%s, %s, %s, %s, %s, %s) RETURNING {_COLUMNS}",
                (
                    permission.permission_id,
                    permission.key,
                    permission.description,
                    permission.status.value,
                    permission.created_at,
                    permission.updated_at,
                ),
            )
        except errors.UniqueViolation as e:
            raise Conflict("Permission key already exists") from e
        return _to_permission(await cur.fetchone())

    async def update_status(
        self, permission_id: str, status: PermissionStatus
    ) -> Permission | None:
        """Set status and return the updated row."""
        cur = await self._conn.execute(
            "UPDATE permission SET status = %s, updated_at = NOW() "
            f"WHERE permission_id = %s RETURNING {_COLUMNS}",
            (status.value, permission_id),
        )
        r = await cur.fetchone()
        return _to_permission(r) if r else None

    async def list(
        self,
        *,
        status: PermissionStatus | None = None,
        query: str | None = None,
        after_seq: int | None = None,
        limit: int = 50,
    ) -> list[Permission]:
        """List permissions in insertion order with optional filters."""
        conditions = []
        _params: list[object] = []
        if status:
            conditions.append("status = %s")
            _params.append(status.value)
        if query:
            conditions.append("(key ILIKE %s OR description ILIKE %s)")
            pattern = _like_pattern(query)
            _params.extend([pattern, pattern])
        if after_seq is not None:
            conditions.append("seq > %s")
            _params.append(after_seq)
        where = (" WHERE " + " AND ".join(conditions)) if conditions else ""
        params = tuple(_params) + (limit,)
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM permission{where} ORDER BY seq LIMIT %s",
            params,
        )
        rows = await cur.fetchall()
        return [_to_permission(r) for r in rows]
