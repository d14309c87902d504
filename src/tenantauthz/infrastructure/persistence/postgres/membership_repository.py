"""PostgreSQL tenant membership repository implementation."""

from psycopg import AsyncConnection, errors

from tenantauthz.domain.entities import TenantMembership
from tenantauthz.domain.exceptions import Conflict
from tenantauthz.domain.value_objects import MembershipStatus
from tenantauthz.infrastructure.persistence.postgres.set_mutation import set_mutation

_COLUMNS = (
    "membership_id, tenant_id, user_id, roles, status, expires_at, "
    "membership_version, created_at, updated_at"
)


def _to_membership(r: tuple) -> TenantMembership:
    return TenantMembership(
        membership_id=r[0],
        tenant_id=r[1],
        user_id=r[2],
        roles=list(r[3] or []),
        status=MembershipStatus(r[4]),
        expires_at=r[5],
        membership_version=r[6],
        created_at=r[7],
        updated_at=r[8],
    )


class PostgresMembershipRepository:
    """Tenant membership repository implementation."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def get(self, tenant_id: str, user_id: str) -> TenantMembership | None:
        """Get membership of user in tenant."""
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM tenant_membership WHERE tenant_id = %s AND user_id = %s",
            (tenant_id, user_id),
        )
        r = await cur.fetchone()
        return _to_membership(r) if r else None

    async def create(self, membership: TenantMembership) -> TenantMembership:
        """Create membership. (tenant_id, user_id) is unique."""
        try:
            cur = await self._conn.execute(
                "INSERT INTO tenant_membership (membership_id, tenant_id, user_id, roles, status, "
                "expires_at, membership_version, created_at, updated_at) "
                f"VALUES (%s, %s, %s, %s::text[], %s, %s, %s, %s, %s) RETURNING {_COLUMNS}",
                (
                    membership.membership_id,
                    membership.tenant_id,
                    membership.user_id,
                    membership.roles,
                    membership.status.value,
                    membership.expires_at,
                    membership.membership_version,
                    membership.created_at,
                    membership.updated_at,
                ),
            )
        except errors.UniqueViolation as e:
            raise Conflict("User already has a membership in this tenant") from e
        return _to_membership(await cur.fetchone())

    async def update_roles_atomic(
        self,
        tenant_id: str,
        user_id: str,
        add: list[str],
        remove: list[str],
    ) -> TenantMembership | None:
        """Single-statement add/pull on roles plus version increment."""
        cur = await self._conn.execute(
            "UPDATE tenant_membership SET "
            f"roles = {set_mutation('roles')}, "
            "membership_version = membership_version + 1, updated_at = NOW() "
            f"WHERE tenant_id = %s AND user_id = %s RETURNING {_COLUMNS}",
            (add, remove, tenant_id, user_id),
        )
        r = await cur.fetchone()
        return _to_membership(r) if r else None

    async def update_status(
        self,
        tenant_id: str,
        user_id: str,
        status: MembershipStatus,
        *,
        expected: MembershipStatus | None = None,
    ) -> TenantMembership | None:
        """Set status and bump version, optionally only from `expected`."""
        q = (
            "UPDATE tenant_membership SET status = %s, "
            "membership_version = membership_version + 1, updated_at = NOW() "
            "WHERE tenant_id = %s AND user_id = %s"
        )
        params: tuple = (status.value, tenant_id, user_id)
        if expected is not None:
            q += " AND status = %s"
            params += (expected.value,)
        cur = await self._conn.execute(f"{q} RETURNING {_COLUMNS}", params)
        r = await cur.fetchone()
        return _to_membership(r) if r else None

    async def increment_version(
        self, tenant_id: str, user_id: str
    ) -> TenantMembership | None:
        """Bump membership_version only."""
        cur = await self._conn.execute(
            "UPDATE tenant_membership SET membership_version = membership_version + 1, "
            f"updated_at = NOW() WHERE tenant_id = %s AND user_id = %s RETURNING {_COLUMNS}",
            (tenant_id, user_id),
        )
        r = await cur.fetchone()
        return _to_membership(r) if r else None
