"""Initial schema - permission registry, roles, memberships, overrides.

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""

from collections.abc import Sequence

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

_TEXT_ARRAY = postgresql.ARRAY(sa.Text())


def upgrade() -> None:
    op.create_table(
        "permission",
        sa.Column("seq", sa.BigInteger(), sa.Identity(always=False), primary_key=True),
        sa.Column("permission_id", sa.Text(), nullable=False),
        sa.Column("key", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="ACTIVE"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_permission_permission_id", "permission", ["permission_id"], unique=True)
    op.create_index("ix_permission_key", "permission", ["key"], unique=True)
    op.create_index("ix_permission_status", "permission", ["status"])

    op.create_table(
        "role",
        sa.Column("role_id", sa.Text(), primary_key=True),
        sa.Column("tenant_id", sa.Text(), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="ACTIVE"),
        sa.Column("permissions", _TEXT_ARRAY, nullable=False, server_default="{}"),
        sa.Column("role_version", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_role_tenant_name", "role", ["tenant_id", "name"], unique=True)
    op.create_index("ix_role_tenant_created", "role", ["tenant_id", "created_at", "role_id"])

    op.create_table(
        "tenant_membership",
        sa.Column("membership_id", sa.Text(), primary_key=True),
        sa.Column("tenant_id", sa.Text(), nullable=False),
        sa.Column("user_id", sa.Text(), nullable=False),
        sa.Column("roles", _TEXT_ARRAY, nullable=False, server_default="{}"),
        sa.Column("status", sa.String(20), nullable=False, server_default="ACTIVE"),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("membership_version", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index(
        "ix_tenant_membership_tenant_user",
        "tenant_membership",
        ["tenant_id", "user_id"],
        unique=True,
    )
    op.create_index("ix_tenant_membership_user", "tenant_membership", ["user_id"])

    op.create_table(
        "membership_permission_override",
        sa.Column("tenant_id", sa.Text(), primary_key=True),
        sa.Column("user_id", sa.Text(), primary_key=True),
        sa.Column("permission_id", sa.Text(), primary_key=True),
        sa.Column("effect", sa.String(10), nullable=False),
        sa.Column("reason", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("effect IN ('ALLOW', 'DENY')", name="ck_override_effect"),
    )
    op.create_index(
        "ix_override_tenant_user",
        "membership_permission_override",
        ["tenant_id", "user_id"],
    )


def downgrade() -> None:
    op.drop_table("membership_permission_override")
    op.drop_table("tenant_membership")
    op.drop_table("role")
    op.drop_table("permission")
