"""Initial schema - role, admin, audit_log.

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


def upgrade() -> None:
    op.create_table(
        "role",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("name", sa.String(64), nullable=False),
        sa.Column("display_name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),
        sa.Column("level", sa.Integer(), nullable=False),
        sa.Column("permissions", postgresql.JSONB(), nullable=False, server_default="{}"),
        sa.Column("is_system_role", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_custom_role", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("can_create_sub_roles", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("max_sub_roles", sa.Integer(), nullable=True),
        sa.Column("can_manage_users", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("max_sub_users", sa.Integer(), nullable=True),
        sa.Column("parent_role_id", sa.UUID(), sa.ForeignKey("role.id"), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("assigned_users_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_assigned_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_by", sa.String(255), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_by", sa.String(255), nullable=True),
        sa.Column("version", sa.Integer(), nullable=False, server_default="0"),
        sa.CheckConstraint("level BETWEEN 0 AND 100", name="ck_role_level_range"),
        sa.CheckConstraint("assigned_users_count >= 0", name="ck_role_assigned_non_negative"),
    )
    # Names are unique among active roles only; deactivated roles keep theirs.
    op.create_index(
        "ux_role_active_name",
        "role",
        ["name"],
        unique=True,
        postgresql_where=sa.text("is_active"),
    )
    op.create_index("ix_role_parent_role_id", "role", ["parent_role_id"])
    op.create_index("ix_role_level", "role", ["level"])

    op.create_table(
        "admin",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("display_name", sa.String(255), nullable=True),
        sa.Column("role_id", sa.UUID(), sa.ForeignKey("role.id"), nullable=False),
        sa.Column("access_level", sa.String(32), nullable=False),
        sa.Column("status", sa.String(16), nullable=False, server_default="active"),
        sa.Column("status_reason", sa.Text(), nullable=True),
        sa.Column("can_create_sub_users", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("max_sub_users", sa.Integer(), nullable=True),
        sa.Column("created_sub_users_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("manager_id", sa.UUID(), sa.ForeignKey("admin.id"), nullable=True),
        sa.Column("team_id", sa.String(64), nullable=True),
        sa.Column("last_login_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("login_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_by", sa.String(255), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_by", sa.String(255), nullable=True),
        sa.Column("version", sa.Integer(), nullable=False, server_default="0"),
        sa.CheckConstraint(
            "status IN ('active', 'suspended', 'inactive')", name="ck_admin_status"
        ),
    )
    op.create_index("ux_admin_email", "admin", ["email"], unique=True)
    op.create_index("ix_admin_role_id", "admin", ["role_id"])
    op.create_index("ix_admin_manager_id", "admin", ["manager_id"])

    op.create_table(
        "audit_log",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("admin_id", sa.String(255), nullable=True),
        sa.Column("action", sa.String(64), nullable=False),
        sa.Column("resource", sa.String(64), nullable=False),
        sa.Column("resource_id", sa.String(255), nullable=False),
        sa.Column("before", postgresql.JSONB(), nullable=True),
        sa.Column("after", postgresql.JSONB(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_audit_log_resource", "audit_log", ["resource", "resource_id"])
    op.create_index("ix_audit_log_created_at", "audit_log", ["created_at"])


def downgrade() -> None:
    op.drop_table("audit_log")
    op.drop_table("admin")
    op.drop_table("role")
