"""Initial schema - item_grant, audit_entry, role_template.

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
        "item_grant",
        sa.Column("item_id", sa.String(255), primary_key=True),
        sa.Column("collaborator_id", sa.String(255), primary_key=True),
        sa.Column("role", sa.String(20), nullable=False),
        sa.Column("granted_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("granted_by", sa.String(255), nullable=True),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("deactivated_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint(
            "role IN ('creator', 'admin', 'collaborator', 'viewer')",
            name="ck_item_grant_role",
        ),
    )
    # At most one active creator per item.
    op.create_index(
        "ux_item_grant_creator",
        "item_grant",
        ["item_id"],
        unique=True,
        postgresql_where=sa.text("role = 'creator' AND active"),
    )

    op.execute("CREATE SEQUENCE audit_entry_seq")
    op.create_table(
        "audit_entry",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("sequence", sa.BigInteger(), nullable=False, unique=True),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False),
        sa.Column("item_id", sa.String(255), nullable=False),
        sa.Column("actor_id", sa.String(255), nullable=False),
        sa.Column("action", sa.String(20), nullable=False),
        sa.Column("target_id", sa.String(255), nullable=False),
        sa.Column("old_role", sa.String(20), nullable=True),
        sa.Column("new_role", sa.String(20), nullable=True),
        sa.Column("details", sa.Text(), nullable=False, server_default=""),
        sa.CheckConstraint(
            "action IN ('added', 'removed', 'role_changed', 'invited')",
            name="ck_audit_entry_action",
        ),
    )
    op.create_index("ix_audit_entry_item_sequence", "audit_entry", ["item_id", "sequence"])
    op.create_index("ix_audit_entry_actor", "audit_entry", ["actor_id"])
    op.create_index("ix_audit_entry_target", "audit_entry", ["target_id"])
    # Append-only: reject UPDATE and DELETE at the database level too.
    op.execute(
        "CREATE RULE audit_entry_no_update AS ON UPDATE TO audit_entry DO INSTEAD NOTHING"
    )
    op.execute(
        "CREATE RULE audit_entry_no_delete AS ON DELETE TO audit_entry DO INSTEAD NOTHING"
    )

    op.create_table(
        "role_template",
        sa.Column("id", sa.String(255), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column(
            "role_assignments",
            postgresql.JSONB(),
            nullable=False,
            server_default=sa.text("'{}'::jsonb"),
        ),
    )


def downgrade() -> None:
    op.drop_table("role_template")
    op.execute("DROP RULE IF EXISTS audit_entry_no_delete ON audit_entry")
    op.execute("DROP RULE IF EXISTS audit_entry_no_update ON audit_entry")
    op.drop_table("audit_entry")
    op.execute("DROP SEQUENCE IF EXISTS audit_entry_seq")
    op.drop_index("ux_item_grant_creator", table_name="item_grant")
    op.drop_table("item_grant")
