"""initial cashflow schema

Revision ID: 4b1e8c2d9f10
Revises:
Create Date: 2026-03-02
"""

from alembic import op
import sqlalchemy as sa


revision = "4b1e8c2d9f10"
down_revision = None
branch_labels = None
depends_on = None


_account_type = sa.Enum("CHECKING", "SAVINGS", "CASH", "CREDIT", name="accounttype")
_direction = sa.Enum("INCOME", "BILL", name="commitmentdirection")
_priority = sa.Enum("CRITICAL", "NORMAL", "FLEXIBLE", name="commitmentpriority")
_instance_status = sa.Enum("OPEN", "FUNDED", name="instancestatus")
_entry_type = sa.Enum("INCOME", "EXPENSE", name="ledgerentrytype")


def upgrade() -> None:
    op.create_table(
        "accounts",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("account_type", _account_type, nullable=False),
        sa.Column("current_balance", sa.Float(), nullable=False),
        sa.Column("is_reserve", sa.Boolean(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "commitments",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("direction", _direction, nullable=False),
        sa.Column("amount", sa.Float(), nullable=False),
        sa.Column("due_date", sa.Date(), nullable=False),
        sa.Column("recurrence_rule", sa.String(length=32), nullable=True),
        sa.Column("priority", _priority, nullable=False),
        sa.Column("autopay", sa.Boolean(), nullable=False),
        sa.Column("account_id", sa.String(), nullable=True),
        sa.Column("active", sa.Boolean(), nullable=False),
        sa.Column("paid", sa.Boolean(), nullable=False),
        sa.Column("actual_amount", sa.Float(), nullable=True),
        sa.Column("paid_date", sa.Date(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["account_id"], ["accounts.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_commitments_active_due", "commitments", ["active", "due_date"], unique=False)

    op.create_table(
        "commitment_instances",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("commitment_id", sa.String(), nullable=False),
        sa.Column("due_date", sa.Date(), nullable=False),
        sa.Column("planned_amount", sa.Float(), nullable=False),
        sa.Column("allocated_amount", sa.Float(), nullable=False),
        sa.Column("status", _instance_status, nullable=False),
        sa.Column("version", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.ForeignKeyConstraint(["commitment_id"], ["commitments.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("commitment_id", "due_date", name="ux_instance_commitment_due"),
    )
    op.create_index(
        "idx_instances_status_due",
        "commitment_instances",
        ["status", "due_date"],
        unique=False,
    )

    op.create_table(
        "ledger_entries",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("entry_date", sa.Date(), nullable=False),
        sa.Column("description", sa.String(), nullable=False),
        sa.Column("amount", sa.Float(), nullable=False),
        sa.Column("entry_type", _entry_type, nullable=False),
        sa.Column("account_id", sa.String(), nullable=True),
        sa.Column("commitment_id", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["account_id"], ["accounts.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["commitment_id"], ["commitments.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_ledger_date", "ledger_entries", ["entry_date", "created_at"], unique=False)
    op.create_index("idx_ledger_account", "ledger_entries", ["account_id"], unique=False)

    op.create_table(
        "ledger_line_items",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("ledger_entry_id", sa.String(), nullable=False),
        sa.Column("description", sa.String(), nullable=False),
        sa.Column("amount", sa.Float(), nullable=False),
        sa.Column("commitment_id", sa.String(), nullable=True),
        sa.Column("instance_due_date", sa.Date(), nullable=True),
        sa.ForeignKeyConstraint(["ledger_entry_id"], ["ledger_entries.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["commitment_id"], ["commitments.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_line_items_ledger", "ledger_line_items", ["ledger_entry_id"], unique=False)

    op.create_table(
        "commitment_allocations",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("ledger_entry_id", sa.String(), nullable=False),
        sa.Column("instance_id", sa.String(), nullable=False),
        sa.Column("commitment_id", sa.String(), nullable=False),
        sa.Column("amount", sa.Float(), nullable=False),
        sa.Column("note", sa.String(), nullable=True),
        sa.ForeignKeyConstraint(["ledger_entry_id"], ["ledger_entries.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["instance_id"], ["commitment_instances.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["commitment_id"], ["commitments.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_allocations_ledger", "commitment_allocations", ["ledger_entry_id"], unique=False)
    op.create_index("idx_allocations_instance", "commitment_allocations", ["instance_id"], unique=False)

    op.create_table(
        "commitment_history",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("commitment_id", sa.String(), nullable=False),
        sa.Column("amount", sa.Float(), nullable=False),
        sa.Column("actual_amount", sa.Float(), nullable=False),
        sa.Column("paid_date", sa.Date(), nullable=False),
        sa.Column("due_date", sa.Date(), nullable=False),
        sa.ForeignKeyConstraint(["commitment_id"], ["commitments.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_history_commitment", "commitment_history", ["commitment_id"], unique=False)

    op.create_table(
        "audit_logs",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("occurred_at", sa.DateTime(), nullable=False),
        sa.Column("action", sa.String(length=64), nullable=False),
        sa.Column("entity_type", sa.String(length=64), nullable=False),
        sa.Column("entity_id", sa.String(), nullable=False),
        sa.Column("commitment_id", sa.String(), nullable=True),
        sa.Column("details_json", sa.Text(), nullable=False, server_default=sa.text("'{}'")),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_audit_logs_occurred_at", "audit_logs", ["occurred_at"], unique=False)
    op.create_index("idx_audit_logs_entity", "audit_logs", ["entity_type", "entity_id"], unique=False)


def downgrade() -> None:
    op.drop_index("idx_audit_logs_entity", table_name="audit_logs")
    op.drop_index("idx_audit_logs_occurred_at", table_name="audit_logs")
    op.drop_table("audit_logs")
    op.drop_index("idx_history_commitment", table_name="commitment_history")
    op.drop_table("commitment_history")
    op.drop_index("idx_allocations_instance", table_name="commitment_allocations")
    op.drop_index("idx_allocations_ledger", table_name="commitment_allocations")
    op.drop_table("commitment_allocations")
    op.drop_index("idx_line_items_ledger", table_name="ledger_line_items")
    op.drop_table("ledger_line_items")
    op.drop_index("idx_ledger_account", table_name="ledger_entries")
    op.drop_index("idx_ledger_date", table_name="ledger_entries")
    op.drop_table("ledger_entries")
    op.drop_index("idx_instances_status_due", table_name="commitment_instances")
    op.drop_table("commitment_instances")
    op.drop_index("idx_commitments_active_due", table_name="commitments")
    op.drop_table("commitments")
    op.drop_table("accounts")
