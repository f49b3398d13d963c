"""memorial_rules (at most one default) + memorial_instances (unique per deceased/year)

- memorial_rules.is_default: partial unique index, at most one row = 1
- memorial_instances: natural key (deceased_id, year); event_id is a plain
  reference (events are managed outside this service)
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

revision = "0002_memorial_rules_instances"
down_revision = "0001_households_deceased"
branch_labels = None
depends_on = None


def upgrade() -> None:
    # --- memorial_rules ---
    op.create_table(
        "memorial_rules",
        sa.Column("id", sa.Text(), primary_key=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("years_json", sa.Text(), nullable=False),
        sa.Column("is_default", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.Text(), nullable=False),
        sa.Column("updated_at", sa.Text(), nullable=False),
    )

    # at most one default (partial unique index)
    op.execute(
        """
        CREATE UNIQUE INDEX IF NOT EXISTS uq_memorial_rules_default
        ON memorial_rules(is_default)
        WHERE is_default = 1;
        """
    )

    # --- memorial_instances ---
    op.create_table(
        "memorial_instances",
        sa.Column("id", sa.Text(), primary_key=True),
        sa.Column("deceased_id", sa.Text(), sa.ForeignKey("deceased.id"), nullable=False),
        sa.Column("memorial_rule_id", sa.Text(), sa.ForeignKey("memorial_rules.id"), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("due_date", sa.Date(), nullable=False),
        sa.Column("event_id", sa.Text(), nullable=True),
        sa.Column("completed_at", sa.Text(), nullable=True),
        sa.Column("created_at", sa.Text(), nullable=False),
        sa.Column("updated_at", sa.Text(), nullable=False),
        sa.UniqueConstraint("deceased_id", "year", name="uq_memorial_instances_deceased_year"),
    )
    op.create_index("ix_memorial_instances_deceased_id", "memorial_instances", ["deceased_id"])
    op.create_index("ix_memorial_instances_due_date", "memorial_instances", ["due_date"])


def downgrade() -> None:
    op.drop_index("ix_memorial_instances_due_date", table_name="memorial_instances")
    op.drop_index("ix_memorial_instances_deceased_id", table_name="memorial_instances")
    op.drop_table("memorial_instances")

    op.execute("DROP INDEX IF EXISTS uq_memorial_rules_default;")
    op.drop_table("memorial_rules")
