"""households (owner rows) + deceased

Revision ID: 0001_households_deceased
Revises:
Create Date: 2025-05-01
"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0001_households_deceased"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "households",
        sa.Column("id", sa.Text(), primary_key=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("created_at", sa.Text(), nullable=False),
        sa.Column("updated_at", sa.Text(), nullable=False),
    )
    op.create_index("ix_households_name", "households", ["name"])

    op.create_table(
        "deceased",
        sa.Column("id", sa.Text(), primary_key=True),
        sa.Column("household_id", sa.Text(), sa.ForeignKey("households.id"), nullable=False),
        sa.Column("last_name", sa.Text(), nullable=False),
        sa.Column("first_name", sa.Text(), nullable=False),
        sa.Column("last_name_kana", sa.Text(), nullable=True),
        sa.Column("first_name_kana", sa.Text(), nullable=True),
        sa.Column("posthumous_name", sa.Text(), nullable=True),
        sa.Column("death_date", sa.Date(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.Text(), nullable=False),
        sa.Column("updated_at", sa.Text(), nullable=False),
    )
    op.create_index("ix_deceased_household_id", "deceased", ["household_id"])
    op.create_index("ix_deceased_death_date", "deceased", ["death_date"])


def downgrade() -> None:
    op.drop_index("ix_deceased_death_date", table_name="deceased")
    op.drop_index("ix_deceased_household_id", table_name="deceased")
    op.drop_table("deceased")

    op.drop_index("ix_households_name", table_name="households")
    op.drop_table("households")
