from __future__ import annotations

from sqlalchemy import Index, text
from sqlmodel import SQLModel, Field


class MemorialRule(SQLModel, table=True):
    __tablename__ = "memorial_rules"
    __table_args__ = (
        # at most one row can be 1
        Index(
            "uq_memorial_rules_default",
            "is_default",
            unique=True,
            sqlite_where=text("is_default = 1"),
            postgresql_where=text("is_default = 1"),
        ),
    )

    id: str = Field(primary_key=True)
    name: str
    years_json: str  # JSON array of year offsets, e.g. [1,3,7]

    # 0|1
    is_default: int = Field(default=0)

    created_at: str
    updated_at: str
