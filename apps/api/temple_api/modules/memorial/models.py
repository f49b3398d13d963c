from __future__ import annotations

from datetime import date
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import SQLModel, Field


# natural key: (deceased_id, year); never deleted by the generator
class MemorialInstance(SQLModel, table=True):
    __tablename__ = "memorial_instances"
    __table_args__ = (
        UniqueConstraint("deceased_id", "year", name="uq_memorial_instances_deceased_year"),
    )

    id: str = Field(primary_key=True)
    deceased_id: str = Field(foreign_key="deceased.id", index=True)
    memorial_rule_id: str = Field(foreign_key="memorial_rules.id")
    year: int
    due_date: date = Field(index=True)

    event_id: Optional[str] = Field(default=None)  # events live outside this service
    completed_at: Optional[str] = Field(default=None)

    created_at: str
    updated_at: str
