from __future__ import annotations

from datetime import date
from typing import Optional

from sqlmodel import SQLModel, Field


class Deceased(SQLModel, table=True):
    __tablename__ = "deceased"

    id: str = Field(primary_key=True)
    household_id: str = Field(foreign_key="households.id", index=True)

    last_name: str
    first_name: str
    last_name_kana: Optional[str] = Field(default=None)
    first_name_kana: Optional[str] = Field(default=None)
    posthumous_name: Optional[str] = Field(default=None)

    death_date: date = Field(index=True)
    notes: Optional[str] = Field(default=None)

    created_at: str
    updated_at: str
