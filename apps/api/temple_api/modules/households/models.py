from __future__ import annotations

from sqlmodel import SQLModel, Field


# owner row only; household screens live outside this service
class Household(SQLModel, table=True):
    __tablename__ = "households"

    id: str = Field(primary_key=True)
    name: str = Field(index=True)

    created_at: str
    updated_at: str
