from __future__ import annotations

from datetime import date
from typing import List, Optional

from pydantic import BaseModel, Field


class MemorialGenerateIn(BaseModel):
    # omitted deceased_id -> every deceased row
    deceased_id: Optional[str] = None
    from_date: Optional[date] = None
    to_date: Optional[date] = None


class MemorialGenerateOut(BaseModel):
    created: int
    updated: int
    skipped_completed: int = 0
    total: int


class DeceasedRefOut(BaseModel):
    id: str
    household_id: str
    last_name: str
    first_name: str
    posthumous_name: Optional[str] = None


class MemorialInstanceOut(BaseModel):
    id: str
    deceased_id: str
    memorial_rule_id: str
    year: int
    due_date: date
    event_id: Optional[str] = None
    completed_at: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    deceased: Optional[DeceasedRefOut] = None


class MemorialInstancesOut(BaseModel):
    items: List[MemorialInstanceOut] = Field(default_factory=list)


class MemorialInstancePatchIn(BaseModel):
    event_id: Optional[str] = None
    completed: Optional[bool] = None
