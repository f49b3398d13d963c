from __future__ import annotations

from datetime import date
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from temple_api.modules.common import PageOut
from temple_api.modules.memorial.schemas import MemorialInstanceOut


def _check_death_date(v: date) -> date:
    if v > date.today():
        raise ValueError("death_date must not be in the future")
    return v


class DeceasedCreateIn(BaseModel):
    household_id: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    first_name: str = Field(min_length=1)
    last_name_kana: Optional[str] = None
    first_name_kana: Optional[str] = None
    posthumous_name: Optional[str] = None
    death_date: date
    notes: Optional[str] = None

    @field_validator("death_date")
    @classmethod
    def _death_date(cls, v: date) -> date:
        return _check_death_date(v)


class DeceasedPatchIn(BaseModel):
    household_id: Optional[str] = Field(default=None, min_length=1)
    last_name: Optional[str] = Field(default=None, min_length=1)
    first_name: Optional[str] = Field(default=None, min_length=1)
    last_name_kana: Optional[str] = None
    first_name_kana: Optional[str] = None
    posthumous_name: Optional[str] = None
    death_date: Optional[date] = None
    notes: Optional[str] = None

    @field_validator("death_date")
    @classmethod
    def _death_date(cls, v: Optional[date]) -> Optional[date]:
        return _check_death_date(v) if v is not None else v


class DeceasedOut(BaseModel):
    id: str
    household_id: str
    last_name: str
    first_name: str
    last_name_kana: Optional[str] = None
    first_name_kana: Optional[str] = None
    posthumous_name: Optional[str] = None
    death_date: date
    notes: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    memorial_instances: List[MemorialInstanceOut] = Field(default_factory=list)


class DeceasedListOut(BaseModel):
    items: List[DeceasedOut]
    page: PageOut
