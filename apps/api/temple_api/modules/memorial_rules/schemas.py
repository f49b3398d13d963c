from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from temple_api.modules.common import PageOut


def _check_years(v: List[int]) -> List[int]:
    if not v:
        raise ValueError("years must not be empty")
    if any(y < 1 for y in v):
        raise ValueError("years must be positive")
    if len(set(v)) != len(v):
        raise ValueError("years must not repeat")
    return v


class MemorialRuleCreateIn(BaseModel):
    name: str = Field(min_length=1)
    years: List[int]
    set_default: bool = False

    @field_validator("years")
    @classmethod
    def _years(cls, v: List[int]) -> List[int]:
        return _check_years(v)


class MemorialRulePatchIn(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    years: Optional[List[int]] = None
    set_default: Optional[bool] = None

    @field_validator("years")
    @classmethod
    def _years(cls, v: Optional[List[int]]) -> Optional[List[int]]:
        return _check_years(v) if v is not None else v


class MemorialRuleOut(BaseModel):
    id: str
    name: str
    years: List[int] = Field(default_factory=list)
    is_default: bool = False
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class MemorialRulesListOut(BaseModel):
    items: List[MemorialRuleOut]
    page: PageOut
