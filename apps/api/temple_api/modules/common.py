from __future__ import annotations

from pydantic import BaseModel, Field

LIMIT_DEFAULT = 50
LIMIT_MAX = 200


class PageOut(BaseModel):
    limit: int = Field(..., ge=1)
    offset: int = Field(..., ge=0)
    total: int = Field(..., ge=0)
    has_more: bool


def clamp_limit(raw: int | None) -> int:
    # lock: default=50, max=200
    if raw is None:
        return LIMIT_DEFAULT
    try:
        v = int(raw)
    except Exception:
        return LIMIT_DEFAULT
    if v < 1:
        v = 1
    if v > LIMIT_MAX:
        v = LIMIT_MAX
    return v


def clamp_offset(raw: int | None) -> int:
    if raw is None:
        return 0
    try:
        v = int(raw)
    except Exception:
        return 0
    return max(v, 0)


def page_of(limit: int, offset: int, total: int) -> PageOut:
    return PageOut(limit=limit, offset=offset, total=total, has_more=(offset + limit) < total)
