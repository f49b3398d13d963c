from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import func, update
from sqlmodel import Session, select

from temple_api.core.db import get_engine
from temple_api.core.ids import new_ulid, now_iso

from .models import MemorialRule


def _safe_years(s: Any) -> List[int]:
    if not s:
        return []
    if isinstance(s, list):
        return [int(x) for x in s]
    try:
        v = json.loads(str(s))
    except Exception:
        return []
    if not isinstance(v, list):
        return []
    return [int(x) for x in v]


def rule_years(row: MemorialRule) -> List[int]:
    """Strict read of years_json; raises ValueError on anything unusable."""
    try:
        v = json.loads(row.years_json or "")
    except (TypeError, ValueError) as e:
        raise ValueError(f"years_json is not valid JSON: {e}") from e
    if not isinstance(v, list) or not v:
        raise ValueError("years_json must be a non-empty list")
    if any(isinstance(y, bool) or not isinstance(y, int) or y < 1 for y in v):
        raise ValueError("years_json entries must be positive integers")
    return v


def _row_to_rule(row: MemorialRule) -> Dict[str, Any]:
    return {
        "id": row.id,
        "name": row.name,
        "years": _safe_years(row.years_json),
        "is_default": bool(int(row.is_default or 0)),
        "created_at": row.created_at,
        "updated_at": row.updated_at,
    }


def load_default_rule(session: Session) -> Optional[MemorialRule]:
    return session.exec(
        select(MemorialRule).where(MemorialRule.is_default == 1).order_by(MemorialRule.updated_at.desc())
    ).first()


def _set_default(session: Session, rule_id: str) -> None:
    # same transaction: clear first, then set, so the partial unique index never sees two rows
    session.execute(update(MemorialRule).values(is_default=0))
    session.execute(
        update(MemorialRule).where(MemorialRule.id == rule_id).values(is_default=1, updated_at=now_iso())
    )


def list_memorial_rules(limit: int, offset: int) -> Tuple[List[Dict[str, Any]], int]:
    with Session(get_engine()) as session:
        total = session.exec(select(func.count()).select_from(MemorialRule)).one()
        rows = session.exec(
            select(MemorialRule)
            .order_by(MemorialRule.is_default.desc(), MemorialRule.updated_at.desc(), MemorialRule.id.desc())
            .limit(limit)
            .offset(offset)
        ).all()
        return [_row_to_rule(r) for r in rows], int(total)


def get_memorial_rule(rule_id: str) -> Optional[Dict[str, Any]]:
    with Session(get_engine()) as session:
        row = session.get(MemorialRule, rule_id)
        if row is None:
            return None
        return _row_to_rule(row)


def get_default_rule() -> Optional[Dict[str, Any]]:
    with Session(get_engine()) as session:
        row = load_default_rule(session)
        return _row_to_rule(row) if row is not None else None


def create_memorial_rule(*, name: str, years: List[int], set_default: bool, rule_id: Optional[str] = None) -> Dict[str, Any]:
    with Session(get_engine()) as session:
        rid = rule_id or new_ulid()
        now = now_iso()
        session.add(
            MemorialRule(
                id=rid,
                name=name,
                years_json=json.dumps(list(years)),
                is_default=0,
                created_at=now,
                updated_at=now,
            )
        )
        session.flush()
        if set_default:
            _set_default(session, rid)
        session.commit()

    return get_memorial_rule(rid) or {"id": rid, "name": name, "years": list(years)}


def patch_memorial_rule(
    rule_id: str,
    *,
    name: Optional[str],
    years: Optional[List[int]],
    set_default: Optional[bool],
) -> Optional[Dict[str, Any]]:
    with Session(get_engine()) as session:
        row = session.get(MemorialRule, rule_id)
        if row is None:
            return None

        if name is not None:
            row.name = name
        if years is not None:
            row.years_json = json.dumps(list(years))
        # updated_at always on patch
        row.updated_at = now_iso()
        session.add(row)
        session.flush()

        if set_default is True:
            _set_default(session, rule_id)
        elif set_default is False:
            session.execute(
                update(MemorialRule).where(MemorialRule.id == rule_id).values(is_default=0, updated_at=now_iso())
            )

        session.commit()

    return get_memorial_rule(rule_id)
