from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Optional

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from temple_api.core.db import get_engine
from temple_api.core.errors import ConfigurationError, PersistenceError
from temple_api.core.ids import now_iso
from temple_api.core.logs import emit
from temple_api.modules.deceased.models import Deceased
from temple_api.modules.memorial_rules.service import load_default_rule, rule_years

from .calendar import resolve_window
from .generator import DeceasedSnapshot, RuleSnapshot, generate
from .models import MemorialInstance
from .stores import SqlInstanceStore


def _today() -> date:
    return date.today()


def _resolve_rule(session: Session) -> RuleSnapshot:
    row = load_default_rule(session)
    if row is None:
        raise ConfigurationError("default memorial rule not found")
    try:
        years = rule_years(row)
    except ValueError as e:
        raise ConfigurationError(f"default memorial rule {row.id} has invalid years: {e}") from e
    return RuleSnapshot(id=row.id, name=row.name, years=tuple(years))


def _resolve_deceased(session: Session, deceased_id: Optional[str]) -> List[DeceasedSnapshot]:
    stmt = select(Deceased.id, Deceased.death_date)
    if deceased_id is not None:
        stmt = stmt.where(Deceased.id == deceased_id)
    else:
        stmt = stmt.order_by(Deceased.id)
    return [DeceasedSnapshot(id=i, death_date=d) for (i, d) in session.exec(stmt).all()]


def generate_memorial_instances(
    deceased_id: Optional[str] = None,
    from_date: Optional[date] = None,
    to_date: Optional[date] = None,
    *,
    request_id: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Materialize memorial instances for one deceased (or all) within the window.

    All-or-nothing: one transaction per call; any failure rolls back every
    row written by this call and is re-raised.
    Raises ConfigurationError before any other read when no default rule exists.
    """
    window = resolve_window(_today(), from_date, to_date)

    with Session(get_engine()) as session:
        try:
            rule = _resolve_rule(session)
            deceased = _resolve_deceased(session, deceased_id)
            result = generate(rule, deceased, window, SqlInstanceStore(session))
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            raise PersistenceError(f"memorial generation failed: {e}") from e
        except Exception:
            session.rollback()
            raise

    out = result.as_dict()
    emit(
        "info",
        "memorial.generate",
        f"created={result.created} updated={result.updated}",
        request_id,
        __name__,
        deceased_id=deceased_id,
        window={"from": window.start.isoformat(), "to": window.end.isoformat()},
        rule_id=rule.id,
        **out,
    )
    return out


def regenerate_best_effort(deceased_id: str, *, request_id: Optional[str] = None) -> Optional[Dict[str, Any]]:
    """
    Side-effect regeneration after a deceased create/edit.
    Failures are logged and swallowed so the primary write still succeeds.
    """
    try:
        return generate_memorial_instances(deceased_id=deceased_id, request_id=request_id)
    except (ConfigurationError, PersistenceError) as e:
        emit(
            "error",
            "memorial.regenerate.failed",
            str(e),
            request_id,
            __name__,
            deceased_id=deceased_id,
            type=type(e).__name__,
        )
        return None


# -------------------------
# Instances (read / link / complete)
# -------------------------
def _row_to_instance(row: MemorialInstance, deceased: Optional[Deceased] = None) -> Dict[str, Any]:
    d: Dict[str, Any] = {
        "id": row.id,
        "deceased_id": row.deceased_id,
        "memorial_rule_id": row.memorial_rule_id,
        "year": row.year,
        "due_date": row.due_date,
        "event_id": row.event_id,
        "completed_at": row.completed_at,
        "created_at": row.created_at,
        "updated_at": row.updated_at,
    }
    if deceased is not None:
        d["deceased"] = {
            "id": deceased.id,
            "household_id": deceased.household_id,
            "last_name": deceased.last_name,
            "first_name": deceased.first_name,
            "posthumous_name": deceased.posthumous_name,
        }
    return d


def list_memorial_instances(
    *,
    from_date: Optional[date] = None,
    to_date: Optional[date] = None,
    deceased_id: Optional[str] = None,
    pending_only: bool = False,
) -> List[Dict[str, Any]]:
    with Session(get_engine()) as session:
        stmt = select(MemorialInstance, Deceased).join(Deceased, Deceased.id == MemorialInstance.deceased_id)
        if from_date is not None:
            stmt = stmt.where(MemorialInstance.due_date >= from_date)
        if to_date is not None:
            stmt = stmt.where(MemorialInstance.due_date <= to_date)
        if deceased_id:
            stmt = stmt.where(MemorialInstance.deceased_id == deceased_id)
        if pending_only:
            stmt = stmt.where(MemorialInstance.completed_at.is_(None))
        stmt = stmt.order_by(MemorialInstance.due_date.asc(), MemorialInstance.year.asc())
        return [_row_to_instance(mi, dc) for (mi, dc) in session.exec(stmt).all()]


def list_instances_for_deceased(session: Session, deceased_id: str) -> List[Dict[str, Any]]:
    rows = session.exec(
        select(MemorialInstance)
        .where(MemorialInstance.deceased_id == deceased_id)
        .order_by(MemorialInstance.due_date.asc())
    ).all()
    return [_row_to_instance(r) for r in rows]


def month_bounds(today: date) -> tuple[date, date]:
    start = today.replace(day=1)
    nxt = date(start.year + 1, 1, 1) if start.month == 12 else date(start.year, start.month + 1, 1)
    return start, date.fromordinal(nxt.toordinal() - 1)


def list_due_this_month() -> List[Dict[str, Any]]:
    start, end = month_bounds(_today())
    return list_memorial_instances(from_date=start, to_date=end, pending_only=True)


def patch_memorial_instance(instance_id: str, patch: Dict[str, Any]) -> Dict[str, Any]:
    with Session(get_engine()) as session:
        row = session.get(MemorialInstance, instance_id)
        if row is None:
            raise HTTPException(status_code=404, detail={"error": "not_found", "message": "memorial instance not found"})

        if "event_id" in patch:
            ev = patch["event_id"]
            row.event_id = str(ev) if ev else None

        if "completed" in patch and patch["completed"] is not None:
            if patch["completed"]:
                # keep the first completion stamp
                row.completed_at = row.completed_at or now_iso()
            else:
                row.completed_at = None

        row.updated_at = now_iso()
        session.add(row)
        session.commit()
        session.refresh(row)
        return _row_to_instance(row)
