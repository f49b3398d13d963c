from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from fastapi import HTTPException
from sqlalchemy import func, or_
from sqlmodel import Session, select

from temple_api.core.db import get_engine
from temple_api.core.ids import new_ulid, now_iso
from temple_api.modules.households.models import Household
from temple_api.modules.memorial.service import list_instances_for_deceased, regenerate_best_effort

from .models import Deceased

PATCHABLE = (
    "household_id",
    "last_name",
    "first_name",
    "last_name_kana",
    "first_name_kana",
    "posthumous_name",
    "death_date",
    "notes",
)


def _row_to_deceased(session: Session, row: Deceased) -> Dict[str, Any]:
    d = row.model_dump()
    d["memorial_instances"] = list_instances_for_deceased(session, row.id)
    return d


def _require_household(session: Session, household_id: str) -> None:
    if session.get(Household, household_id) is None:
        raise HTTPException(status_code=404, detail={"error": "not_found", "message": "household not found"})


def list_deceased(
    limit: int,
    offset: int,
    household_id: Optional[str] = None,
    q: Optional[str] = None,
) -> Tuple[List[Dict[str, Any]], int]:
    with Session(get_engine()) as session:
        conds = []
        if household_id:
            conds.append(Deceased.household_id == household_id)
        if q:
            like = f"%{q.lower()}%"
            conds.append(
                or_(
                    func.lower(Deceased.last_name).like(like),
                    func.lower(Deceased.first_name).like(like),
                    func.lower(func.coalesce(Deceased.posthumous_name, "")).like(like),
                )
            )

        total = session.exec(select(func.count()).select_from(Deceased).where(*conds)).one()
        rows = session.exec(
            select(Deceased)
            .where(*conds)
            .order_by(Deceased.death_date.desc(), Deceased.id.desc())
            .limit(limit)
            .offset(offset)
        ).all()
        return [_row_to_deceased(session, r) for r in rows], int(total)


def get_deceased(deceased_id: str) -> Dict[str, Any]:
    with Session(get_engine()) as session:
        row = session.get(Deceased, deceased_id)
        if row is None:
            raise HTTPException(status_code=404, detail={"error": "not_found", "message": "deceased not found"})
        return _row_to_deceased(session, row)


def create_deceased(data: Dict[str, Any], *, request_id: Optional[str] = None) -> Dict[str, Any]:
    with Session(get_engine()) as session:
        _require_household(session, data["household_id"])
        now = now_iso()
        row = Deceased(id=new_ulid(), created_at=now, updated_at=now, **data)
        session.add(row)
        session.commit()
        did = row.id

    # best-effort: a failed generation never fails the create
    regenerate_best_effort(did, request_id=request_id)
    return get_deceased(did)


def patch_deceased(deceased_id: str, patch: Dict[str, Any], *, request_id: Optional[str] = None) -> Dict[str, Any]:
    with Session(get_engine()) as session:
        row = session.get(Deceased, deceased_id)
        if row is None:
            raise HTTPException(status_code=404, detail={"error": "not_found", "message": "deceased not found"})

        for k in PATCHABLE:
            if k not in patch:
                continue
            v = patch[k]
            if v is None and k in ("household_id", "last_name", "first_name", "death_date"):
                # required columns: explicit null means "leave as is"
                continue
            if k == "household_id":
                _require_household(session, v)
            setattr(row, k, v)

        row.updated_at = now_iso()
        session.add(row)
        session.commit()

    if patch.get("death_date") is not None:
        regenerate_best_effort(deceased_id, request_id=request_id)
    return get_deceased(deceased_id)
