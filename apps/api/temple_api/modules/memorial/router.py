from __future__ import annotations

from datetime import date

from fastapi import APIRouter, HTTPException, Query, Request

from .schemas import (
    MemorialGenerateIn,
    MemorialGenerateOut,
    MemorialInstanceOut,
    MemorialInstancePatchIn,
    MemorialInstancesOut,
)
from .service import (
    generate_memorial_instances,
    list_due_this_month,
    list_memorial_instances,
    patch_memorial_instance,
)

router = APIRouter(tags=["memorial"])


@router.post("/memorial/generate", response_model=MemorialGenerateOut)
def post_generate(body: MemorialGenerateIn, request: Request) -> MemorialGenerateOut:
    rid = getattr(getattr(request, "state", None), "request_id", None)
    try:
        out = generate_memorial_instances(
            deceased_id=body.deceased_id,
            from_date=body.from_date,
            to_date=body.to_date,
            request_id=rid,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail={"error": "bad_request", "message": str(e)})
    return MemorialGenerateOut(**out)


@router.get("/memorial_instances", response_model=MemorialInstancesOut)
def get_instances(
    from_: date | None = Query(None, alias="from", description="due_date >= from (inclusive)"),
    to: date | None = Query(None, description="due_date <= to (inclusive)"),
    deceased_id: str | None = Query(None),
    pending_only: bool = Query(False, description="Only instances without completed_at"),
) -> MemorialInstancesOut:
    items = list_memorial_instances(
        from_date=from_,
        to_date=to,
        deceased_id=deceased_id,
        pending_only=pending_only,
    )
    return MemorialInstancesOut(items=items)


@router.get("/memorial_instances/due_this_month", response_model=MemorialInstancesOut)
def get_due_this_month() -> MemorialInstancesOut:
    return MemorialInstancesOut(items=list_due_this_month())


@router.patch("/memorial_instances/{instance_id}", response_model=MemorialInstanceOut)
def patch_instance(instance_id: str, body: MemorialInstancePatchIn) -> MemorialInstanceOut:
    return MemorialInstanceOut(**patch_memorial_instance(instance_id, body.model_dump(exclude_unset=True)))
