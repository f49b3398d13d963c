from __future__ import annotations

from fastapi import APIRouter, Path, Query, Request

from temple_api.modules.common import clamp_limit, clamp_offset, page_of

from .schemas import DeceasedCreateIn, DeceasedListOut, DeceasedOut, DeceasedPatchIn
from .service import create_deceased, get_deceased, list_deceased, patch_deceased

router = APIRouter(tags=["deceased"])


def _rid(request: Request) -> str | None:
    return getattr(getattr(request, "state", None), "request_id", None)


@router.get("/deceased", response_model=DeceasedListOut)
def api_list_deceased(
    limit: int | None = Query(None),
    offset: int | None = Query(None),
    household_id: str | None = Query(None),
    q: str | None = Query(None, description="Substring of last/first/posthumous name"),
) -> DeceasedListOut:
    lim = clamp_limit(limit)
    off = clamp_offset(offset)
    items, total = list_deceased(limit=lim, offset=off, household_id=household_id, q=q)
    return DeceasedListOut(items=items, page=page_of(lim, off, total))


@router.post("/deceased", response_model=DeceasedOut, status_code=201)
def api_create_deceased(body: DeceasedCreateIn, request: Request) -> DeceasedOut:
    return DeceasedOut(**create_deceased(body.model_dump(), request_id=_rid(request)))


@router.get("/deceased/{deceased_id}", response_model=DeceasedOut)
def api_get_deceased(deceased_id: str = Path(...)) -> DeceasedOut:
    return DeceasedOut(**get_deceased(deceased_id))


@router.patch("/deceased/{deceased_id}", response_model=DeceasedOut)
def api_patch_deceased(deceased_id: str, body: DeceasedPatchIn, request: Request) -> DeceasedOut:
    return DeceasedOut(**patch_deceased(deceased_id, body.model_dump(exclude_unset=True), request_id=_rid(request)))
