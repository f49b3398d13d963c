from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query

from temple_api.modules.common import clamp_limit, clamp_offset, page_of

from .schemas import MemorialRuleCreateIn, MemorialRuleOut, MemorialRulePatchIn, MemorialRulesListOut
from .service import create_memorial_rule, get_memorial_rule, list_memorial_rules, patch_memorial_rule

router = APIRouter(tags=["memorial_rules"])


@router.get("/memorial_rules", response_model=MemorialRulesListOut)
def list_rules(
    limit: int | None = Query(None, description="Max items to return (default 50, max 200)"),
    offset: int | None = Query(None, description="Offset from start (default 0)"),
) -> MemorialRulesListOut:
    lim = clamp_limit(limit)
    off = clamp_offset(offset)
    items, total = list_memorial_rules(limit=lim, offset=off)
    return MemorialRulesListOut(items=items, page=page_of(lim, off, total))


@router.post("/memorial_rules", response_model=MemorialRuleOut, status_code=201)
def create_rule(body: MemorialRuleCreateIn) -> MemorialRuleOut:
    out = create_memorial_rule(name=body.name, years=body.years, set_default=body.set_default)
    return MemorialRuleOut(**out)


@router.get("/memorial_rules/{rule_id}", response_model=MemorialRuleOut)
def get_rule(rule_id: str) -> MemorialRuleOut:
    r = get_memorial_rule(rule_id)
    if r is None:
        raise HTTPException(status_code=404, detail=f"MemorialRule not found: {rule_id}")
    return MemorialRuleOut(**r)


@router.patch("/memorial_rules/{rule_id}", response_model=MemorialRuleOut)
def patch_rule(rule_id: str, body: MemorialRulePatchIn) -> MemorialRuleOut:
    r = patch_memorial_rule(
        rule_id,
        name=body.name,
        years=body.years,
        set_default=body.set_default,
    )
    if r is None:
        raise HTTPException(status_code=404, detail=f"MemorialRule not found: {rule_id}")
    return MemorialRuleOut(**r)
