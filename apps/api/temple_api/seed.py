"""
Development seed: default memorial rule + sample household/deceased.

    python -m temple_api.seed

Idempotent (fixed ids); finishes by generating memorial instances for
every deceased over the default window.
"""
from __future__ import annotations

from datetime import date
from typing import Any, Dict

from sqlmodel import Session

from temple_api.core.db import get_engine, init_db
from temple_api.core.ids import now_iso
from temple_api.core.logs import emit
from temple_api.modules.deceased.models import Deceased
from temple_api.modules.households.models import Household
from temple_api.modules.memorial.service import generate_memorial_instances
from temple_api.modules.memorial_rules.service import create_memorial_rule, get_default_rule, get_memorial_rule

DEFAULT_RULE_ID = "default-rule"
DEFAULT_RULE_NAME = "標準年忌"
DEFAULT_RULE_YEARS = [1, 3, 7, 13, 17, 23, 27, 33, 50]

SAMPLE_HOUSEHOLDS = [
    {"id": "sample-household-1", "name": "山田家"},
    {"id": "sample-household-2", "name": "鈴木家"},
]

SAMPLE_DECEASED = [
    {
        "id": "sample-deceased-1",
        "household_id": "sample-household-1",
        "last_name": "山田",
        "first_name": "太郎",
        "posthumous_name": "釋淨光居士",
        "death_date": date(2024, 6, 15),
    },
    {
        "id": "sample-deceased-2",
        "household_id": "sample-household-2",
        "last_name": "鈴木",
        "first_name": "花子",
        "posthumous_name": "釋妙蓮信女",
        "death_date": date(2025, 3, 10),
    },
]


def seed_default_rule() -> Dict[str, Any]:
    existing = get_memorial_rule(DEFAULT_RULE_ID)
    if existing is not None:
        return existing
    # only claim the default flag when nobody holds it yet
    return create_memorial_rule(
        rule_id=DEFAULT_RULE_ID,
        name=DEFAULT_RULE_NAME,
        years=DEFAULT_RULE_YEARS,
        set_default=get_default_rule() is None,
    )


def seed_samples() -> None:
    with Session(get_engine()) as session:
        now = now_iso()
        for h in SAMPLE_HOUSEHOLDS:
            if session.get(Household, h["id"]) is None:
                session.add(Household(created_at=now, updated_at=now, **h))
        session.flush()
        for d in SAMPLE_DECEASED:
            if session.get(Deceased, d["id"]) is None:
                session.add(Deceased(created_at=now, updated_at=now, **d))
        session.commit()


def main() -> None:
    init_db()
    rule = seed_default_rule()
    emit("info", "seed.rule", f"memorial rule ready: {rule['name']}", None, __name__, rule_id=rule["id"])
    seed_samples()
    out = generate_memorial_instances()
    emit("info", "seed.memorial", "memorial instances generated", None, __name__, **out)


if __name__ == "__main__":
    main()
