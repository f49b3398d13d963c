"""
Test configuration and fixtures.

Each test gets its own SQLite file under tmp_path; the cached engine is reset
so DATABASE_URL is re-read.
"""
from __future__ import annotations

import json
from datetime import date
from typing import Callable, List

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, select

from temple_api.core import db
from temple_api.core.ids import new_ulid, now_iso
from temple_api.main import app
from temple_api.modules.deceased.models import Deceased
from temple_api.modules.households.models import Household
from temple_api.modules.memorial import service as memorial_service
from temple_api.modules.memorial.models import MemorialInstance
from temple_api.modules.memorial_rules.models import MemorialRule

STANDARD_YEARS = [1, 3, 7, 13, 17, 23, 27, 33, 50]


@pytest.fixture(autouse=True)
def engine(tmp_path, monkeypatch):
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{(tmp_path / 'test.db').as_posix()}")
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    db.reset_engine()
    db.init_db()
    yield db.get_engine()
    db.reset_engine()


@pytest.fixture
def client(engine) -> TestClient:
    return TestClient(app)


@pytest.fixture
def pin_today(monkeypatch) -> Callable[[date], None]:
    def _pin(d: date) -> None:
        monkeypatch.setattr(memorial_service, "_today", lambda: d)

    return _pin


@pytest.fixture
def add_rule(engine) -> Callable[..., str]:
    def _add(years: List[int] = STANDARD_YEARS, *, is_default: bool = True, name: str = "標準年忌") -> str:
        rid = new_ulid()
        now = now_iso()
        with Session(engine) as s:
            s.add(
                MemorialRule(
                    id=rid,
                    name=name,
                    years_json=json.dumps(years),
                    is_default=1 if is_default else 0,
                    created_at=now,
                    updated_at=now,
                )
            )
            s.commit()
        return rid

    return _add


@pytest.fixture
def household_id(engine) -> str:
    hid = new_ulid()
    now = now_iso()
    with Session(engine) as s:
        s.add(Household(id=hid, name="山田家", created_at=now, updated_at=now))
        s.commit()
    return hid


@pytest.fixture
def add_deceased(engine, household_id) -> Callable[..., str]:
    def _add(death_date: date, *, last_name: str = "山田", first_name: str = "太郎") -> str:
        did = new_ulid()
        now = now_iso()
        with Session(engine) as s:
            s.add(
                Deceased(
                    id=did,
                    household_id=household_id,
                    last_name=last_name,
                    first_name=first_name,
                    death_date=death_date,
                    created_at=now,
                    updated_at=now,
                )
            )
            s.commit()
        return did

    return _add


@pytest.fixture
def instances(engine) -> Callable[..., List[MemorialInstance]]:
    def _all(deceased_id: str | None = None) -> List[MemorialInstance]:
        with Session(engine) as s:
            stmt = select(MemorialInstance)
            if deceased_id:
                stmt = stmt.where(MemorialInstance.deceased_id == deceased_id)
            return list(s.exec(stmt.order_by(MemorialInstance.deceased_id, MemorialInstance.year)).all())

    return _all
