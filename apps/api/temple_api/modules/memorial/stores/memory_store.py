from __future__ import annotations

from dataclasses import replace
from datetime import date
from typing import Dict, List, Optional, Tuple

from temple_api.core.errors import PersistenceError
from temple_api.core.ids import new_ulid

from .base import InstanceRecord


class InMemoryInstanceStore:
    """
    Dict-backed store keyed by (deceased_id, year):
    - used by unit tests and dry runs
    - enforces the same natural-key uniqueness as the DB constraint
    """

    def __init__(self, records: Optional[List[InstanceRecord]] = None) -> None:
        self._rows: Dict[Tuple[str, int], InstanceRecord] = {}
        self.writes = 0
        for r in records or []:
            self._rows[(r.deceased_id, r.year)] = r

    def find(self, deceased_id: str, year: int) -> Optional[InstanceRecord]:
        return self._rows.get((deceased_id, year))

    def create(self, *, deceased_id: str, year: int, due_date: date, memorial_rule_id: str) -> InstanceRecord:
        key = (deceased_id, year)
        if key in self._rows:
            raise PersistenceError(
                "memorial instance already exists",
                retryable=True,
                details={"deceased_id": deceased_id, "year": year},
            )
        rec = InstanceRecord(
            id=new_ulid(),
            deceased_id=deceased_id,
            year=year,
            due_date=due_date,
            memorial_rule_id=memorial_rule_id,
        )
        self._rows[key] = rec
        self.writes += 1
        return rec

    def update(self, instance_id: str, *, due_date: date, memorial_rule_id: str) -> InstanceRecord:
        for key, rec in self._rows.items():
            if rec.id == instance_id:
                new = replace(rec, due_date=due_date, memorial_rule_id=memorial_rule_id)
                self._rows[key] = new
                self.writes += 1
                return new
        raise PersistenceError("memorial instance not found", details={"id": instance_id})

    def all(self) -> List[InstanceRecord]:
        return sorted(self._rows.values(), key=lambda r: (r.deceased_id, r.year))
