from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional, Protocol


@dataclass(frozen=True)
class InstanceRecord:
    """
    Persisted MemorialInstance as seen by the generator.

    NOTE:
    - only the fields the generator reads/writes are carried here.
    - completed_at is an ISO timestamp string or None.
    """
    id: str
    deceased_id: str
    year: int
    due_date: date
    memorial_rule_id: str
    completed_at: Optional[str] = None


class InstanceStore(Protocol):
    """
    Persistence capability handed to the generator.
    Implementations raise PersistenceError on read/write failure; the generator
    never catches it.
    """

    def find(self, deceased_id: str, year: int) -> Optional[InstanceRecord]:
        ...

    def create(self, *, deceased_id: str, year: int, due_date: date, memorial_rule_id: str) -> InstanceRecord:
        ...

    def update(self, instance_id: str, *, due_date: date, memorial_rule_id: str) -> InstanceRecord:
        ...
