"""
Memorial schedule generator.

Pure reconciliation over explicit inputs: the caller resolves the default
rule and the deceased scope, and hands in a store. Nothing here reads global
state or catches store errors.

Per (deceased, year) pair whose due date falls inside the window:
- no instance yet          -> create
- instance completed       -> untouched (completed history is immutable)
- same due date + rule id  -> untouched
- otherwise                -> update due date + rule id
Pairs outside the window are ignored, even if a stale instance exists.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Iterable, List, Tuple

from .calendar import Window, add_years
from .stores.base import InstanceStore


@dataclass(frozen=True)
class RuleSnapshot:
    id: str
    name: str
    years: Tuple[int, ...]


@dataclass(frozen=True)
class DeceasedSnapshot:
    id: str
    death_date: date


@dataclass(frozen=True)
class GenerateResult:
    created: int = 0
    updated: int = 0
    skipped_completed: int = 0

    @property
    def total(self) -> int:
        return self.created + self.updated

    def as_dict(self) -> Dict[str, Any]:
        return {
            "created": self.created,
            "updated": self.updated,
            "skipped_completed": self.skipped_completed,
            "total": self.total,
        }


def due_dates(rule: RuleSnapshot, death_date: date, window: Window) -> List[Tuple[int, date]]:
    """(year, due_date) pairs of `rule` that land inside `window`."""
    out: List[Tuple[int, date]] = []
    for y in rule.years:
        due = add_years(death_date, y)
        if window.contains(due):
            out.append((y, due))
    return out


def generate(
    rule: RuleSnapshot,
    deceased: Iterable[DeceasedSnapshot],
    window: Window,
    store: InstanceStore,
) -> GenerateResult:
    created = 0
    updated = 0
    skipped = 0

    for d in deceased:
        for year, due in due_dates(rule, d.death_date, window):
            existing = store.find(d.id, year)
            if existing is None:
                store.create(deceased_id=d.id, year=year, due_date=due, memorial_rule_id=rule.id)
                created += 1
                continue

            if existing.completed_at is not None:
                skipped += 1
                continue

            if existing.due_date == due and existing.memorial_rule_id == rule.id:
                continue

            store.update(existing.id, due_date=due, memorial_rule_id=rule.id)
            updated += 1

    return GenerateResult(created=created, updated=updated, skipped_completed=skipped)
