from __future__ import annotations

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class Window:
    """Inclusive date range [start, end]."""
    start: date
    end: date

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValueError(f"window start {self.start.isoformat()} is after end {self.end.isoformat()}")

    def contains(self, d: date) -> bool:
        return self.start <= d <= self.end


def add_years(base: date, years: int) -> date:
    """
    Advance by calendar years (same month/day), not 365-day blocks.
    Feb 29 landing in a non-leap year clamps to Feb 28.
    """
    try:
        return base.replace(year=base.year + years)
    except ValueError:
        return base.replace(month=2, day=28, year=base.year + years)


def default_window(today: date) -> Window:
    return Window(start=today, end=add_years(today, 1))


def resolve_window(today: date, from_date: date | None = None, to_date: date | None = None) -> Window:
    start = from_date or today
    end = to_date or add_years(start, 1)
    return Window(start=start, end=end)
