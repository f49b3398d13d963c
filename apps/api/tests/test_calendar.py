from datetime import date

import pytest

from temple_api.modules.memorial.calendar import Window, add_years, default_window, resolve_window


def test_add_years_keeps_month_and_day():
    assert add_years(date(2024, 6, 15), 1) == date(2025, 6, 15)
    assert add_years(date(2024, 6, 15), 50) == date(2074, 6, 15)


def test_add_years_is_calendar_not_fixed_days():
    # 365 days after 2023-03-01 would be 2024-02-29
    assert add_years(date(2023, 3, 1), 1) == date(2024, 3, 1)


def test_leap_day_clamps_to_feb_28_in_common_year():
    assert add_years(date(2024, 2, 29), 1) == date(2025, 2, 28)
    assert add_years(date(2024, 2, 29), 3) == date(2027, 2, 28)


def test_leap_day_kept_in_leap_year():
    assert add_years(date(2024, 2, 29), 4) == date(2028, 2, 29)


def test_default_window_is_one_calendar_year_inclusive():
    w = default_window(date(2025, 5, 1))
    assert w == Window(date(2025, 5, 1), date(2026, 5, 1))
    assert w.contains(date(2025, 5, 1))
    assert w.contains(date(2026, 5, 1))
    assert not w.contains(date(2026, 5, 2))
    assert not w.contains(date(2025, 4, 30))


def test_resolve_window_defaults_from_today():
    today = date(2025, 5, 1)
    assert resolve_window(today) == Window(today, date(2026, 5, 1))
    assert resolve_window(today, to_date=date(2025, 12, 31)) == Window(today, date(2025, 12, 31))
    assert resolve_window(today, from_date=date(2030, 1, 1)) == Window(date(2030, 1, 1), date(2031, 1, 1))


def test_inverted_window_rejected():
    with pytest.raises(ValueError):
        Window(date(2025, 6, 2), date(2025, 6, 1))
