import calendar
from datetime import date, datetime, timedelta, timezone

import pytest

from duo.lib.calendar import (
    GRID_CELLS,
    in_week,
    is_today,
    month_grid,
    parse_date,
    shift_month,
    week_window,
    window_dates,
)
from duo.lib.clock import Clock

TZ = "America/Santiago"


def _clock(y, m, d, hour=10):
    return Clock(TZ, frozen=datetime(y, m, d, hour, 0))


def test_week_window_monday_to_sunday():
    window = week_window(clock=_clock(2024, 5, 15))
    assert window.start.date() == date(2024, 5, 13)
    assert window.end.date() == date(2024, 5, 19)
    assert (window.start.hour, window.start.minute) == (0, 0)
    assert (window.end.hour, window.end.minute, window.end.second) == (23, 59, 59)


def test_week_window_on_monday_and_sunday():
    assert week_window(date(2024, 5, 13), _clock(2024, 5, 13)).start.date() == date(2024, 5, 13)
    assert week_window(date(2024, 5, 19), _clock(2024, 5, 19)).start.date() == date(2024, 5, 13)


def test_week_window_uses_clock_timezone():
    # 02:00 UTC Monday is still Sunday evening in Santiago (UTC-4 in May)
    c = Clock(TZ, frozen=datetime(2024, 5, 20, 2, 0, tzinfo=timezone.utc))
    assert c.today() == date(2024, 5, 19)
    assert week_window(clock=c).start.date() == date(2024, 5, 13)


def test_week_window_near_date_max_is_cut_short():
    window = week_window(date(9999, 12, 31), _clock(2024, 5, 15))
    assert window.start.date() == date(9999, 12, 27)
    assert window.end.date() == date.max
    assert window_dates(window)[-1] == date.max
    assert in_week(date.max, window)


def test_week_window_at_date_min():
    window = week_window(date.min, _clock(2024, 5, 15))
    assert window.start.date() == date.min
    assert window.end.date() == date(1, 1, 7)


def test_window_dates_has_seven_days():
    days = window_dates(week_window(clock=_clock(2024, 5, 15)))
    assert days == [date(2024, 5, 13) + timedelta(days=i) for i in range(7)]


@pytest.mark.parametrize("around", [date(2024, 1, 1), date(2024, 2, 29), date(2024, 12, 31)])
def test_in_week_matches_bounds(around):
    window = week_window(around, _clock(2024, 6, 1))
    mon, sun = window.start.date(), window.end.date()
    for offset in range(-3, 10):
        d = mon + timedelta(days=offset)
        assert in_week(d, window) == (mon <= d <= sun)
    assert not in_week(mon - timedelta(days=1), window)
    assert not in_week(sun + timedelta(days=1), window)


def test_in_week_accepts_iso_strings():
    window = week_window(clock=_clock(2024, 5, 15))
    assert in_week("2024-05-19", window)
    assert not in_week("2024-05-20", window)


@pytest.mark.parametrize("value", [None, "", "not a date", "2024-13-40", 12])
def test_in_week_and_is_today_fail_closed(value):
    c = _clock(2024, 5, 15)
    assert not in_week(value, week_window(clock=c))
    assert not is_today(value, c)


def test_is_today():
    c = _clock(2024, 5, 15)
    assert is_today(date(2024, 5, 15), c)
    assert is_today("2024-05-15", c)
    assert not is_today(date(2024, 5, 16), c)


def test_parse_date():
    assert parse_date("2024-05-15") == date(2024, 5, 15)
    assert parse_date("2024-05-15T08:30:00") == date(2024, 5, 15)
    assert parse_date(datetime(2024, 5, 15, 8, 30)) == date(2024, 5, 15)
    assert parse_date("15/05/2024") is None


@pytest.mark.parametrize(("year", "month"), [(2024, 1), (2024, 2), (2023, 2), (2024, 5), (2024, 9), (2025, 6)])
def test_month_grid_shape(year, month):
    cells = month_grid(year, month, _clock(2024, 5, 15))
    assert len(cells) == GRID_CELLS
    assert cells[0].day.isoweekday() == 1
    assert sum(c.in_month for c in cells) == calendar.monthrange(year, month)[1]
    days = [c.day for c in cells]
    assert all(b - a == timedelta(days=1) for a, b in zip(days, days[1:], strict=False))


def test_month_grid_starts_on_monday_before_first():
    cells = month_grid(2024, 9, _clock(2024, 5, 15))
    # 2024-09-01 is a Sunday
    assert cells[0].day == date(2024, 8, 26)
    assert not cells[0].in_month
    assert cells[6].day == date(2024, 9, 1)
    assert cells[6].in_month
    assert cells[-1].day == date(2024, 10, 6)


def test_month_grid_first_is_monday():
    cells = month_grid(2024, 1, _clock(2024, 5, 15))
    assert cells[0].day == date(2024, 1, 1)


def test_month_grid_flags_today_once():
    cells = month_grid(2024, 5, _clock(2024, 5, 15))
    today = [c for c in cells if c.is_today]
    assert [c.day for c in today] == [date(2024, 5, 15)]
    other = month_grid(2024, 7, _clock(2024, 5, 15))
    assert not any(c.is_today for c in other)


def test_shift_month_wraps_years():
    assert shift_month(2024, 12, 1) == (2025, 1)
    assert shift_month(2024, 1, -1) == (2023, 12)
    assert shift_month(2024, 13) == (2025, 1)
    assert shift_month(2024, 0) == (2023, 12)
    assert shift_month(2024, 5, 0) == (2024, 5)


def test_shift_month_clamps_year_range():
    assert shift_month(9999, 12) == (9998, 12)
    assert shift_month(9998, 12, 1) == (9998, 1)
    assert shift_month(1, 1, -1) == (1, 12)


def test_month_grid_at_year_9999_lands_on_9998():
    cells = month_grid(9999, 12, _clock(2024, 5, 15))
    assert len(cells) == GRID_CELLS
    assert cells[0].day == date(9998, 11, 30)
    assert all(c.day.year == 9998 for c in cells if c.in_month)
