"""Day, week and month windows, all in the clock's timezone.

Weeks run Monday..Sunday (ISO weekday 1..7). Month grids are always 6x7
starting on the Monday on or before the 1st.
"""

from datetime import MAXYEAR, MINYEAR, date, datetime, time, timedelta

from duo.core.models import CalendarCell, WeekWindow

from . import clock as _clock

__all__ = [
    "GRID_CELLS",
    "in_week",
    "is_today",
    "month_grid",
    "parse_date",
    "shift_month",
    "week_window",
    "window_dates",
]

GRID_CELLS = 42

_END_OF_DAY = time(23, 59, 59)
_NOON = time(12, 0, 0)


def parse_date(value: object) -> date | None:
    """Coerce a stored date value. Anything unparseable is no date at all."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        return date.fromisoformat(value.strip().split("T")[0])
    except ValueError:
        return None


def week_window(around: date | None = None, clock: _clock.Clock | None = None) -> WeekWindow:
    clock = clock or _clock.current()
    around = around or clock.today()
    monday = around - timedelta(days=around.isoweekday() - 1)
    # the week holding date.max is cut short at 9999-12-31
    sunday = monday + timedelta(days=6) if date.max - monday >= timedelta(days=6) else date.max
    return WeekWindow(
        start=datetime.combine(monday, time.min, tzinfo=clock.tz),
        end=datetime.combine(sunday, _END_OF_DAY, tzinfo=clock.tz),
    )


def window_dates(window: WeekWindow) -> list[date]:
    first = window.start.date()
    return [first + timedelta(days=i) for i in range((window.end.date() - first).days + 1)]


def in_week(value: object, window: WeekWindow) -> bool:
    d = parse_date(value)
    if d is None:
        return False
    at = datetime.combine(d, _NOON, tzinfo=window.start.tzinfo)
    return window.start <= at <= window.end


def is_today(value: object, clock: _clock.Clock | None = None) -> bool:
    d = parse_date(value)
    if d is None:
        return False
    return d == (clock or _clock.current()).today()


def shift_month(year: int, month: int, delta: int = 0) -> tuple[int, int]:
    """Move `delta` months from (year, month), wrapping across years.

    Out-of-range months are folded in the same way, so (2024, 13) -> (2025, 1).
    Years are clamped to MINYEAR..MAXYEAR-1 since the six-week grid for
    December 9999 would run past date.max; months of year 9999 land on 9998.
    """
    index = year * 12 + (month - 1) + delta
    y, m = divmod(index, 12)
    y = min(max(y, MINYEAR), MAXYEAR - 1)
    return y, m + 1


def month_grid(year: int, month: int, clock: _clock.Clock | None = None) -> list[CalendarCell]:
    year, month = shift_month(year, month)
    today = (clock or _clock.current()).today()
    first = date(year, month, 1)
    start = first - timedelta(days=first.isoweekday() - 1)
    cells = []
    for i in range(GRID_CELLS):
        d = start + timedelta(days=i)
        cells.append(CalendarCell(day=d, in_month=d.month == month, is_today=d == today))
    return cells
