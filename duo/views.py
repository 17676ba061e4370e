"""Assembles the two plan queries: a windowed list and a month calendar.

Pure functions over in-memory tasks and fixed blocks; no storage access.
"""

import logging
from collections.abc import Iterable
from datetime import date
from enum import Enum

from .core.models import CalendarDay, FixedBlock, Item, Occurrence, Task
from .lib import clock as _clock
from .lib.calendar import in_week, is_today, month_grid, parse_date, week_window, window_dates
from .lib.ordering import sort_items
from .lib.recurrence import occurrences_between, occurrences_on
from .lib.visibility import visible
from .lib.who import normalize_who

__all__ = ["Window", "calendar_view", "fixed_for_window", "list_view", "parse_window"]

logger = logging.getLogger(__name__)


class Window(Enum):
    TODAY = "hoy"
    WEEK = "semana"
    ALL = "todas"


_WINDOW_ALIASES = {
    "hoy": Window.TODAY,
    "today": Window.TODAY,
    "semana": Window.WEEK,
    "week": Window.WEEK,
    "this-week": Window.WEEK,
    "todas": Window.ALL,
    "all": Window.ALL,
}


def parse_window(raw: object) -> Window:
    """Unknown selectors fall back to the week view."""
    if isinstance(raw, Window):
        return raw
    if raw is None:
        return Window.WEEK
    return _WINDOW_ALIASES.get(str(raw).strip().lower(), Window.WEEK)


def _in_window(task: Task, window: Window, clock: _clock.Clock) -> bool:
    if window is Window.TODAY:
        return is_today(task.scheduled_date, clock)
    if window is Window.WEEK:
        return in_week(task.scheduled_date, week_window(clock=clock))
    return True


def fixed_for_window(
    blocks: Iterable[FixedBlock],
    window: Window | str | None,
    viewer: object,
    clock: _clock.Clock | None = None,
) -> list[Occurrence]:
    """Fixed occurrences for today or this week, date by date in block order.

    The "all" window has no date span, so it never yields occurrences.
    """
    window = parse_window(window)
    clock = clock or _clock.current()
    if window is Window.TODAY:
        today = clock.today()
        occurrences = occurrences_between(blocks, today, today)
    elif window is Window.WEEK:
        days = window_dates(week_window(clock=clock))
        occurrences = occurrences_between(blocks, days[0], days[-1])
    else:
        return []
    return visible(occurrences, viewer)


def list_view(
    tasks: Iterable[Task],
    window: Window | str | None,
    viewer: object,
    clock: _clock.Clock | None = None,
    blocks: Iterable[FixedBlock] | None = None,
) -> list[Item]:
    """Visible tasks in the window, ranked.

    Pass `blocks` to merge that window's fixed occurrences into the ranking.
    """
    window = parse_window(window)
    clock = clock or _clock.current()
    viewer = normalize_who(viewer)
    items: list[Item] = [t for t in visible(tasks, viewer) if _in_window(t, window, clock)]
    if blocks is not None:
        items.extend(fixed_for_window(blocks, window, viewer, clock))
    logger.debug("list view %s for %s: %d items", window.value, viewer.value, len(items))
    return sort_items(items)


def calendar_view(
    tasks: Iterable[Task],
    blocks: Iterable[FixedBlock],
    year: int,
    month: int,
    viewer: object,
    clock: _clock.Clock | None = None,
) -> list[CalendarDay]:
    viewer = normalize_who(viewer)
    blocks = list(blocks)
    by_date: dict[date, list[Item]] = {}
    for task in visible(tasks, viewer):
        d = parse_date(task.scheduled_date)
        if d is not None:
            by_date.setdefault(d, []).append(task)

    days = []
    for cell in month_grid(year, month, clock):
        items: list[Item] = list(by_date.get(cell.day, []))
        items.extend(visible(occurrences_on(blocks, cell.day), viewer))
        days.append(CalendarDay(cell=cell, items=sort_items(items)))
    return days
