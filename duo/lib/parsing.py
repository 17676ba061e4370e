import re
from datetime import date, datetime, timedelta

from dateutil import parser as dateutil_parser
from dateutil.parser import ParserError

from . import clock
from .recurrence import normalize_day

__all__ = ["parse_day_list", "parse_due_date", "parse_time", "validate_content"]

_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})$")

_DAY_ALIASES = {
    "monday": "mon",
    "tuesday": "tue",
    "wednesday": "wed",
    "thursday": "thu",
    "friday": "fri",
    "saturday": "sat",
    "sunday": "sun",
    "lunes": "lun",
    "martes": "mar",
    "miercoles": "mie",
    "miércoles": "mie",
    "jueves": "jue",
    "viernes": "vie",
    "sabado": "sab",
    "sábado": "sab",
    "domingo": "dom",
}

_RELATIVE = {"today": 0, "hoy": 0, "tomorrow": 1, "manana": 1, "mañana": 1, "yesterday": -1, "ayer": -1}


def validate_content(content: str, what: str = "Title") -> None:
    """Raises ValueError for empty or whitespace-only text."""
    if not content or not content.strip():
        raise ValueError(f"{what} cannot be empty or whitespace-only")


def parse_time(time_str: str) -> str:
    time_str = time_str.strip().lower()
    m = _TIME_RE.match(time_str)
    if m:
        h, mn = int(m.group(1)), int(m.group(2))
        if 0 <= h <= 23 and 0 <= mn <= 59:
            return f"{h:02d}:{mn:02d}"
    raise ValueError(f"Invalid time '{time_str}' - use HH:MM")


def parse_due_date(due_str: str, today: date | None = None) -> date | None:
    """Parse 'today', 'tomorrow', a day name ('fri', 'viernes') or a free-form date.

    Day names resolve to the next such day, today included.
    """
    today = today or clock.today()
    key = due_str.strip().lower()
    if not key:
        return None
    if key in _RELATIVE:
        return today + timedelta(days=_RELATIVE[key])
    key = _DAY_ALIASES.get(key, key)
    if not key.isdigit():
        weekday = normalize_day(key)
        if weekday is not None:
            return today + timedelta(days=(weekday - today.isoweekday()) % 7)
    if _TIME_RE.match(key):
        return None
    try:
        return dateutil_parser.parse(
            due_str, default=datetime(today.year, today.month, today.day)
        ).date()
    except (ParserError, ValueError, OverflowError):
        return None


def parse_day_list(spec: str) -> list[int | str]:
    """Split 'mon,wed,5' / 'lun vie' into raw tokens; numeric tokens become ints."""
    tokens: list[int | str] = []
    for part in re.split(r"[\s,]+", spec.strip()):
        if not part:
            continue
        key = _DAY_ALIASES.get(part.lower(), part.lower())
        tokens.append(int(key) if key.isdigit() else key)
    return tokens
