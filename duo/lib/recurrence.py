import logging
from collections.abc import Iterable
from datetime import date, timedelta

from duo.core.models import FixedBlock, Occurrence

from .calendar import parse_date

__all__ = ["normalize_day", "occurrences_between", "occurrences_on", "occurs_on", "resolve_days"]

logger = logging.getLogger(__name__)

_DAY_TOKENS: dict[str, int] = {
    "mon": 1,
    "tue": 2,
    "wed": 3,
    "thu": 4,
    "fri": 5,
    "sat": 6,
    "sun": 7,
    "lun": 1,
    "mar": 2,
    "mie": 3,
    "mié": 3,
    "jue": 4,
    "vie": 5,
    "sab": 6,
    "sáb": 6,
    "dom": 7,
}


def normalize_day(token: object) -> int | None:
    """ISO weekday (1=Mon..7=Sun) for a numeric or three-letter day token."""
    if isinstance(token, bool):
        return None
    if isinstance(token, int):
        return token if 1 <= token <= 7 else None
    if not isinstance(token, str):
        return None
    token = token.strip().lower()
    if token.isdigit():
        n = int(token)
        return n if 1 <= n <= 7 else None
    return _DAY_TOKENS.get(token)


def resolve_days(tokens: Iterable[object]) -> frozenset[int]:
    days = set()
    for token in tokens:
        n = normalize_day(token)
        if n is None:
            logger.debug("dropping unresolvable day token %r", token)
            continue
        days.add(n)
    return frozenset(days)


def occurs_on(block: FixedBlock, day: date) -> bool:
    days = resolve_days(block.days)
    if not days or day.isoweekday() not in days:
        return False
    start = parse_date(block.date_start)
    if start is not None and day < start:
        return False
    end = parse_date(block.date_end)
    return not (end is not None and day > end)


def occurrences_on(blocks: Iterable[FixedBlock], day: date) -> list[Occurrence]:
    return [
        Occurrence(
            block_id=b.id,
            label=b.label,
            who=b.who,
            scheduled_date=day,
            start_time=b.start_time,
            end_time=b.end_time,
            location=b.location,
        )
        for b in blocks
        if occurs_on(b, day)
    ]


def occurrences_between(blocks: Iterable[FixedBlock], first: date, last: date) -> list[Occurrence]:
    """Occurrences for every date in [first, last], date by date."""
    blocks = list(blocks)
    out: list[Occurrence] = []
    day = first
    while day <= last:
        out.extend(occurrences_on(blocks, day))
        day += timedelta(days=1)
    return out
