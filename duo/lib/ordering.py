"""The one ranking used wherever plan items are listed.

Keys, first difference wins:
  status   fixed < pending < done
  date     ascending, undated last
  priority high < medium < low < unrecognized
  created  newest first, missing timestamps last
"""

import functools
from collections.abc import Iterable
from datetime import date, datetime
from typing import Protocol, TypeVar

from duo.core.models import Priority, Status

__all__ = ["compare_items", "sort_items"]

_STATUS_RANK = {Status.FIXED: 0, Status.PENDING: 1, Status.DONE: 2}
_PRIORITY_RANK = {Priority.HIGH: 0, Priority.MEDIUM: 1, Priority.LOW: 2}


class _Sortable(Protocol):
    @property
    def status(self) -> Status: ...
    @property
    def scheduled_date(self) -> date | None: ...
    @property
    def priority(self) -> Priority: ...
    @property
    def created_at(self) -> datetime | None: ...


T = TypeVar("T", bound=_Sortable)


def _cmp(a: object, b: object) -> int:
    return (a > b) - (a < b)  # type: ignore[operator]


def _created_key(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    # naive and aware timestamps must still compare
    return value.replace(tzinfo=None)


def compare_items(a: _Sortable, b: _Sortable) -> int:
    sa = _STATUS_RANK.get(a.status, len(_STATUS_RANK))
    sb = _STATUS_RANK.get(b.status, len(_STATUS_RANK))
    if sa != sb:
        return _cmp(sa, sb)

    da, db = a.scheduled_date, b.scheduled_date
    if da is not None and db is not None and da != db:
        return _cmp(da, db)
    if da is None and db is not None:
        return 1
    if da is not None and db is None:
        return -1

    pa = _PRIORITY_RANK.get(a.priority, len(_PRIORITY_RANK))
    pb = _PRIORITY_RANK.get(b.priority, len(_PRIORITY_RANK))
    if pa != pb:
        return _cmp(pa, pb)

    ca, cb = _created_key(a.created_at), _created_key(b.created_at)
    if ca == cb:
        return 0
    if ca is None:
        return 1
    if cb is None:
        return -1
    return _cmp(cb, ca)


def sort_items(items: Iterable[T]) -> list[T]:
    """Stable sort by compare_items; equal items keep their input order."""
    return sorted(items, key=functools.cmp_to_key(compare_items))
