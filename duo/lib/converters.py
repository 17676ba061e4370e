import json
from collections.abc import Mapping
from datetime import date, datetime
from typing import cast

from duo.core.models import FixedBlock, Task

from . import clock as _clock
from .calendar import parse_date
from .who import normalize_priority, normalize_status, normalize_who

TaskRow = tuple[object, ...]
BlockRow = tuple[object, ...]

TASK_COLS = "id, title, notes, who, priority, date, time, status, created_at"
BLOCK_COLS = "id, label, who, days, start_time, end_time, location, date_start, date_end"


def _parse_datetime_optional(val) -> datetime | None:
    """Parse a stored timestamp: ISO string, 'Y-m-d H:M:S', or numeric epoch."""
    if isinstance(val, datetime):
        return val
    if isinstance(val, (int, float)) and not isinstance(val, bool):
        # epoch seconds read as wall time in the planner timezone, stored naive
        try:
            return datetime.fromtimestamp(val, _clock.current().tz).replace(tzinfo=None)
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(val, str) and val.strip():
        try:
            return datetime.fromisoformat(val.strip())
        except ValueError:
            d = parse_date(val)
            return datetime.combine(d, datetime.min.time()) if d else None
    return None


def _text(val) -> str:
    return str(val).strip() if val is not None else ""


def _optional_text(val) -> str | None:
    text = _text(val)
    return text or None


def _parse_days(val) -> tuple[int | str, ...]:
    """Stored days are a JSON array of raw tokens; a bare scalar is one token."""
    if isinstance(val, str):
        try:
            val = json.loads(val)
        except ValueError:
            val = [t for t in val.split(",") if t.strip()]
    if isinstance(val, (list, tuple)):
        return tuple(t for t in val if isinstance(t, (int, str)) and not isinstance(t, bool))
    if isinstance(val, (int, str)) and not isinstance(val, bool):
        return (val,)
    return ()


def row_to_task(row: TaskRow) -> Task:
    """
    Converts a raw row from the tasks table into a Task.
    Expected row format: (id, title, notes, who, priority, date, time, status, created_at)
    """
    scheduled_date = parse_date(row[5])
    return Task(
        id=cast(str, row[0]),
        title=_text(row[1]),
        notes=_text(row[2]),
        who=normalize_who(row[3]),
        priority=normalize_priority(row[4]),
        scheduled_date=scheduled_date,
        scheduled_time=_optional_text(row[6]) if scheduled_date else None,
        status=normalize_status(row[7]),
        created_at=_parse_datetime_optional(row[8]),
    )


def row_to_block(row: BlockRow) -> FixedBlock:
    """
    Converts a raw row from the fixed_blocks table into a FixedBlock.
    Expected row format: (id, label, who, days, start_time, end_time, location, date_start, date_end)
    """
    return FixedBlock(
        id=cast(str, row[0]),
        label=_text(row[1]),
        who=normalize_who(row[2]),
        days=_parse_days(row[3]),
        start_time=_text(row[4]),
        end_time=_text(row[5]),
        location=_text(row[6]),
        date_start=parse_date(row[7]),
        date_end=parse_date(row[8]),
    )


def record_to_task(record: Mapping[str, object]) -> Task:
    """Legacy JSON task record as found in the old data/tasks.json."""
    return row_to_task(
        (
            _text(record.get("id")),
            record.get("title"),
            record.get("notes"),
            record.get("who"),
            record.get("priority"),
            record.get("date"),
            record.get("time"),
            record.get("status"),
            record.get("created_at"),
        )
    )


def record_to_block(record: Mapping[str, object]) -> FixedBlock:
    """Legacy JSON fixed-block record as found in the old data/fixed.json."""
    return row_to_block(
        (
            _text(record.get("id")),
            record.get("label"),
            record.get("who"),
            record.get("days") or [],
            record.get("start"),
            record.get("end"),
            record.get("location"),
            record.get("date_start"),
            record.get("date_end"),
        )
    )


def _iso(d: date | None) -> str | None:
    return d.isoformat() if d else None


def task_to_row(task: Task) -> TaskRow:
    return (
        task.id,
        task.title,
        task.notes,
        task.who.value,
        task.priority.value,
        _iso(task.scheduled_date),
        task.scheduled_time if task.scheduled_date else None,
        task.status.value,
        (task.created_at or datetime.min).isoformat(sep=" ", timespec="seconds"),
    )


def block_to_row(block: FixedBlock) -> BlockRow:
    return (
        block.id,
        block.label,
        block.who.value,
        json.dumps(list(block.days), ensure_ascii=False),
        block.start_time,
        block.end_time,
        block.location,
        _iso(block.date_start),
        _iso(block.date_end),
    )
