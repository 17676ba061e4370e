import sqlite3
from datetime import date

from fncli import cli

from . import db
from .auth import require_admin
from .core.errors import NotFoundError, ValidationError
from .core.models import FixedBlock, Who
from .lib import ansi
from .lib import clock as _clock
from .lib.calendar import parse_date
from .lib.converters import BLOCK_COLS, block_to_row, row_to_block
from .lib.errors import echo
from .lib.parsing import parse_day_list, parse_due_date, parse_time
from .lib.recurrence import resolve_days
from .lib.render import who_label
from .lib.who import normalize_who
from .tasks import new_id

__all__ = ["add_block", "delete_block", "get_blocks", "insert_block"]

_DAY_NAMES = ["lun", "mar", "mié", "jue", "vie", "sáb", "dom"]


def _bound(value: date | str | None, what: str) -> date | None:
    if value is None or isinstance(value, date):
        return value
    if not value.strip():
        return None
    parsed = parse_date(value) or parse_due_date(value)
    if parsed is None:
        raise ValidationError(f"Invalid {what} '{value}' - use YYYY-MM-DD")
    return parsed


def _clock_time(value: str, what: str) -> str:
    try:
        return parse_time(value)
    except ValueError as e:
        raise ValidationError(f"Invalid {what}: {e}") from e


def insert_block(block: FixedBlock, clock: _clock.Clock | None = None) -> None:
    created_at = (clock or _clock.current()).now().isoformat(sep=" ", timespec="seconds")
    with db.get_db() as conn:
        try:
            conn.execute(
                f"INSERT INTO fixed_blocks ({BLOCK_COLS}, created_at) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",  # noqa: S608
                (*block_to_row(block), created_at),
            )
        except sqlite3.IntegrityError as e:
            raise ValidationError(f"Failed to add fixed block: {e}") from e


def add_block(
    pin: str | None,
    label: str,
    days: list[int | str] | str,
    start_time: str,
    end_time: str,
    who: Who | str | None = None,
    location: str = "",
    date_start: date | str | None = None,
    date_end: date | str | None = None,
) -> FixedBlock:
    require_admin(pin)
    if not label or not label.strip():
        raise ValidationError("Label cannot be empty")
    tokens = parse_day_list(days) if isinstance(days, str) else list(days)
    if not resolve_days(tokens):
        raise ValidationError("At least one valid day is required (1-7, mon..sun, lun..dom)")
    start, end = _bound(date_start, "start date"), _bound(date_end, "end date")
    if start and end and start > end:
        raise ValidationError(f"Start date {start} is after end date {end}")

    block = FixedBlock(
        id=new_id(),
        label=label.strip(),
        who=normalize_who(who),
        days=tuple(tokens),
        start_time=_clock_time(start_time, "start time"),
        end_time=_clock_time(end_time, "end time"),
        location=(location or "").strip(),
        date_start=start,
        date_end=end,
    )
    insert_block(block)
    return block


def get_blocks() -> list[FixedBlock]:
    """All blocks in creation order."""
    with db.get_db() as conn:
        rows = conn.execute(
            f"SELECT {BLOCK_COLS} FROM fixed_blocks ORDER BY created_at, rowid"  # noqa: S608
        ).fetchall()
    return [row_to_block(r) for r in rows]


def delete_block(pin: str | None, block_id: str) -> FixedBlock:
    require_admin(pin)
    matches = [b for b in get_blocks() if b.id == block_id or b.id.startswith(block_id)]
    if not block_id or len(matches) != 1:
        raise NotFoundError(f"No fixed block found for '{block_id}'")
    with db.get_db() as conn:
        conn.execute("DELETE FROM fixed_blocks WHERE id = ?", (matches[0].id,))
    return matches[0]


def format_block(block: FixedBlock) -> str:
    days = " ".join(_DAY_NAMES[d - 1] for d in sorted(resolve_days(block.days)))
    span = ""
    if block.date_start or block.date_end:
        first = block.date_start.isoformat() if block.date_start else "…"
        last = block.date_end.isoformat() if block.date_end else "…"
        span = f"  {first} → {last}"
    where = f"  @ {block.location}" if block.location else ""
    owner = ansi.tint(block.who, who_label(block.who))
    return (
        f"🔒 {block.label}  {days} {block.start_time}-{block.end_time}{where}{ansi.muted(span)}"
        f"  {owner} {ansi.muted(f'[{block.id[:8]}]')}"
    )


@cli("duo fixed", name="add")
def add(
    label: list[str],
    days: str = "",
    start: str = "",
    end: str = "",
    pin: str = "",
    who: str = "ambos",
    location: str = "",
    since: str | None = None,
    until: str | None = None,
) -> None:
    """Add a recurring fixed block (admin)"""
    block = add_block(
        pin,
        " ".join(label),
        days,
        start,
        end,
        who=who,
        location=location,
        date_start=since,
        date_end=until,
    )
    echo(format_block(block))


@cli("duo fixed", name="rm")
def rm(block_id: str, pin: str = "") -> None:
    """Remove a fixed block (admin)"""
    block = delete_block(pin, block_id)
    echo(f"✗ {block.label}")


@cli("duo fixed", name="ls", default=True)
def ls() -> None:
    """List fixed blocks"""
    blocks = get_blocks()
    if not blocks:
        echo("no fixed blocks")
        return
    for block in blocks:
        echo(format_block(block))
