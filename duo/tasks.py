import secrets
import sqlite3
from dataclasses import replace
from datetime import date

from fncli import UsageError, cli

from . import config, db
from .core.errors import AmbiguousError, NotFoundError, ValidationError
from .core.models import Priority, Status, Task, Who
from .lib import ansi
from .lib import clock as _clock
from .lib.calendar import parse_date
from .lib.converters import TASK_COLS, row_to_task, task_to_row
from .lib.errors import echo
from .lib.ordering import sort_items
from .lib.parsing import parse_due_date, parse_time, validate_content
from .lib.render import who_label
from .lib.who import normalize_priority, normalize_who

__all__ = [
    "add_task",
    "delete_task",
    "find_task",
    "get_task",
    "get_tasks",
    "new_id",
    "toggle_task",
    "update_task",
]


# ── domain ───────────────────────────────────────────────────────────────────


def new_id() -> str:
    return secrets.token_hex(6)


def _coerce_date(value: date | str | None) -> date | None:
    if value is None or isinstance(value, date):
        return value
    parsed = parse_date(value)
    if parsed is None and value.strip():
        raise ValidationError(f"Invalid date '{value}' - use YYYY-MM-DD")
    return parsed


def _coerce_time(value: str | None) -> str | None:
    if not value:
        return None
    try:
        return parse_time(value)
    except ValueError as e:
        raise ValidationError(str(e)) from e


def _check_title(title: str) -> str:
    try:
        validate_content(title)
    except ValueError as e:
        raise ValidationError(str(e)) from e
    return title.strip()


def add_task(
    title: str,
    who: Who | str | None = None,
    priority: Priority | str | None = None,
    scheduled_date: date | str | None = None,
    scheduled_time: str | None = None,
    notes: str = "",
    clock: _clock.Clock | None = None,
) -> Task:
    scheduled_date = _coerce_date(scheduled_date)
    task = Task(
        id=new_id(),
        title=_check_title(title),
        notes=(notes or "").strip(),
        who=normalize_who(who),
        priority=normalize_priority(priority),
        scheduled_date=scheduled_date,
        scheduled_time=_coerce_time(scheduled_time) if scheduled_date else None,
        status=Status.PENDING,
        created_at=(clock or _clock.current()).now(),
    )
    with db.get_db() as conn:
        try:
            conn.execute(
                f"INSERT INTO tasks ({TASK_COLS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",  # noqa: S608
                task_to_row(task),
            )
        except sqlite3.IntegrityError as e:
            raise ValidationError(f"Failed to add task: {e}") from e
    return task


def get_task(task_id: str) -> Task | None:
    with db.get_db() as conn:
        row = conn.execute(
            f"SELECT {TASK_COLS} FROM tasks WHERE id = ?",  # noqa: S608
            (task_id,),
        ).fetchone()
    return row_to_task(row) if row else None


def get_tasks() -> list[Task]:
    with db.get_db() as conn:
        rows = conn.execute(f"SELECT {TASK_COLS} FROM tasks").fetchall()  # noqa: S608
    return sort_items(row_to_task(r) for r in rows)


def find_task(ref: str) -> Task:
    """Resolve a task by id, id prefix, exact title, or unique title fragment."""
    ref = ref.strip()
    if not ref:
        raise NotFoundError("No task found: empty reference")
    tasks = get_tasks()
    by_id = [t for t in tasks if t.id == ref]
    if by_id:
        return by_id[0]
    needle = ref.lower()
    for pool in (
        [t for t in tasks if t.id.startswith(needle)],
        [t for t in tasks if t.title.lower() == needle],
        [t for t in tasks if needle in t.title.lower()],
    ):
        if len(pool) == 1:
            return pool[0]
        if len(pool) > 1:
            raise AmbiguousError(ref, len(pool), [t.title for t in pool[:3]])
    raise NotFoundError(f"No task found for '{ref}'")


UNSET: object = object()


def update_task(
    task_id: str,
    title: str | None = None,
    who: Who | str | None = None,
    priority: Priority | str | None = None,
    scheduled_date: date | str | None | object = UNSET,
    scheduled_time: str | None | object = UNSET,
    notes: str | object = UNSET,
) -> Task:
    task = get_task(task_id)
    if task is None:
        raise NotFoundError(f"No task found for '{task_id}'")

    updates: dict[str, object] = {}
    if title is not None:
        updates["title"] = _check_title(title)
    if who is not None:
        updates["who"] = normalize_who(who)
    if priority is not None:
        updates["priority"] = normalize_priority(priority)
    if scheduled_date is not UNSET:
        updates["scheduled_date"] = _coerce_date(scheduled_date)  # type: ignore[arg-type]
    if scheduled_time is not UNSET:
        updates["scheduled_time"] = _coerce_time(scheduled_time)  # type: ignore[arg-type]
    if notes is not UNSET:
        updates["notes"] = str(notes or "").strip()
    if not updates:
        return task

    updated = replace(task, **updates)
    if updated.scheduled_date is None and updated.scheduled_time is not None:
        updated = replace(updated, scheduled_time=None)
    _write(updated)
    return updated


def _write(task: Task) -> None:
    row = task_to_row(task)
    with db.get_db() as conn:
        conn.execute(
            "UPDATE tasks SET title = ?, notes = ?, who = ?, priority = ?, date = ?, time = ?, status = ? WHERE id = ?",
            (*row[1:8], task.id),
        )


def toggle_task(task_id: str) -> Task:
    """Flip pending <-> done."""
    task = get_task(task_id)
    if task is None:
        raise NotFoundError(f"No task found for '{task_id}'")
    status = Status.PENDING if task.status is Status.DONE else Status.DONE
    updated = replace(task, status=status)
    _write(updated)
    return updated


def delete_task(task_id: str) -> bool:
    with db.get_db() as conn:
        cursor = conn.execute("DELETE FROM tasks WHERE id = ?", (task_id,))
    return cursor.rowcount > 0


def format_task_line(task: Task) -> str:
    mark = ansi.green("✓") if task.status is Status.DONE else "□"
    owner = ansi.tint(task.who, who_label(task.who))
    return f"{mark} {task.title}  {owner} {ansi.muted(f'[{task.id[:8]}]')}"


def _parse_when(when: str | None) -> date | None:
    if not when:
        return None
    parsed = parse_due_date(when)
    if parsed is None:
        raise ValidationError(f"Invalid date '{when}' - use today, tomorrow, a day name or YYYY-MM-DD")
    return parsed


# ── cli ──────────────────────────────────────────────────────────────────────


@cli("duo")
def add(
    title: list[str],
    who: str | None = None,
    priority: str = "media",
    when: str | None = None,
    at: str | None = None,
    notes: str = "",
) -> None:
    """Add a task"""
    text = " ".join(title) if title else ""
    if not text.strip():
        raise UsageError("Usage: duo add <title> [--who el|ella|ambos] [--when DATE] [--at HH:MM]")
    task = add_task(
        text,
        who=who if who is not None else config.get_default_viewer(),
        priority=priority,
        scheduled_date=_parse_when(when),
        scheduled_time=at,
        notes=notes,
    )
    echo(format_task_line(task))


@cli("duo")
def done(ref: list[str]) -> None:
    """Toggle a task between pending and done"""
    task = toggle_task(find_task(" ".join(ref)).id)
    echo(format_task_line(task))


@cli("duo")
def rm(ref: list[str]) -> None:
    """Delete a task"""
    task = find_task(" ".join(ref))
    delete_task(task.id)
    echo(f"✗ {task.title}")


@cli("duo")
def edit(
    ref: list[str],
    title: str | None = None,
    who: str | None = None,
    priority: str | None = None,
    when: str | None = None,
    at: str | None = None,
    notes: str | None = None,
    undated: bool = False,
) -> None:
    """Edit a task; --undated moves it back to the backlog"""
    task = find_task(" ".join(ref))
    changes: dict[str, object] = {}
    if undated:
        changes["scheduled_date"] = None
    elif when is not None:
        changes["scheduled_date"] = _parse_when(when)
    if at is not None:
        changes["scheduled_time"] = at
    if notes is not None:
        changes["notes"] = notes
    if title is None and who is None and priority is None and not changes:
        raise UsageError("Nothing to edit. Use --title, --who, --priority, --when, --at, --notes or --undated.")
    updated = update_task(task.id, title=title, who=who, priority=priority, **changes)  # type: ignore[arg-type]
    echo(format_task_line(updated))
