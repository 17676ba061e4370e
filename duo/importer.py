"""One-shot import of the legacy planner data dir (tasks.json, fixed.json)."""

import json
import logging
from dataclasses import replace
from pathlib import Path

from fncli import cli

from . import db
from .core.errors import ValidationError
from .fixed import insert_block
from .lib import clock as _clock
from .lib.converters import TASK_COLS, record_to_block, record_to_task, task_to_row
from .lib.errors import echo
from .tasks import new_id

__all__ = ["import_legacy", "read_records"]

logger = logging.getLogger(__name__)

TASKS_FILE = "tasks.json"
FIXED_FILE = "fixed.json"


def read_records(path: Path) -> list[dict]:
    """A missing, empty or corrupt file reads as no records."""
    if not path.is_file():
        return []
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        logger.warning("cannot read %s: %s", path, e)
        return []
    if not text.strip():
        return []
    try:
        data = json.loads(text)
    except ValueError as e:
        logger.warning("ignoring corrupt %s: %s", path, e)
        return []
    if isinstance(data, dict):
        data = list(data.values())
    if not isinstance(data, list):
        return []
    return [r for r in data if isinstance(r, dict)]


def _existing_ids(table: str) -> set[str]:
    with db.get_db() as conn:
        return {row[0] for row in conn.execute(f"SELECT id FROM {table}").fetchall()}  # noqa: S608


def import_legacy(directory: Path) -> dict[str, int]:
    directory = Path(directory)
    if not directory.is_dir():
        raise ValidationError(f"Not a directory: {directory}")
    counts = {"tasks": 0, "fixed": 0, "skipped": 0}
    now = _clock.now()

    known = _existing_ids("tasks")
    rows = []
    for record in read_records(directory / TASKS_FILE):
        task = record_to_task(record)
        if not task.title:
            logger.warning("skipping task without title: %r", record.get("id"))
            counts["skipped"] += 1
            continue
        if task.id in known:
            counts["skipped"] += 1
            continue
        if not task.id:
            task = replace(task, id=new_id())
        if task.created_at is None:
            task = replace(task, created_at=now)
        known.add(task.id)
        rows.append(task_to_row(task))
    if rows:
        with db.get_db() as conn:
            conn.executemany(
                f"INSERT INTO tasks ({TASK_COLS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",  # noqa: S608
                rows,
            )
    counts["tasks"] = len(rows)

    known = _existing_ids("fixed_blocks")
    for record in read_records(directory / FIXED_FILE):
        block = record_to_block(record)
        if not block.label or not block.start_time or not block.end_time:
            logger.warning("skipping incomplete fixed block: %r", record.get("id"))
            counts["skipped"] += 1
            continue
        if block.id in known:
            counts["skipped"] += 1
            continue
        if not block.id:
            block = replace(block, id=new_id())
        known.add(block.id)
        insert_block(block)
        counts["fixed"] += 1

    logger.info("imported %d tasks, %d fixed blocks from %s", counts["tasks"], counts["fixed"], directory)
    return counts


@cli("duo", name="import")
def import_cmd(directory: str) -> None:
    """Import tasks.json and fixed.json from a legacy data dir"""
    counts = import_legacy(Path(directory).expanduser())
    echo(f"imported: {counts['tasks']} tasks, {counts['fixed']} fixed blocks")
    if counts["skipped"]:
        echo(f"skipped: {counts['skipped']}")
