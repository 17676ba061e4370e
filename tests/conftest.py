import contextlib
import io
from dataclasses import dataclass
from datetime import date, datetime

import pytest

from duo import config, db
from duo.cli import run
from duo.core.models import FixedBlock, Priority, Status, Task, Who
from duo.lib import ansi, clock

TZ = "America/Santiago"
# Wednesday; its week runs Mon 2024-05-13 .. Sun 2024-05-19
FROZEN_NOW = datetime(2024, 5, 15, 10, 0)


@pytest.fixture(autouse=True)
def _plain_output():
    ansi.use(ansi.PLAIN)
    yield
    ansi.use(ansi.DEFAULT)
    clock.use(None)


@pytest.fixture
def frozen_clock():
    c = clock.Clock(TZ, frozen=FROZEN_NOW)
    clock.use(c)
    yield c
    clock.use(None)


@pytest.fixture
def tmp_duo_dir(tmp_path, monkeypatch):
    monkeypatch.setattr(config, "DUO_DIR", tmp_path)
    monkeypatch.setattr(config, "DB_PATH", tmp_path / "duo.db")
    monkeypatch.setattr(config, "CONFIG_PATH", tmp_path / "config.yaml")
    monkeypatch.setattr(config, "BACKUP_DIR", tmp_path / "backups")
    monkeypatch.setattr(config._config, "_data", {})
    db.init()
    return tmp_path


def make_task(
    title: str = "task",
    who: Who = Who.BOTH,
    priority: Priority = Priority.MEDIUM,
    status: Status = Status.PENDING,
    scheduled_date: date | None = None,
    created_at: datetime | None = None,
    id: str | None = None,
) -> Task:
    return Task(
        id=id or title.replace(" ", "-"),
        title=title,
        who=who,
        priority=priority,
        status=status,
        created_at=created_at or datetime(2024, 1, 1, 12, 0),
        scheduled_date=scheduled_date,
    )


def make_block(
    label: str = "block",
    days: tuple = (1,),
    who: Who = Who.BOTH,
    date_start: date | None = None,
    date_end: date | None = None,
) -> FixedBlock:
    return FixedBlock(
        id=label.replace(" ", "-"),
        label=label,
        who=who,
        days=days,
        start_time="09:00",
        end_time="17:00",
        date_start=date_start,
        date_end=date_end,
    )


@dataclass
class Result:
    exit_code: int
    stdout: str
    stderr: str


class FnCLIRunner:
    def invoke(self, args: list[str]) -> Result:
        out, err = io.StringIO(), io.StringIO()
        with contextlib.redirect_stdout(out), contextlib.redirect_stderr(err):
            try:
                code = run(args)
            except SystemExit as e:
                code = e.code if isinstance(e.code, int) else (0 if e.code is None else 1)
        return Result(exit_code=code, stdout=out.getvalue(), stderr=err.getvalue())
