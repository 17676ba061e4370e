import dataclasses
from datetime import date, datetime
from enum import Enum


class Who(Enum):
    SELF = "el"
    PARTNER = "ella"
    BOTH = "ambos"


class Priority(Enum):
    HIGH = "alta"
    MEDIUM = "media"
    LOW = "baja"


class Status(Enum):
    FIXED = "fijo"
    PENDING = "pendiente"
    DONE = "hecho"


@dataclasses.dataclass(frozen=True)
class Task:
    id: str
    title: str
    who: Who
    priority: Priority
    status: Status
    created_at: datetime | None
    scheduled_date: date | None = None
    scheduled_time: str | None = None
    notes: str = ""


@dataclasses.dataclass(frozen=True)
class FixedBlock:
    id: str
    label: str
    who: Who
    days: tuple[int | str, ...]
    start_time: str
    end_time: str
    location: str = ""
    date_start: date | None = None
    date_end: date | None = None


@dataclasses.dataclass(frozen=True)
class Occurrence:
    """One fixed block on one concrete date. Derived, never stored."""

    block_id: str
    label: str
    who: Who
    scheduled_date: date
    start_time: str
    end_time: str
    location: str = ""
    status: Status = Status.FIXED
    priority: Priority = Priority.MEDIUM
    created_at: datetime | None = None

    @property
    def id(self) -> str:
        return f"fixed-{self.block_id}-{self.scheduled_date.isoformat()}"

    @property
    def title(self) -> str:
        return f"{self.label} ({self.start_time}-{self.end_time})"

    @property
    def scheduled_time(self) -> str:
        return self.start_time


Item = Task | Occurrence


@dataclasses.dataclass(frozen=True)
class WeekWindow:
    start: datetime
    end: datetime


@dataclasses.dataclass(frozen=True)
class CalendarCell:
    day: date
    in_month: bool
    is_today: bool


@dataclasses.dataclass(frozen=True)
class CalendarDay:
    cell: CalendarCell
    items: list[Item] = dataclasses.field(default_factory=list, hash=False)
