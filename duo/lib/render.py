from collections.abc import Sequence
from datetime import date

from duo.core.models import CalendarDay, Item, Occurrence, Status, Task, Who

from . import ansi

__all__ = ["cut", "month_title", "render_calendar", "render_fixed", "render_list", "who_label"]

_WHO_LABELS = {Who.SELF: "Él", Who.PARTNER: "Ella", Who.BOTH: "Ambos"}
_WEEKDAYS = ["Lun", "Mar", "Mié", "Jue", "Vie", "Sáb", "Dom"]
_MONTHS = [
    "enero",
    "febrero",
    "marzo",
    "abril",
    "mayo",
    "junio",
    "julio",
    "agosto",
    "septiembre",
    "octubre",
    "noviembre",
    "diciembre",
]
LOCK = "🔒"
CELL_WIDTH = 22


def who_label(who: Who) -> str:
    return _WHO_LABELS[who]


def cut(text: str, width: int = CELL_WIDTH) -> str:
    text = text.strip()
    return text if len(text) <= width else text[: width - 1] + "…"


def _when(item: Item) -> str:
    if item.scheduled_date is None:
        return "sin fecha"
    when = item.scheduled_date.isoformat()
    return f"{when} {item.scheduled_time}" if item.scheduled_time else when


def _task_row(task: Task) -> str:
    check = ansi.green("✓") if task.status is Status.DONE else "□"
    title = ansi.struck(task.title) if task.status is Status.DONE else task.title
    meta = ansi.muted(f"{task.priority.name.lower()} · {_when(task)}")
    owner = ansi.tint(task.who, who_label(task.who))
    line = f"  {check} {title}  {owner}  {meta} {ansi.muted(f'[{task.id[:8]}]')}"
    if task.notes:
        notes = "\n".join(f"      {ln}" for ln in task.notes.splitlines())
        line += "\n" + ansi.muted(notes)
    return line


def _fixed_row(occ: Occurrence) -> str:
    where = f"  {ansi.muted(occ.location)}" if occ.location else ""
    times = ansi.muted(f"{occ.scheduled_date.isoformat()} · {occ.start_time}-{occ.end_time}")
    owner = ansi.tint(occ.who, who_label(occ.who))
    return f"  {LOCK} {occ.label}  {times}{where}  {owner}"


def render_fixed(occurrences: Sequence[Occurrence]) -> str:
    return "\n".join(_fixed_row(o) for o in occurrences)


def render_list(items: Sequence[Item]) -> str:
    if not items:
        return ansi.muted("  no tasks in this window")
    rows = []
    for item in items:
        rows.append(_fixed_row(item) if isinstance(item, Occurrence) else _task_row(item))
    return "\n".join(rows)


def _pill(item: Item) -> str:
    label = cut(item.title)
    if isinstance(item, Occurrence):
        label = f"{LOCK} {label}"
    return ansi.tint(item.who, label)


def month_title(year: int, month: int) -> str:
    return f"{_MONTHS[month - 1].capitalize()} {year}"


def render_calendar(days: Sequence[CalendarDay], year: int, month: int) -> str:
    """Week by week; each day that has items lists them under its date."""
    lines = [ansi.bold(month_title(year, month))]
    for start in range(0, len(days), 7):
        week = days[start : start + 7]
        header = []
        for name, day in zip(_WEEKDAYS, week, strict=False):
            label = f"{name} {day.cell.day.day:>2}"
            if day.cell.is_today:
                label = ansi.bold(ansi.gold(label))
            elif not day.cell.in_month:
                label = ansi.muted(label)
            header.append(label)
        lines.append("")
        lines.append("  ".join(header))
        for day in week:
            if not day.items:
                continue
            lines.append(f"  {_day_label(day.cell.day, day.cell.in_month)}")
            lines.extend(f"    {_pill(item)}" for item in day.items)
    return "\n".join(lines)


def _day_label(d: date, in_month: bool) -> str:
    label = f"{_WEEKDAYS[d.isoweekday() - 1]} {d.isoformat()}"
    return label if in_month else ansi.muted(label)
