from fncli import cli

from . import config
from .fixed import get_blocks
from .lib import ansi
from .lib import clock as _clock
from .lib.calendar import shift_month
from .lib.errors import echo
from .lib.render import render_calendar, render_fixed, render_list, who_label
from .lib.who import normalize_who
from .tasks import get_tasks
from .views import Window, calendar_view, fixed_for_window, list_view, parse_window

_WINDOW_TITLES = {Window.TODAY: "today", Window.WEEK: "this week", Window.ALL: "all tasks"}


def _viewer(who: str | None):
    return normalize_who(who if who is not None else config.get_default_viewer())


@cli("duo", name="ls", default=True)
def ls(window: str = "semana", who: str | None = None) -> None:
    """List tasks for today, this week or all (hoy|semana|todas)"""
    selected = parse_window(window)
    viewer = _viewer(who)
    echo(ansi.bold(f"{_WINDOW_TITLES[selected]} · {who_label(viewer).lower()}"))
    fixed = fixed_for_window(get_blocks(), selected, viewer)
    if fixed:
        echo(render_fixed(fixed))
        echo(ansi.muted("  " + "─" * 40))
    echo(render_list(list_view(get_tasks(), selected, viewer)))


@cli("duo")
def cal(
    year: int | None = None,
    month: int | None = None,
    offset: int = 0,
    who: str | None = None,
) -> None:
    """Month calendar with fixed blocks; --offset -1 for last month"""
    today = _clock.today()
    y, m = shift_month(
        year if year is not None else today.year,
        month if month is not None else today.month,
        offset,
    )
    days = calendar_view(get_tasks(), get_blocks(), y, m, _viewer(who))
    echo(render_calendar(days, y, m))
