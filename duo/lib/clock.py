from datetime import date, datetime, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from duo import config

__all__ = ["Clock", "current", "now", "today", "use"]


class Clock:
    """Wall clock pinned to one named timezone.

    Pass `frozen` to stop time at a given instant; naive datetimes are taken
    to be in the clock's timezone.
    """

    def __init__(self, tz: str | tzinfo | None = None, frozen: datetime | None = None):
        if tz is None:
            tz = config.get_timezone()
        self.tz = _coerce_zone(tz) if isinstance(tz, str) else tz
        if frozen is not None and frozen.tzinfo is None:
            frozen = frozen.replace(tzinfo=self.tz)
        self.frozen = frozen

    def now(self) -> datetime:
        if self.frozen is not None:
            return self.frozen.astimezone(self.tz)
        return datetime.now(self.tz)

    def today(self) -> date:
        return self.now().date()

    def __repr__(self) -> str:
        return f"Clock(tz={self.tz!s}, frozen={self.frozen!r})"


def _coerce_zone(name: str) -> tzinfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        return ZoneInfo(config.DEFAULT_TIMEZONE)


_active: Clock | None = None


def use(clock: Clock | None) -> None:
    """Swap the process-wide clock. None restores the configured wall clock."""
    global _active
    _active = clock


def current() -> Clock:
    global _active
    if _active is None:
        _active = Clock()
    return _active


def now() -> datetime:
    return current().now()


def today() -> date:
    return current().today()
