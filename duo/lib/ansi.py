from dataclasses import dataclass

from duo.core.models import Who


@dataclass(frozen=True)
class Theme:
    green: str = "\033[38;5;114m"
    gold: str = "\033[38;5;220m"
    sky: str = "\033[38;5;111m"
    pink: str = "\033[38;5;212m"
    lavender: str = "\033[38;5;183m"
    muted: str = "\033[90m"
    bold: str = "\033[1m"
    strikethrough: str = "\033[9m"
    reset: str = "\033[0m"


DEFAULT = Theme()
PLAIN = Theme(**{name: "" for name in Theme.__dataclass_fields__})
_active: Theme = DEFAULT


def use(theme: Theme) -> None:
    global _active
    _active = theme


def _wrap(code: str, text: str) -> str:
    if not code:
        return text
    return f"{code}{text}{_active.reset}"


def bold(text: str) -> str:
    return _wrap(_active.bold, text)


def muted(text: str) -> str:
    return _wrap(_active.muted, text)


def green(text: str) -> str:
    return _wrap(_active.green, text)


def gold(text: str) -> str:
    return _wrap(_active.gold, text)


def struck(text: str) -> str:
    return _wrap(_active.strikethrough, text)


def who_color(who: Who) -> str:
    """Per-person accent: sky for el, pink for ella, lavender for shared."""
    return {Who.SELF: _active.sky, Who.PARTNER: _active.pink}.get(who, _active.lavender)


def tint(who: Who, text: str) -> str:
    return _wrap(who_color(who), text)
