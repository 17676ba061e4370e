from collections.abc import Iterable
from typing import Protocol, TypeVar

from duo.core.models import Who

from .who import normalize_who

__all__ = ["is_visible", "visible"]


class _Owned(Protocol):
    @property
    def who(self) -> Who: ...


T = TypeVar("T", bound=_Owned)


def is_visible(item_who: object, viewer: object) -> bool:
    """Shared items show to everyone; private items only to their owner.

    A BOTH viewer is the unfiltered view and sees everything.
    """
    item_who = normalize_who(item_who)
    viewer = normalize_who(viewer)
    return viewer is Who.BOTH or item_who is Who.BOTH or item_who is viewer


def visible(items: Iterable[T], viewer: object) -> list[T]:
    viewer = normalize_who(viewer)
    return [item for item in items if is_visible(item.who, viewer)]
