from duo.core.models import Who
from duo.lib.visibility import is_visible, visible
from tests.conftest import make_task


def test_shared_items_visible_to_everyone():
    for viewer in Who:
        assert is_visible(Who.BOTH, viewer)


def test_both_viewer_sees_everything():
    for owner in Who:
        assert is_visible(owner, Who.BOTH)


def test_private_items_hidden_from_partner():
    assert not is_visible(Who.SELF, Who.PARTNER)
    assert not is_visible(Who.PARTNER, Who.SELF)


def test_owner_sees_own_items():
    assert is_visible(Who.SELF, Who.SELF)
    assert is_visible(Who.PARTNER, Who.PARTNER)


def test_raw_strings_are_normalized():
    assert not is_visible("yo", "ella")
    assert is_visible("pareja", "ella")
    assert is_visible("el", "whatever")


def test_visible_keeps_order():
    tasks = [
        make_task("a", who=Who.PARTNER),
        make_task("b", who=Who.BOTH),
        make_task("c", who=Who.SELF),
        make_task("d", who=Who.BOTH),
    ]
    assert [t.title for t in visible(tasks, Who.SELF)] == ["b", "c", "d"]
    assert [t.title for t in visible(tasks, Who.BOTH)] == ["a", "b", "c", "d"]
    assert visible([], Who.SELF) == []
