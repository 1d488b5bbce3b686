import logging

import pytest

from time_ticker.actions import ActionRouter, Command, Verb, dispatch
from time_ticker.errors import ActionDecodeError, InvalidActionFormat, ParseActionIndex


@pytest.mark.parametrize(
    "action, expected",
    [
        ("toggle_3", Command(Verb.TOGGLE, 3)),
        ("reset_0", Command(Verb.RESET, 0)),
        ("delete_12", Command(Verb.DELETE, 12)),
        ("pin_1", Command(Verb.PIN, 1)),
        ("unpin_1", Command(Verb.UNPIN, 1)),
        ("pinned_toggle_2", Command(Verb.PINNED_TOGGLE, 2)),
        ("pinned_reset_4", Command(Verb.PINNED_RESET, 4)),
        ("edit_5", Command(Verb.EDIT, 5)),
        ("new_task", Command(Verb.NEW_TASK)),
        ("quit", Command(Verb.QUIT)),
    ],
)
def test_dispatch_known_actions(action, expected):
    command = dispatch(action)
    assert command == expected
    assert command.encode() == action


@pytest.mark.parametrize("action", ["toggle_abc", "toggle_", "reset_-1", "pin_1.5", "delete_ 3"])
def test_dispatch_bad_index(action):
    with pytest.raises(ParseActionIndex):
        dispatch(action)


@pytest.mark.parametrize("action", ["frobnicate", "toggle", "quit_1", "", "dock_show"])
def test_dispatch_unknown_verb(action):
    with pytest.raises(InvalidActionFormat):
        dispatch(action)


def test_decode_errors_share_a_base():
    with pytest.raises(ActionDecodeError):
        dispatch("frobnicate")


def test_command_index_rules():
    with pytest.raises(ValueError):
        Command(Verb.TOGGLE)
    with pytest.raises(ValueError):
        Command(Verb.QUIT, 1)
    with pytest.raises(ValueError):
        Command(Verb.DELETE, -1)


def test_register_last_write_wins():
    router = ActionRouter()
    router.register("x", "toggle_1")
    router.register("x", "reset_1")
    assert router.resolve("x") == "reset_1"
    assert len(router) == 1


def test_bind_allocates_distinct_identifiers():
    router = ActionRouter()
    a = router.bind(Command(Verb.TOGGLE, 0))
    b = router.bind(Command(Verb.TOGGLE, 0))
    assert a != b
    assert router.route(a) == Command(Verb.TOGGLE, 0)


def test_rebuild_keeps_only_pinned_surface_entries():
    router = ActionRouter()
    main_toggle = router.bind(Command(Verb.TOGGLE, 0))
    quit_id = router.bind(Command(Verb.QUIT))
    pinned_toggle = router.bind(Command(Verb.PINNED_TOGGLE, 0))
    pinned_reset = router.bind(Command(Verb.PINNED_RESET, 0))
    unpin = router.bind(Command(Verb.UNPIN, 0))

    router.rebuild()

    assert main_toggle not in router
    assert quit_id not in router
    assert router.route(pinned_toggle) == Command(Verb.PINNED_TOGGLE, 0)
    assert router.route(pinned_reset) == Command(Verb.PINNED_RESET, 0)
    assert router.route(unpin) == Command(Verb.UNPIN, 0)


def test_rebuild_with_custom_prefixes():
    router = ActionRouter()
    router.register("a", "quit")
    router.register("b", "pinned_toggle_0")
    router.rebuild(preserve_prefixes=("quit",))
    assert router.actions() == {"a": "quit"}


def test_unknown_identifier_is_a_warning(caplog):
    router = ActionRouter()
    with caplog.at_level(logging.WARNING, logger="time_ticker.actions"):
        assert router.resolve("stale") is None
        assert router.route("stale") is None
    assert any(r.levelno == logging.WARNING for r in caplog.records)


def test_route_swallows_undecodable_actions(caplog):
    router = ActionRouter()
    router.register("x", "dock_hide")
    with caplog.at_level(logging.WARNING, logger="time_ticker.actions"):
        assert router.route("x") is None
    assert "Invalid action string format" in caplog.text


def test_forget_index_drops_pinned_entries_only():
    router = ActionRouter()
    toggle = router.bind(Command(Verb.TOGGLE, 1))
    pinned = router.bind(Command(Verb.PINNED_TOGGLE, 1))
    unpin = router.bind(Command(Verb.UNPIN, 1))
    other = router.bind(Command(Verb.UNPIN, 2))

    router.forget_index(1)

    assert toggle in router
    assert pinned not in router
    assert unpin not in router
    assert other in router


def test_shift_after_delete_renumbers_later_entries():
    router = ActionRouter()
    before = router.bind(Command(Verb.PINNED_TOGGLE, 0))
    deleted = router.bind(Command(Verb.UNPIN, 1))
    after = router.bind(Command(Verb.PINNED_RESET, 3))
    bare = router.bind(Command(Verb.NEW_TASK))

    router.shift_after_delete(1)

    assert router.route(before) == Command(Verb.PINNED_TOGGLE, 0)
    assert deleted not in router
    assert router.route(after) == Command(Verb.PINNED_RESET, 2)
    assert router.route(bare) == Command(Verb.NEW_TASK)
