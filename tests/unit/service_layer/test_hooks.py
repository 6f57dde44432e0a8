"""Unit tests for the action/filter hook bus."""

import pytest

from sitesync.service_layer.hooks import Hooks, return_true

# pylint: disable=redefined-outer-name


@pytest.fixture
def hooks():
    return Hooks()


class TestActions:
    """`add_action` / `do_action`."""

    @staticmethod
    def test_handlers_receive_args(hooks):
        """Every handler is called with the action's args."""
        calls = []
        hooks.add_action("saved", lambda *args: calls.append(args))

        hooks.do_action("saved", 1, "two")

        assert calls == [(1, "two")]

    @staticmethod
    def test_priority_then_registration_order(hooks):
        """Lower priority runs first; ties run in registration order."""
        order = []
        hooks.add_action("t", lambda: order.append("late"), priority=20)
        hooks.add_action("t", lambda: order.append("first"))
        hooks.add_action("t", lambda: order.append("second"))
        hooks.add_action("t", lambda: order.append("early"), priority=1)

        hooks.do_action("t")

        assert order == ["early", "first", "second", "late"]

    @staticmethod
    def test_duplicate_registration_is_ignored(hooks):
        """The same handler at the same priority is only called once."""
        calls = []

        def handler():
            calls.append(1)

        hooks.add_action("t", handler)
        hooks.add_action("t", handler)
        hooks.do_action("t")

        assert calls == [1]

    @staticmethod
    def test_remove_action(hooks):
        """Removed handlers are no longer called."""
        calls = []

        def handler():
            calls.append(1)

        hooks.add_action("t", handler)

        assert hooks.remove_action("t", handler) is True
        assert hooks.remove_action("t", handler) is False
        hooks.do_action("t")
        assert not calls
        assert not hooks.has_action("t")

    @staticmethod
    def test_unknown_topic_is_a_noop(hooks):
        """Firing an action nobody listens to does nothing."""
        hooks.do_action("nobody-listens", 1)

    @staticmethod
    def test_empty_topic_rejected(hooks):
        """Topics must be non-empty."""
        with pytest.raises(ValueError):
            hooks.add_action("", print)

    @staticmethod
    def test_handler_error_is_logged_and_reraised(hooks, caplog):
        """A failing handler stops the action and the error propagates."""
        calls = []

        def boom():
            raise RuntimeError("boom")

        hooks.add_action("t", boom)
        hooks.add_action("t", lambda: calls.append(1))

        with pytest.raises(RuntimeError, match="boom"):
            hooks.do_action("t")

        assert not calls
        assert any(
            "for hook t" in r.getMessage() and r.exc_info for r in caplog.records
        )
        assert hooks.current_hook() is None


class TestFilters:
    """`add_filter` / `apply_filters`."""

    @staticmethod
    def test_value_is_threaded_through_filters(hooks):
        """Each filter gets the previous filter's result plus the extra args."""
        hooks.add_filter("n", lambda value, step: value + step)
        hooks.add_filter("n", lambda value, step: value * step)

        assert hooks.apply_filters("n", 1, 3) == 12

    @staticmethod
    def test_no_filters_returns_value(hooks):
        """With no filters the value passes through."""
        sentinel = object()
        assert hooks.apply_filters("none", sentinel) is sentinel

    @staticmethod
    def test_return_true(hooks):
        """`return_true` turns any value into True."""
        hooks.add_filter("flag", return_true)

        assert hooks.apply_filters("flag", False) is True
        assert hooks.has_filter("flag", return_true)
        assert hooks.remove_filter("flag", return_true)
        assert hooks.apply_filters("flag", False) is False


def test_current_hook_tracks_nesting(hooks):
    """`current_hook` names the innermost running action or filter."""
    seen = []

    def outer():
        seen.append(hooks.current_hook())
        hooks.do_action("inner")

    hooks.add_action("outer", outer)
    hooks.add_action("inner", lambda: seen.append(hooks.current_hook()))

    hooks.do_action("outer")

    assert seen == ["outer", "inner"]
    assert hooks.current_hook() is None
