"""Tests for TransitionTable resolution and validation."""
import pytest
from symfsm import (
    InvalidStateError,
    StateRegistry,
    Transition,
    TransitionTable,
    UnknownStateError,
)


def _noop(prev, new, payload):
    return None


def _other(prev, new, payload):
    return None


@pytest.fixture
def table():
    registry = StateRegistry()
    registry.add_many(["idle", "active", "done", "error"])
    return TransitionTable(registry)


class TestResolution:
    """Exact -> wildcard -> default precedence."""

    def test_exact_match(self, table):
        """resolve returns exactly the registered (next_state, action)."""
        table.add("go", "idle", "active", _noop)

        assert table.resolve("go", "idle") == Transition("active", _noop)

    def test_exact_shadows_wildcard_and_default(self, table):
        """Exact entry wins regardless of insertion order."""
        # Arrange - wildcard and default added after the exact entry
        table.add("go", "idle", "active")
        table.add_any("idle", "done")
        table.set_default("error")

        # Act
        transition = table.resolve("go", "idle")

        # Assert
        assert transition.next_state == "active"

    def test_wildcard_when_no_exact(self, table):
        """A symbol without an exact entry falls back to the wildcard."""
        table.add("go", "idle", "active")
        table.add_any("idle", "done", _other)

        assert table.resolve("stop", "idle") == Transition("done", _other)

    def test_wildcard_is_per_state(self, table):
        """Wildcard for one state does not apply to another."""
        table.add_any("idle", "done")

        assert table.resolve("x", "active") is None

    def test_default_when_no_exact_or_wildcard(self, table):
        """The default applies to any symbol in any state."""
        table.set_default("error", _noop)

        assert table.resolve("anything", "active") == Transition("error", _noop)
        assert table.resolve(42, "done") == Transition("error", _noop)

    def test_wildcard_shadows_default(self, table):
        table.add_any("idle", "done")
        table.set_default("error")

        assert table.resolve("x", "idle").next_state == "done"

    def test_nothing_resolves_to_none(self, table):
        assert table.resolve("go", "idle") is None

    def test_composite_key_no_delimiter_collision(self, table):
        """Symbols and states containing commas stay distinct keys."""
        table.registry.add_many(["a,b", "b"])
        table.add("x", "a,b", "active")
        table.add("x,a", "b", "done")

        assert table.resolve("x", "a,b").next_state == "active"
        assert table.resolve("x,a", "b").next_state == "done"


class TestRegistration:
    """Adding, overwriting and validating transitions."""

    def test_last_write_wins(self, table):
        """Re-adding the same (symbol, state) replaces the entry."""
        table.add("go", "idle", "active", _noop)
        table.add("go", "idle", "done", _other)

        assert table.resolve("go", "idle") == Transition("done", _other)
        assert len(table.transitions()) == 1

    def test_wildcard_last_write_wins(self, table):
        table.add_any("idle", "active")
        table.add_any("idle", "done")

        assert table.resolve("x", "idle").next_state == "done"

    def test_add_many_same_target(self, table):
        """add_many registers one entry per symbol."""
        table.add_many(["a", "b", "c"], "idle", "active", _noop)

        for symbol in ["a", "b", "c"]:
            assert table.resolve(symbol, "idle") == Transition("active", _noop)
        assert len(table.transitions()) == 3

    def test_unknown_source_state_rejected(self, table):
        """Unregistered source state raises, nothing stored."""
        with pytest.raises(UnknownStateError) as exc_info:
            table.add("go", "ghost", "active")

        assert exc_info.value.state == "ghost"
        assert len(table) == 0

    def test_unknown_next_state_rejected(self, table):
        with pytest.raises(UnknownStateError):
            table.add("go", "idle", "ghost")

        assert table.resolve("go", "idle") is None

    def test_unknown_state_in_wildcard_rejected(self, table):
        with pytest.raises(UnknownStateError):
            table.add_any("idle", "ghost")

        assert len(table.transitions_any()) == 0

    def test_failed_add_keeps_previous_entry(self, table):
        """A rejected overwrite leaves the existing transition in place."""
        table.add("go", "idle", "active")

        with pytest.raises(UnknownStateError):
            table.add("go", "idle", "ghost")

        assert table.resolve("go", "idle").next_state == "active"

    def test_default_unknown_rejected(self, table):
        with pytest.raises(UnknownStateError):
            table.set_default("ghost")

        assert table.default is None

    @pytest.mark.parametrize("cleared", [None, ""])
    def test_default_cleared_by_empty_target(self, table, cleared):
        """An empty next state removes the default."""
        table.set_default("error", _noop)

        table.set_default(cleared)

        assert table.default is None
        assert table.resolve("x", "idle") is None

    def test_views_are_read_only(self, table):
        table.add("go", "idle", "active")
        table.add_any("idle", "done")

        with pytest.raises(TypeError):
            table.transitions()[("x", "idle")] = Transition("done")
        with pytest.raises(TypeError):
            table.transitions_any()["active"] = Transition("done")

    def test_views_expose_keys(self, table):
        """Exact keys are (symbol, state) pairs, wildcard keys are states."""
        table.add("go", "idle", "active")
        table.add_any("active", "done")

        assert list(table.transitions()) == [("go", "idle")]
        assert list(table.transitions_any()) == ["active"]

    def test_clear(self, table):
        table.add("go", "idle", "active")
        table.add_any("idle", "done")
        table.set_default("error")

        table.clear()

        assert len(table) == 0
        assert table.default is None


class TestOpenStates:
    """Non-strict tables accept any identifier."""

    def test_unseen_states_are_recorded(self):
        registry = StateRegistry()
        table = TransitionTable(registry, strict=False)

        table.add("go", "idle", "active")
        table.add_any("active", "done")
        table.set_default("error")

        assert registry.states() == ["idle", "active", "done", "error"]
        assert table.resolve("go", "idle").next_state == "active"

    def test_blank_still_rejected(self):
        """Blank states are invalid even without a closed state set."""
        registry = StateRegistry()
        table = TransitionTable(registry, strict=False)

        with pytest.raises(InvalidStateError):
            table.add("go", "idle", "")

        assert len(table) == 0
        assert registry.states() == []
