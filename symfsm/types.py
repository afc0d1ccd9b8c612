"""Shared type aliases, protocols and errors for symfsm."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Hashable, Protocol

StateId = Hashable
Symbol = Hashable


class Action(Protocol):
    """Callback attached to a transition.

    Called as ``action(previous_state, new_state, payload)``. A returned
    state overrides the table-resolved next state; ``None`` keeps it.
    """

    def __call__(
        self, previous_state: StateId, new_state: StateId, payload: Any
    ) -> StateId | None: ...


@dataclass(frozen=True, slots=True)
class Transition:
    next_state: StateId
    action: Action | None = None


class FSMError(Exception):
    """Base class for symfsm errors."""


class InvalidStateError(FSMError, ValueError):
    """Raised when an empty or blank state identifier is registered."""

    def __init__(self, state: Any, message: str) -> None:
        self.state = state
        super().__init__(message)


class DuplicateStateError(FSMError, ValueError):
    """Raised when a state is registered twice."""

    def __init__(self, state: StateId, message: str) -> None:
        self.state = state
        super().__init__(message)


class UnknownStateError(FSMError, KeyError):
    """Raised when referencing a state that is not registered."""

    def __init__(self, state: StateId, message: str) -> None:
        self.state = state
        super().__init__(message)


class SnapshotError(FSMError):
    """Raised on restore failures (snapshot references unregistered states)."""


def is_blank(state: Any) -> bool:
    """True for ``None``, ``""`` and whitespace-only strings."""
    if state is None:
        return True
    return isinstance(state, str) and not state.strip()
