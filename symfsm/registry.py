"""StateRegistry - the set of valid state identifiers."""
from __future__ import annotations

import logging
from typing import Iterable, Iterator

from symfsm.types import (
    DuplicateStateError,
    InvalidStateError,
    StateId,
    UnknownStateError,
    is_blank,
)

logger = logging.getLogger(__name__)


class StateRegistry:
    """Ordered set of registered states."""

    def __init__(self) -> None:
        # dict keeps insertion order for states()
        self._states: dict[StateId, None] = {}

    def add(self, state: StateId) -> None:
        """Register a state. Raises on blank or already registered ids."""
        if is_blank(state):
            raise InvalidStateError(state, f"Invalid state identifier {state!r}")
        if state in self._states:
            raise DuplicateStateError(state, f"State {state!r} is already registered")
        self._states[state] = None
        logger.debug("registered state %r", state)

    def add_many(self, states: Iterable[StateId]) -> None:
        """Register states in order. Earlier additions stay on failure."""
        for state in states:
            self.add(state)

    def ensure(self, state: StateId) -> None:
        """Register ``state`` unless already present."""
        if state not in self._states:
            self.add(state)

    def contains(self, state: StateId) -> bool:
        return state in self

    def require(self, state: StateId) -> None:
        """Raise UnknownStateError if ``state`` is not registered."""
        if state not in self._states:
            raise UnknownStateError(state, f"State {state!r} is not registered")

    def states(self) -> list[StateId]:
        """Registered states in insertion order."""
        return list(self._states)

    def clear(self) -> None:
        self._states.clear()

    def __contains__(self, state: object) -> bool:
        try:
            return state in self._states
        except TypeError:
            return False

    def __iter__(self) -> Iterator[StateId]:
        return iter(list(self._states))

    def __len__(self) -> int:
        return len(self._states)
