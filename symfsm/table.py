"""TransitionTable - exact, wildcard and default transition lookup."""
from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Iterable, Mapping

from symfsm.registry import StateRegistry
from symfsm.types import (
    Action,
    InvalidStateError,
    StateId,
    Symbol,
    Transition,
    is_blank,
)

logger = logging.getLogger(__name__)


class TransitionTable:
    """Maps ``(symbol, state)`` and ``state`` to a :class:`Transition`.

    Resolution order is fixed: an exact ``(symbol, state)`` entry wins over a
    wildcard entry for ``state``, which wins over the default transition.
    Adding an entry under an existing key replaces it.

    With ``strict`` set, both ends of a transition must already be in the
    registry. Otherwise unseen states are registered on first reference.
    """

    def __init__(self, registry: StateRegistry, strict: bool = True) -> None:
        self._registry = registry
        self._strict = strict
        self._transitions: dict[tuple[Symbol, StateId], Transition] = {}
        self._transitions_any: dict[StateId, Transition] = {}
        self._default: Transition | None = None

    @property
    def registry(self) -> StateRegistry:
        return self._registry

    @property
    def strict(self) -> bool:
        return self._strict

    @property
    def default(self) -> Transition | None:
        return self._default

    def _check(self, *states: StateId) -> None:
        # All references are validated before any of them is recorded.
        if self._strict:
            for state in states:
                self._registry.require(state)
            return
        for state in states:
            if is_blank(state):
                raise InvalidStateError(state, f"Invalid state identifier {state!r}")
        for state in states:
            self._registry.ensure(state)

    def add(
        self,
        symbol: Symbol,
        state: StateId,
        next_state: StateId,
        action: Action | None = None,
    ) -> None:
        """Add ``(symbol, state) -> (next_state, action)``."""
        self._check(state, next_state)
        self._transitions[(symbol, state)] = Transition(next_state, action)
        logger.debug("transition (%r, %r) -> %r", symbol, state, next_state)

    def add_many(
        self,
        symbols: Iterable[Symbol],
        state: StateId,
        next_state: StateId,
        action: Action | None = None,
    ) -> None:
        """Add the same transition for every symbol in ``symbols``."""
        for symbol in symbols:
            self.add(symbol, state, next_state, action)

    def add_any(
        self, state: StateId, next_state: StateId, action: Action | None = None
    ) -> None:
        """Add ``state -> (next_state, action)`` for any symbol."""
        self._check(state, next_state)
        self._transitions_any[state] = Transition(next_state, action)
        logger.debug("wildcard transition %r -> %r", state, next_state)

    def set_default(
        self, next_state: StateId | None, action: Action | None = None
    ) -> None:
        """Set the fallback transition. An empty ``next_state`` removes it."""
        if is_blank(next_state):
            self._default = None
            logger.debug("default transition cleared")
            return
        self._check(next_state)
        self._default = Transition(next_state, action)
        logger.debug("default transition -> %r", next_state)

    def resolve(self, symbol: Symbol, state: StateId) -> Transition | None:
        """Return the transition for ``symbol`` in ``state``, or None."""
        transition = self._transitions.get((symbol, state))
        if transition is not None:
            return transition
        transition = self._transitions_any.get(state)
        if transition is not None:
            return transition
        return self._default

    def transitions(self) -> Mapping[tuple[Symbol, StateId], Transition]:
        """Read-only view of exact transitions keyed by ``(symbol, state)``."""
        return MappingProxyType(self._transitions)

    def transitions_any(self) -> Mapping[StateId, Transition]:
        """Read-only view of wildcard transitions keyed by state."""
        return MappingProxyType(self._transitions_any)

    def clear(self) -> None:
        self._transitions.clear()
        self._transitions_any.clear()
        self._default = None

    def __len__(self) -> int:
        return len(self._transitions) + len(self._transitions_any)
