"""Machine - current state, payload and symbol processing."""
from __future__ import annotations

import contextlib
import logging
import threading
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, ContextManager, Iterable, Mapping

from symfsm.config import MachineConfig
from symfsm.registry import StateRegistry
from symfsm.table import TransitionTable
from symfsm.types import (
    Action,
    FSMError,
    SnapshotError,
    StateId,
    Symbol,
    Transition,
    is_blank,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MachineSnapshot:
    """Read-only view of a machine, for export and persistence.

    ``payload`` is the machine's payload handle itself, not a copy.
    """

    initial_state: StateId
    current_state: StateId
    payload: Any
    states: tuple[StateId, ...]
    transitions: Mapping[tuple[Symbol, StateId], Transition]
    transitions_any: Mapping[StateId, Transition]
    default_transition: Transition | None


class Machine:
    """Finite state machine driven by input symbols.

    The payload is handed to every action, so a list payload turns the
    machine into a pushdown automaton. Each ``process`` call resolves the
    symbol against the current state, moves to the resolved next state and
    then runs the transition's action, whose return value (if any) has the
    final say on the new state.
    """

    def __init__(
        self,
        initial_state: StateId,
        payload: Any = None,
        *,
        states: Iterable[StateId] = (),
        config: MachineConfig | None = None,
    ) -> None:
        self._config = config or MachineConfig()
        self._registry = StateRegistry()
        self._registry.add_many(states)
        self._registry.ensure(initial_state)
        self._table = TransitionTable(self._registry, strict=self._config.strict)
        self._initial_state = initial_state
        self._current_state = initial_state
        self._payload = payload
        self._input_symbol: Symbol | None = None
        self._lock: ContextManager[Any] = (
            threading.RLock() if self._config.thread_safe else contextlib.nullcontext()
        )

    @property
    def config(self) -> MachineConfig:
        return self._config

    @property
    def registry(self) -> StateRegistry:
        return self._registry

    @property
    def table(self) -> TransitionTable:
        return self._table

    @property
    def initial_state(self) -> StateId:
        return self._initial_state

    @property
    def current_state(self) -> StateId:
        return self._current_state

    @property
    def payload(self) -> Any:
        return self._payload

    @property
    def input_symbol(self) -> Symbol | None:
        """Symbol most recently passed to :meth:`process`."""
        return self._input_symbol

    @property
    def states(self) -> list[StateId]:
        return self._registry.states()

    # -- definition ------------------------------------------------------

    def add_state(self, state: StateId) -> None:
        self._registry.add(state)

    def add_states(self, states: Iterable[StateId]) -> None:
        self._registry.add_many(states)

    def add_transition(
        self,
        symbol: Symbol,
        state: StateId,
        next_state: StateId,
        action: Action | None = None,
    ) -> None:
        self._table.add(symbol, state, next_state, action)

    def add_transitions(
        self,
        symbols: Iterable[Symbol],
        state: StateId,
        next_state: StateId,
        action: Action | None = None,
    ) -> None:
        self._table.add_many(symbols, state, next_state, action)

    def add_transition_any(
        self, state: StateId, next_state: StateId, action: Action | None = None
    ) -> None:
        self._table.add_any(state, next_state, action)

    def set_default_transition(
        self, next_state: StateId | None, action: Action | None = None
    ) -> None:
        self._table.set_default(next_state, action)

    # -- execution -------------------------------------------------------

    def get_transition(self, symbol: Symbol) -> Transition | None:
        """Resolve ``symbol`` against the current state without moving."""
        return self._table.resolve(symbol, self._current_state)

    def process(self, symbol: Symbol) -> StateId:
        """Feed one symbol. Returns the current state afterwards.

        An unresolved symbol leaves the machine untouched.
        """
        with self._lock:
            self._input_symbol = symbol
            transition = self._table.resolve(symbol, self._current_state)
            if transition is None:
                logger.debug(
                    "no transition for %r in state %r", symbol, self._current_state
                )
                return self._current_state

            previous = self._current_state
            self._current_state = transition.next_state
            logger.debug("%r: %r -> %r", symbol, previous, self._current_state)

            if transition.action is not None:
                override = transition.action(
                    previous, self._current_state, self._payload
                )
                if self._accepts_override(override):
                    logger.debug(
                        "action redirected %r -> %r", self._current_state, override
                    )
                    self._current_state = override
                elif override is not None:
                    logger.debug("ignoring action result %r", override)
            return self._current_state

    def _accepts_override(self, override: Any) -> bool:
        # Results that are not usable states are ignored, never raised.
        if is_blank(override):
            return False
        if self._config.strict:
            return self._registry.contains(override)
        try:
            self._registry.ensure(override)
        except TypeError:
            return False
        return True

    def process_list(self, symbols: Iterable[Symbol]) -> StateId:
        """Feed each symbol in order. Returns the final state."""
        with self._lock:
            for symbol in symbols:
                self.process(symbol)
            return self._current_state

    def reset(self) -> None:
        """Return to the initial state. Payload and transitions are kept."""
        with self._lock:
            self._current_state = self._initial_state
            self._input_symbol = None
            logger.debug("reset to %r", self._initial_state)

    def set_current_state(self, state: StateId) -> None:
        """Jump to a registered state without running any action."""
        with self._lock:
            if self._config.strict:
                self._registry.require(state)
            else:
                self._registry.ensure(state)
            self._current_state = state

    # -- snapshot --------------------------------------------------------

    def snapshot(self) -> MachineSnapshot:
        with self._lock:
            return MachineSnapshot(
                initial_state=self._initial_state,
                current_state=self._current_state,
                payload=self._payload,
                states=tuple(self._registry.states()),
                transitions=MappingProxyType(dict(self._table.transitions())),
                transitions_any=MappingProxyType(dict(self._table.transitions_any())),
                default_transition=self._table.default,
            )

    def restore(self, snapshot: MachineSnapshot) -> None:
        """Replace states, transitions, state and payload from ``snapshot``.

        Raises SnapshotError if the snapshot does not describe a valid
        machine. The machine is unchanged on failure.
        """
        registry = StateRegistry()
        table = TransitionTable(registry, strict=self._config.strict)
        try:
            registry.add_many(snapshot.states)
            if self._config.strict:
                registry.require(snapshot.initial_state)
                registry.require(snapshot.current_state)
            else:
                registry.ensure(snapshot.initial_state)
                registry.ensure(snapshot.current_state)
            for (symbol, state), t in snapshot.transitions.items():
                table.add(symbol, state, t.next_state, t.action)
            for state, t in snapshot.transitions_any.items():
                table.add_any(state, t.next_state, t.action)
            default = snapshot.default_transition
            if default is not None:
                table.set_default(default.next_state, default.action)
        except FSMError as exc:
            raise SnapshotError(f"Cannot restore snapshot: {exc}") from exc

        with self._lock:
            self._registry = registry
            self._table = table
            self._initial_state = snapshot.initial_state
            self._current_state = snapshot.current_state
            self._payload = snapshot.payload
            self._input_symbol = None

    @classmethod
    def from_snapshot(
        cls, snapshot: MachineSnapshot, config: MachineConfig | None = None
    ) -> Machine:
        """Build a new machine from ``snapshot``. Raises SnapshotError if invalid."""
        try:
            machine = cls(snapshot.initial_state, config=config)
        except FSMError as exc:
            raise SnapshotError(f"Cannot restore snapshot: {exc}") from exc
        machine.restore(snapshot)
        return machine

