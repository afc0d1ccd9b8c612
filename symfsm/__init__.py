"""symfsm - Symbol-driven finite state machine with a shared payload."""
from __future__ import annotations

from symfsm.config import MachineConfig
from symfsm.machine import Machine, MachineSnapshot
from symfsm.registry import StateRegistry
from symfsm.table import TransitionTable
from symfsm.types import (
    Action,
    DuplicateStateError,
    FSMError,
    InvalidStateError,
    SnapshotError,
    StateId,
    Symbol,
    Transition,
    UnknownStateError,
)

__all__ = [
    "Machine",
    "MachineConfig",
    "MachineSnapshot",
    "StateRegistry",
    "TransitionTable",
    "Transition",
    "Action",
    "StateId",
    "Symbol",
    "FSMError",
    "InvalidStateError",
    "DuplicateStateError",
    "UnknownStateError",
    "SnapshotError",
]
