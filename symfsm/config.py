"""Machine configuration dataclass."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class MachineConfig:
    """Immutable configuration for a :class:`~symfsm.machine.Machine`.

    Attributes:
        strict: Closed state set. States must be registered before a
            transition, default target, explicit state change or action
            override may reference them. When False, any valid identifier is
            accepted and recorded on first use.
        thread_safe: Serialize ``process``/``reset``/state injection and
            snapshot calls behind a single re-entrant lock.
    """

    strict: bool = True
    thread_safe: bool = False
