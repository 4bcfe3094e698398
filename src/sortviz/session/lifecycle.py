from __future__ import annotations

from threading import RLock
from types import MappingProxyType
from typing import Mapping

import structlog

from sortviz.core.engine.state import RunState
from sortviz.core.errors import InvalidSessionTransition, RunAlreadyActive
from sortviz.core.events.bus import EventBus
from sortviz.core.events.session import SessionState, SessionStateChanged

log = structlog.get_logger()

ACTIVE_STATES: frozenset[str] = frozenset({"running", "paused"})
TERMINAL_STATES: frozenset[str] = frozenset({"completed", "cancelled", "failed"})

TRANSITIONS: Mapping[str, frozenset[str]] = MappingProxyType(
    {
        "idle": frozenset({"running"}),
        "running": frozenset({"paused", "completed", "cancelled", "failed"}),
        # A pause can land after the last suspension point, so a paused run may still finish
        "paused": frozenset({"running", "completed", "cancelled", "failed"}),
        "completed": frozenset({"idle"}),
        "cancelled": frozenset({"idle"}),
        "failed": frozenset({"idle"}),
    }
)


class SessionLifecycle:
    """
    Explicit session state machine.

    Ensures transitions follow TRANSITIONS and are audited via events.
    begin() is the only way into "running" from idle/terminal and is an
    atomic check-and-set, so concurrent start() calls cannot both win.
    """

    def __init__(self, *, bus: EventBus, state: RunState) -> None:
        self._bus = bus
        self._state = state
        self._current: SessionState = "idle"
        self._lock = RLock()

    @property
    def lock(self) -> RLock:
        return self._lock

    @property
    def current(self) -> SessionState:
        return self._current

    @property
    def is_active(self) -> bool:
        return self._current in ACTIVE_STATES

    def begin(self, run_id: str) -> None:
        with self._lock:
            if self.is_active:
                raise RunAlreadyActive(f"a run is already {self._current}")

            if self._current in TERMINAL_STATES:
                self.transition("idle")

            self._state.begin(run_id)
            self.transition("running")

    def transition(
        self,
        target: SessionState,
        *,
        error: BaseException | None = None,
    ) -> SessionState:
        with self._lock:
            previous = self._current
            if target not in TRANSITIONS[previous]:
                raise InvalidSessionTransition(f"cannot go from {previous} to {target}")

            self._current = target
            # Logged before publishing so the transition is recorded even if an observer raises
            log.info("session.state_changed", previous=previous, current=target, run_id=self._state.run_id)
            self._bus.publish(
                SessionStateChanged.create(
                    run_id=self._state.run_id,
                    previous=previous,
                    current=target,
                    error_type=type(error).__name__ if error is not None else None,
                    error_message=str(error) if error is not None else None,
                    sequence=self._state.next_sequence(),
                )
            )
        return previous
