from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Literal

from sortviz.core.events.base import Event
from sortviz.sequence.statistics import RunStatistics

SessionState = Literal["idle", "running", "paused", "completed", "failed", "cancelled"]


@dataclass(frozen=True, slots=True)
class SessionStateChanged(Event):
    """
    Emitted on every lifecycle transition.

    error_type / error_message are only set for transitions into "failed".
    """

    event_type: ClassVar[str] = "session.state_changed"

    run_id: str | None
    previous: SessionState
    current: SessionState

    error_type: str | None = None
    error_message: str | None = None


@dataclass(frozen=True, slots=True)
class RunReport:
    """
    Immutable summary of a finished run.

    Timing is advisory (wall clock, includes pacing and pauses).
    """

    run_id: str
    algorithm: str
    size: int
    elapsed_ms: float
    statistics: RunStatistics


@dataclass(frozen=True, slots=True)
class RunCompleted(Event):
    """
    Terminal event of a run that finished normally.
    """

    event_type: ClassVar[str] = "session.run_completed"

    run_id: str
    report: RunReport
