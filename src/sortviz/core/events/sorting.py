from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from sortviz.core.events.base import Event
from sortviz.sequence.statistics import RunStatistics
from sortviz.sequence.step import Step


@dataclass(frozen=True, slots=True)
class StepRecorded(Event):
    """
    One observable engine action, in strict chronological order.

    step_number restarts at 1 for every run; 0 is used for steps published
    outside a run (reset).
    """

    event_type: ClassVar[str] = "sort.step"

    run_id: str | None
    step_number: int
    step: Step


@dataclass(frozen=True, slots=True)
class StatisticsUpdated(Event):
    """
    Counter snapshot published after each comparing / mutating operation.
    """

    event_type: ClassVar[str] = "sort.statistics"

    run_id: str | None
    statistics: RunStatistics


@dataclass(frozen=True, slots=True)
class ProgressUpdated(Event):
    event_type: ClassVar[str] = "sort.progress"

    run_id: str | None
    percent: float
    label: str
