from __future__ import annotations

from sortviz.core.engine.state import RunState
from sortviz.core.events.bus import EventBus
from sortviz.core.events.sorting import ProgressUpdated

# Engine-reported progress never reaches 100; only completion publishes 100
PROGRESS_CEILING = 99.0


class ProgressTracker:
    """
    Publishes progress (percent + label) for the current run.

    Engines report approximations (merge / quick sort derive them from the
    size of the range just finished), so values are clamped to stay
    non-decreasing within a run and below 100 until complete().
    """

    def __init__(self, *, bus: EventBus, state: RunState) -> None:
        self._bus = bus
        self._state = state
        self._percent = 0.0
        self._label = ""

    @property
    def percent(self) -> float:
        return self._percent

    @property
    def label(self) -> str:
        return self._label

    def report(self, percent: float, label: str) -> None:
        clamped = min(max(percent, self._percent), PROGRESS_CEILING)
        self._publish(clamped, label)

    def complete(self, label: str) -> None:
        self._publish(100.0, label)

    def reset(self, label: str) -> None:
        self._publish(0.0, label)

    def _publish(self, percent: float, label: str) -> None:
        self._percent = percent
        self._label = label
        self._bus.publish(
            ProgressUpdated.create(
                run_id=self._state.run_id,
                percent=percent,
                label=label,
                sequence=self._state.next_sequence(),
            )
        )
