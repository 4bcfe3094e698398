from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

import pytest

from sortviz.core.config.settings import AppSettings
from sortviz.core.engine.router import EngineRouter
from sortviz.core.engine.state import RunState
from sortviz.core.events.base import Event
from sortviz.core.events.bus import EventBus
from sortviz.core.events.session import RunCompleted, SessionStateChanged
from sortviz.core.events.sorting import ProgressUpdated, StatisticsUpdated, StepRecorded
from sortviz.sequence.emitter import StepEmitter
from sortviz.sequence.progress import ProgressTracker
from sortviz.sequence.statistics import StatisticsAggregator
from sortviz.sequence.store import SequenceStore


class Collector:
    """
    Records every engine / session event in publish order.
    """

    def __init__(self) -> None:
        self.events: list[Event] = []

    def subscriptions(self):
        return [
            ("sort.step", self._on_event),
            ("sort.statistics", self._on_event),
            ("sort.progress", self._on_event),
            ("session.state_changed", self._on_event),
            ("session.run_completed", self._on_event),
        ]

    def _on_event(self, e: Event) -> None:
        self.events.append(e)

    @property
    def steps(self) -> list[StepRecorded]:
        return [e for e in self.events if isinstance(e, StepRecorded)]

    @property
    def statistics(self) -> list[StatisticsUpdated]:
        return [e for e in self.events if isinstance(e, StatisticsUpdated)]

    @property
    def progress(self) -> list[ProgressUpdated]:
        return [e for e in self.events if isinstance(e, ProgressUpdated)]

    @property
    def transitions(self) -> list[tuple[str, str]]:
        return [(e.previous, e.current) for e in self.events if isinstance(e, SessionStateChanged)]

    @property
    def completions(self) -> list[RunCompleted]:
        return [e for e in self.events if isinstance(e, RunCompleted)]


@dataclass
class Harness:
    """
    Everything an engine needs for one run, without a session.
    """

    bus: EventBus
    state: RunState
    stats: StatisticsAggregator
    emitter: StepEmitter
    progress: ProgressTracker
    store: SequenceStore
    collector: Collector = field(default_factory=Collector)


def make_harness(values: Iterable[int], *, delay_ms: float = 0) -> Harness:
    bus = EventBus()
    state = RunState()
    state.begin("test")
    stats = StatisticsAggregator()
    emitter = StepEmitter(bus=bus, state=state, delay_ms=delay_ms, poll_interval_ms=5)
    progress = ProgressTracker(bus=bus, state=state)
    store = SequenceStore(values, emitter=emitter, statistics=stats)
    harness = Harness(bus=bus, state=state, stats=stats, emitter=emitter, progress=progress, store=store)
    EngineRouter(bus=bus).register([harness.collector])
    return harness


@pytest.fixture
def harness_factory():
    return make_harness


@pytest.fixture
def fast_settings() -> AppSettings:
    # No pacing at all: runs finish as fast as the engine can go
    return AppSettings(pace_scale=0.0, final_sweep_delay_ms=0, pause_poll_ms=5, seed=7)
