from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import structlog

from sortviz.core.engine.router import EventHandler
from sortviz.core.events.base import Event
from sortviz.core.events.session import RunCompleted, SessionStateChanged
from sortviz.core.events.sorting import ProgressUpdated, StepRecorded

log = structlog.get_logger()


@dataclass(slots=True)
class LogRenderer:
    """
    Renders the engine as structured log lines.

    - lifecycle transitions and completion at info
    - progress at info, only when the rounded percentage moves
    - individual steps at debug, and only when `steps=True`
    """

    steps: bool = False
    _last_percent: int = -1

    def subscriptions(self) -> Sequence[tuple[str, EventHandler]]:
        subs: list[tuple[str, EventHandler]] = [
            ("session.state_changed", self._on_state),
            ("session.run_completed", self._on_completed),
            ("sort.progress", self._on_progress),
        ]
        if self.steps:
            subs.append(("sort.step", self._on_step))
        return subs

    def _on_state(self, e: Event) -> None:
        if not isinstance(e, SessionStateChanged):
            return
        if e.current == "failed":
            log.error(
                "render.state",
                previous=e.previous,
                current=e.current,
                error_type=e.error_type,
                error_message=e.error_message,
            )
        else:
            log.info("render.state", previous=e.previous, current=e.current)

    def _on_completed(self, e: Event) -> None:
        if not isinstance(e, RunCompleted):
            return
        stats = e.report.statistics
        log.info(
            "render.completed",
            algorithm=e.report.algorithm,
            size=e.report.size,
            elapsed_ms=round(e.report.elapsed_ms, 3),
            comparisons=stats.comparisons,
            swaps=stats.swaps,
            array_accesses=stats.array_accesses,
            total_operations=stats.total_operations,
        )

    def _on_progress(self, e: Event) -> None:
        if not isinstance(e, ProgressUpdated):
            return
        rounded = round(e.percent)
        if rounded == self._last_percent:
            return
        self._last_percent = rounded
        log.info("render.progress", percent=rounded, label=e.label)

    def _on_step(self, e: Event) -> None:
        if not isinstance(e, StepRecorded):
            return
        log.debug(
            "render.step",
            step_number=e.step_number,
            kind=e.step.kind,
            indices=list(e.step.indices),
            values=list(e.step.values),
            metadata=dict(e.step.metadata),
        )
