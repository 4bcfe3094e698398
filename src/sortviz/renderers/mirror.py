from __future__ import annotations

from typing import Iterable, Literal, Sequence

from sortviz.core.engine.router import EventHandler
from sortviz.core.events.base import Event
from sortviz.core.events.sorting import StepRecorded

BarState = Literal["default", "comparing", "swapping", "sorted", "pivot"]

_TRANSIENT: dict[str, BarState] = {
    "compare": "comparing",
    "read": "comparing",
    "swap": "swapping",
    "overwrite": "swapping",
}


class MirrorRenderer:
    """
    Rebuilds the bar view (value + highlight per position) purely from steps.

    This is what a front end keeps in sync: it never reads the session's
    sequence, so it also checks that steps carry enough information.
    Transient highlights (comparing / swapping) last until the next step;
    sorted and pivot markers stick until reset.
    """

    def __init__(self, values: Iterable[int] = ()) -> None:
        self.load(values)

    def load(self, values: Iterable[int]) -> None:
        self.values: list[int] = list(values)
        self.states: list[BarState] = ["default"] * len(self.values)
        self.steps_seen = 0
        self._transient: list[int] = []

    def subscriptions(self) -> Sequence[tuple[str, EventHandler]]:
        return [("sort.step", self._on_step)]

    def sorted_positions(self) -> list[int]:
        return [i for i, s in enumerate(self.states) if s == "sorted"]

    def _on_step(self, e: Event) -> None:
        if not isinstance(e, StepRecorded):
            return
        self.steps_seen += 1
        step = e.step

        for i in self._transient:
            if self.states[i] in ("comparing", "swapping"):
                self.states[i] = "default"
        self._transient = []

        if step.kind == "reset":
            self.states = ["default"] * len(self.values)
            return
        if step.kind == "done":
            return

        if step.kind in ("swap", "overwrite"):
            for i, v in zip(step.indices, step.values):
                self.values[i] = v

        if step.kind == "mark_sorted":
            self.states[step.indices[0]] = "sorted"
        elif step.kind == "mark_pivot":
            for i, state in enumerate(self.states):
                if state == "pivot":
                    self.states[i] = "default"
            self.states[step.indices[0]] = "pivot"
        else:
            highlight = _TRANSIENT[step.kind]
            for i in step.indices:
                if self.states[i] != "sorted":
                    self.states[i] = highlight
                    self._transient.append(i)
