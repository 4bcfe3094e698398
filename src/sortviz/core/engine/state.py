from __future__ import annotations

from dataclasses import dataclass, field
from threading import Lock


@dataclass(slots=True)
class RunState:
    """
    Ordering counters shared by everything that publishes on a session bus.

    - run_id: identity of the current (or last) run, None before the first run
    - step: per-run step counter (Step ordering)
    - sequence: monotonic sequence used for event ordering

    Guardrails:
      - next_step only valid while a run is active
        (prevents "steps after stop" bugs and makes lifecycle explicit)
      - allocation is locked: the control thread and the run worker both publish
    """

    run_id: str | None = None
    step: int = 0
    sequence: int = 0
    is_running: bool = False
    _lock: Lock = field(default_factory=Lock, repr=False, compare=False)

    def begin(self, run_id: str) -> None:
        with self._lock:
            if self.is_running:
                raise RuntimeError("cannot begin a run while another run is active")
            # Reset deterministic counters
            self.run_id = run_id
            self.step = 0
            self.is_running = True

    def end(self) -> None:
        with self._lock:
            self.is_running = False

    def next_step(self) -> int:
        with self._lock:
            if not self.is_running:
                raise RuntimeError("cannot advance step when no run is active")
            self.step += 1
            return self.step

    def next_sequence(self) -> int:
        with self._lock:
            self.sequence += 1
            return self.sequence
