from __future__ import annotations

import time
from threading import Condition
from types import MappingProxyType
from typing import Callable, Mapping

import structlog

from sortviz.core.engine.state import RunState
from sortviz.core.errors import Cancelled, InvalidConfiguration
from sortviz.core.events.bus import EventBus
from sortviz.core.events.sorting import StatisticsUpdated, StepRecorded
from sortviz.sequence.statistics import RunStatistics
from sortviz.sequence.step import Step

log = structlog.get_logger()

# Speed level -> inter-step delay in milliseconds (1 = slowest, 10 = fastest)
SPEED_LEVELS: Mapping[int, int] = MappingProxyType(
    {
        1: 500,
        2: 400,
        3: 300,
        4: 200,
        5: 100,
        6: 75,
        7: 50,
        8: 25,
        9: 10,
        10: 5,
    }
)


def delay_for_level(level: int) -> int:
    try:
        return SPEED_LEVELS[level]
    except KeyError:
        raise InvalidConfiguration(
            f"speed level must be within 1..10, got {level!r}",
        ) from None


class StepEmitter:
    """
    Cancellable, pausable, rate-limited channel between an engine and observers.

    The engine suspends at every observable operation:

        suspend()  -> waits out the pacing delay (or indefinitely while paused)
        deliver()  -> publishes the Step + a statistics snapshot on the bus

    Cancellation is cooperative: cancel() wakes any suspended caller, which then
    raises Cancelled; every later suspend() raises immediately. deliver() never
    raises so a caller can report mutations made while unwinding.

    One emitter serves exactly one run and is discarded afterwards.
    """

    def __init__(
        self,
        *,
        bus: EventBus,
        state: RunState,
        delay_ms: float,
        pace_scale: float = 1.0,
        poll_interval_ms: float = 50.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if delay_ms < 0:
            raise InvalidConfiguration(f"delay must be >= 0 ms, got {delay_ms!r}")
        if pace_scale < 0:
            raise InvalidConfiguration(f"pace_scale must be >= 0, got {pace_scale!r}")
        if poll_interval_ms <= 0:
            raise InvalidConfiguration(f"poll interval must be > 0 ms, got {poll_interval_ms!r}")

        self._bus = bus
        self._state = state
        self._delay_ms = float(delay_ms)
        self._pace_scale = float(pace_scale)
        self._poll_s = poll_interval_ms / 1000.0
        self._clock = clock

        self._cond = Condition()
        self._paused = False
        self._cancelled = False

    # ---------------- Control ----------------

    @property
    def delay_ms(self) -> float:
        return self._delay_ms

    @property
    def is_paused(self) -> bool:
        return self._paused

    @property
    def is_cancelled(self) -> bool:
        return self._cancelled

    def set_delay(self, delay_ms: float) -> None:
        if delay_ms < 0:
            raise InvalidConfiguration(f"delay must be >= 0 ms, got {delay_ms!r}")
        with self._cond:
            self._delay_ms = float(delay_ms)
            # Suspended callers recompute their remaining wait
            self._cond.notify_all()

    def pause(self) -> None:
        with self._cond:
            self._paused = True
            self._cond.notify_all()

    def resume(self) -> None:
        with self._cond:
            self._paused = False
            self._cond.notify_all()

    def cancel(self) -> None:
        with self._cond:
            self._cancelled = True
            self._cond.notify_all()
        log.debug("emitter.cancelled", run_id=self._state.run_id)

    # ---------------- Engine side ----------------

    def ensure_active(self) -> None:
        if self._cancelled:
            raise Cancelled("run cancelled")

    def suspend(self, *, weight: float = 1.0, delay_ms: float | None = None) -> None:
        """
        Block the calling engine until the pacing delay has elapsed.

        weight scales the configured delay for lighter sub-steps; delay_ms
        overrides it (still subject to pace_scale). While paused the wait is
        re-checked every poll interval, and a resume restarts the full delay.
        """
        with self._cond:
            started = self._clock()
            while True:
                if self._cancelled:
                    raise Cancelled("run cancelled")

                if self._paused:
                    self._cond.wait(timeout=self._poll_s)
                    started = self._clock()
                    continue

                base = self._delay_ms * weight if delay_ms is None else delay_ms
                remaining = base * self._pace_scale / 1000.0 - (self._clock() - started)
                if remaining <= 0:
                    return
                self._cond.wait(timeout=remaining)

    def deliver(self, step: Step, *, statistics: RunStatistics | None = None) -> None:
        run_id = self._state.run_id
        self._bus.publish(
            StepRecorded.create(
                run_id=run_id,
                step_number=self._state.next_step(),
                step=step,
                sequence=self._state.next_sequence(),
            )
        )
        if statistics is not None:
            self._bus.publish(
                StatisticsUpdated.create(
                    run_id=run_id,
                    statistics=statistics,
                    sequence=self._state.next_sequence(),
                )
            )

    def emit(
        self,
        step: Step,
        *,
        statistics: RunStatistics | None = None,
        weight: float = 1.0,
        delay_ms: float | None = None,
    ) -> None:
        self.suspend(weight=weight, delay_ms=delay_ms)
        self.deliver(step, statistics=statistics)
