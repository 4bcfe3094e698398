from __future__ import annotations

import random
import secrets
import time
from datetime import datetime, timezone
from threading import Thread, current_thread
from typing import Iterable

import structlog

from sortviz.algorithms.registry import ALGORITHM_ORDER, AlgorithmInfo, get_algorithm
from sortviz.core.config.settings import AppSettings, settings as default_settings
from sortviz.core.engine.router import EngineRouter, EventComponent, RouterWiring
from sortviz.core.engine.state import RunState
from sortviz.core.errors import Cancelled, InvalidConfiguration, InvalidSessionTransition, RunAlreadyActive
from sortviz.core.events.bus import EventBus
from sortviz.core.events.session import RunCompleted, RunReport, SessionState
from sortviz.core.events.sorting import StatisticsUpdated, StepRecorded
from sortviz.core.logging.setup import bind_context, clear_context
from sortviz.sequence.emitter import StepEmitter
from sortviz.sequence.progress import ProgressTracker
from sortviz.sequence.statistics import RunStatistics, StatisticsAggregator
from sortviz.sequence.step import Step
from sortviz.sequence.store import SequenceStore, generate_sequence
from sortviz.session.lifecycle import TERMINAL_STATES, SessionLifecycle
from sortviz.session.spec import SessionConfig

log = structlog.get_logger()


def new_run_id() -> str:
    """
    UTC timestamp + high-entropy suffix (unique even within the same second).
    """
    created_at = datetime.now(timezone.utc)
    return f"{created_at.strftime('%Y%m%dT%H%M%SZ')}_{secrets.token_hex(4)}"


class SortSession:
    """
    Controller for sorting runs over one sequence.

    Responsibilities:
    - hold the configuration and the sequence between runs
    - drive exactly one algorithm engine at a time on a worker thread
    - translate commands (start / pause / resume / cancel / reset) into
      lifecycle transitions and emitter signals
    - report the outcome (RunCompleted, or a failed / cancelled transition)

    Commands are safe to call from any thread. Event handlers for step,
    statistics and progress events run on the worker thread; from there only
    the non-blocking commands (pause, resume, cancel, configure speed) may be
    used.
    """

    def __init__(
        self,
        *,
        settings: AppSettings | None = None,
        bus: EventBus | None = None,
        rng: random.Random | None = None,
        components: Iterable[EventComponent] | None = None,
    ) -> None:
        self._settings = settings or default_settings
        self._bus = bus or EventBus()
        self._state = RunState()
        self._lifecycle = SessionLifecycle(bus=self._bus, state=self._state)
        self._router = EngineRouter(bus=self._bus)
        self._stats = StatisticsAggregator()
        self._progress = ProgressTracker(bus=self._bus, state=self._state)
        self._rng = rng or random.Random(self._settings.seed)

        self._config = SessionConfig.from_settings(self._settings)
        self._sequence: list[int] = generate_sequence(self._config.size, rng=self._rng)

        # Per-run objects
        self._store: SequenceStore | None = None
        self._emitter: StepEmitter | None = None
        self._worker: Thread | None = None

        self._report: RunReport | None = None
        self._failure: BaseException | None = None

        if components is not None:
            self.attach(components)

    # ---------------- Read-only views ----------------

    @property
    def bus(self) -> EventBus:
        return self._bus

    @property
    def state(self) -> SessionState:
        return self._lifecycle.current

    @property
    def run_id(self) -> str | None:
        return self._state.run_id

    @property
    def config(self) -> SessionConfig:
        return self._config

    @property
    def values(self) -> tuple[int, ...]:
        store = self._store
        return store.values() if store is not None else tuple(self._sequence)

    @property
    def statistics(self) -> RunStatistics:
        return self._stats.snapshot()

    @property
    def progress(self) -> tuple[float, str]:
        return self._progress.percent, self._progress.label

    @property
    def last_report(self) -> RunReport | None:
        return self._report

    @property
    def failure(self) -> BaseException | None:
        return self._failure

    def attach(self, components: Iterable[EventComponent]) -> RouterWiring:
        return self._router.register(components)

    def detach(self, wiring: RouterWiring) -> None:
        self._router.unregister(wiring)

    # ---------------- Configuration commands ----------------

    def configure(
        self,
        *,
        size: int | None = None,
        speed_level: int | None = None,
        algorithm: str | None = None,
    ) -> SessionConfig:
        """
        Validate and apply a configuration change.

        Speed applies immediately, even mid-run. Size and algorithm are locked
        while a run is active; a new size regenerates the sequence.
        """
        with self._lifecycle.lock:
            old = self._config
            new = old.updated(size=size, speed_level=speed_level, algorithm=algorithm)

            if self._lifecycle.is_active and (new.size != old.size or new.algorithm != old.algorithm):
                raise RunAlreadyActive("size and algorithm cannot change while a run is active")

            self._config = new
            if self._emitter is not None and new.speed_level != old.speed_level:
                self._emitter.set_delay(new.delay_ms)

        log.info(
            "session.configured",
            size=new.size,
            speed_level=new.speed_level,
            delay_ms=new.delay_ms,
            algorithm=new.algorithm,
        )

        if new.size != old.size:
            self.generate()
        return new

    def adjust_speed(self, delta: int) -> SessionConfig:
        level = max(1, min(10, self._config.speed_level + delta))
        return self.configure(speed_level=level)

    def cycle_algorithm(self, direction: int = 1) -> SessionConfig:
        if self._lifecycle.is_active:
            raise RunAlreadyActive("algorithm cannot change while a run is active")
        idx = ALGORITHM_ORDER.index(self._config.algorithm)
        return self.configure(algorithm=ALGORITHM_ORDER[(idx + direction) % len(ALGORITHM_ORDER)])

    # ---------------- Sequence commands ----------------

    def generate(self) -> tuple[int, ...]:
        """
        Reset the session (cancelling any active run) and draw a fresh sequence.
        """
        self.reset()
        with self._lifecycle.lock:
            self._sequence = generate_sequence(self._config.size, rng=self._rng)
            self._store = None
        self._progress.reset("Array generated - Ready to sort")
        log.info("session.generated", size=self._config.size)
        return self.values

    def load(self, values: Iterable[int]) -> tuple[int, ...]:
        """
        Install a caller-provided sequence (any length, integers only).
        """
        items = list(values)
        for v in items:
            if isinstance(v, bool) or not isinstance(v, int):
                raise InvalidConfiguration(f"sequence values must be integers, got {v!r}")

        with self._lifecycle.lock:
            if self._lifecycle.is_active:
                raise RunAlreadyActive("cannot load a sequence while a run is active")

        self.reset()
        with self._lifecycle.lock:
            self._sequence = items
            self._store = None
        log.info("session.loaded", size=len(items))
        return self.values

    # ---------------- Run commands ----------------

    def start(self) -> str:
        """
        Start a run of the configured algorithm; returns the run id.
        """
        info = get_algorithm(self._config.algorithm)
        run_id = new_run_id()

        with self._lifecycle.lock:
            # Reject before touching anything (statistics included)
            if self._lifecycle.is_active:
                raise RunAlreadyActive(f"a run is already {self._lifecycle.current}")

            self._stats.reset()
            emitter = StepEmitter(
                bus=self._bus,
                state=self._state,
                delay_ms=self._config.delay_ms,
                pace_scale=self._settings.pace_scale,
                poll_interval_ms=self._settings.pause_poll_ms,
            )
            store = SequenceStore(self.values, emitter=emitter, statistics=self._stats)

            self._emitter = emitter
            self._store = store
            self._report = None
            self._failure = None

            self._lifecycle.begin(run_id)
            self._bus.publish(
                StatisticsUpdated.create(
                    run_id=run_id,
                    statistics=self._stats.snapshot(),
                    sequence=self._state.next_sequence(),
                )
            )
            self._progress.reset(f"{info.name}: sorting...")

            worker = Thread(
                target=self._run,
                args=(run_id, info, store, emitter),
                name=f"sortviz-run-{run_id}",
                daemon=True,
            )
            self._worker = worker

        log.info("session.started", run_id=run_id, algorithm=info.kind, size=len(store))
        worker.start()
        return run_id

    def pause(self) -> None:
        with self._lifecycle.lock:
            if self._lifecycle.current != "running":
                raise InvalidSessionTransition(f"cannot pause while {self._lifecycle.current}")
            assert self._emitter is not None
            self._emitter.pause()
            self._lifecycle.transition("paused")

    def resume(self) -> None:
        with self._lifecycle.lock:
            if self._lifecycle.current != "paused":
                raise InvalidSessionTransition(f"cannot resume while {self._lifecycle.current}")
            assert self._emitter is not None
            self._emitter.resume()
            self._lifecycle.transition("running")

    def cancel(self) -> None:
        """
        Ask the active run to unwind; it reaches "cancelled" at its next
        suspension point. Statistics are kept.
        """
        with self._lifecycle.lock:
            if not self._lifecycle.is_active:
                raise InvalidSessionTransition(f"no active run to cancel (state={self._lifecycle.current})")
            assert self._emitter is not None
            self._emitter.cancel()
        log.info("session.cancel_requested", run_id=self._state.run_id)

    def reset(self) -> None:
        """
        Cancel any active run, wait for it to unwind, then return to idle
        with zeroed statistics and progress.
        """
        self._reject_on_worker("reset")

        with self._lifecycle.lock:
            worker = self._worker
            if self._lifecycle.is_active and self._emitter is not None:
                self._emitter.cancel()

        if worker is not None:
            worker.join()

        with self._lifecycle.lock:
            if self._lifecycle.current in TERMINAL_STATES:
                self._lifecycle.transition("idle")

            self._worker = None
            self._emitter = None
            self._stats.reset()

            self._bus.publish(
                StepRecorded.create(
                    run_id=self._state.run_id,
                    step_number=0,
                    step=Step(kind="reset"),
                    sequence=self._state.next_sequence(),
                )
            )
            self._bus.publish(
                StatisticsUpdated.create(
                    run_id=self._state.run_id,
                    statistics=self._stats.snapshot(),
                    sequence=self._state.next_sequence(),
                )
            )
            self._progress.reset("Ready to sort")

        log.info("session.reset", run_id=self._state.run_id)

    def join(self, timeout: float | None = None) -> bool:
        """
        Wait for the current run's worker; True once it has finished.
        """
        self._reject_on_worker("join")
        worker = self._worker
        if worker is None:
            return True
        worker.join(timeout)
        return not worker.is_alive()

    def run(self, timeout: float | None = None) -> SessionState:
        """
        start() + join(): convenience for headless callers.
        """
        self.start()
        self.join(timeout)
        return self.state

    # ---------------- Worker ----------------

    def _run(self, run_id: str, info: AlgorithmInfo, store: SequenceStore, emitter: StepEmitter) -> None:
        bind_context(run_id=run_id, component="session", algorithm=info.kind)
        started = time.perf_counter()

        try:
            info.sort(store, self._progress)

            # A cancel that lands after the last suspension point still wins
            emitter.ensure_active()
            self._completion_sweep(store)
            emitter.emit(Step(kind="done"), statistics=self._stats.snapshot(), weight=0.0)

            report = RunReport(
                run_id=run_id,
                algorithm=info.kind,
                size=len(store),
                elapsed_ms=(time.perf_counter() - started) * 1000.0,
                statistics=self._stats.snapshot(),
            )
            self._report = report
            self._progress.complete(f"{info.name} completed!")
            self._bus.publish(
                RunCompleted.create(
                    run_id=run_id,
                    report=report,
                    sequence=self._state.next_sequence(),
                )
            )

        except Cancelled:
            log.info("session.run_cancelled", statistics=self._stats.snapshot())
            self._finish("cancelled")

        except Exception as exc:
            log.exception("session.run_failed", error_type=type(exc).__name__)
            self._failure = exc
            self._finish("failed", error=exc)

        else:
            log.info(
                "session.run_completed",
                elapsed_ms=round(report.elapsed_ms, 3),
                comparisons=report.statistics.comparisons,
                swaps=report.statistics.swaps,
                array_accesses=report.statistics.array_accesses,
            )
            self._finish("completed")

        finally:
            clear_context()

    def _completion_sweep(self, store: SequenceStore) -> None:
        with store.annotated(phase="complete"):
            for i in range(len(store)):
                store.mark_sorted(i, delay_ms=self._settings.final_sweep_delay_ms)

    def _finish(self, target: SessionState, *, error: BaseException | None = None) -> None:
        with self._lifecycle.lock:
            self._state.end()
            self._emitter = None
            try:
                self._lifecycle.transition(target, error=error)
            except Exception as exc:
                # The state is already terminal; only an observer of the change failed
                log.exception("session.observer_failed", state=target, error_type=type(exc).__name__)

    def _reject_on_worker(self, command: str) -> None:
        if self._worker is not None and current_thread() is self._worker:
            raise InvalidSessionTransition(
                f"{command}() would wait for the run it is called from; use cancel() instead",
            )
