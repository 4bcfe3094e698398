from __future__ import annotations

import random
from contextlib import contextmanager
from typing import Any, Iterable, Iterator, MutableSequence

from sortviz.core.errors import IndexOutOfRange
from sortviz.sequence.emitter import StepEmitter
from sortviz.sequence.statistics import StatisticsAggregator
from sortviz.sequence.step import Step, StepKind

# Generated values: [MIN_VALUE, MAX_VALUE]
MIN_VALUE = 10
MAX_VALUE = 359


def generate_sequence(size: int, *, rng: random.Random | None = None) -> list[int]:
    rng = rng or random.Random()
    return [rng.randint(MIN_VALUE, MAX_VALUE) for _ in range(size)]


class SequenceStore:
    """
    Exclusive owner of the sequence for one run.

    Every comparing or mutating call follows the same order:

        1. suspend on the emitter (pause / pacing / cancellation)
        2. mutate + count
        3. deliver exactly one Step and a statistics snapshot

    so an operation that raises Cancelled has not mutated anything, and one
    that returned always has. Engines rely on this to keep held values
    (insertion key, merge snapshots) recoverable while unwinding.
    """

    def __init__(
        self,
        values: Iterable[int],
        *,
        emitter: StepEmitter,
        statistics: StatisticsAggregator,
    ) -> None:
        self._values: list[int] = [int(v) for v in values]
        self._emitter = emitter
        self._stats = statistics
        self._metadata: dict[str, Any] = {}

    def __len__(self) -> int:
        return len(self._values)

    # ---------------- Observers (uncounted) ----------------

    def values(self) -> tuple[int, ...]:
        return tuple(self._values)

    def snapshot(self, lo: int, hi: int) -> list[int]:
        """
        Copy of positions [lo, hi] (inclusive), e.g. merge temporaries.
        """
        self._check(lo)
        self._check(hi)
        return self._values[lo : hi + 1]

    @contextmanager
    def annotated(self, **metadata: Any) -> Iterator[None]:
        """
        Attach labels (pass, depth, digit...) to every step emitted inside.
        """
        previous = self._metadata
        self._metadata = {**previous, **metadata}
        try:
            yield
        finally:
            self._metadata = previous

    # ---------------- Counted operations ----------------

    def read(self, i: int) -> int:
        self._check(i)
        self._stats.record_access()
        return self._values[i]

    def peek(self, i: int) -> int:
        """
        Observed read: like read(), but paced and delivered as a "read" step.
        """
        self._check(i)
        self._emitter.suspend()
        self._stats.record_access()
        value = self._values[i]
        self._deliver("read", (i,), (value,))
        return value

    def write(self, i: int, value: int, *, weight: float = 1.0) -> None:
        self._check(i)
        self._emitter.suspend(weight=weight)
        self._values[i] = value
        self._stats.record_access()
        self._deliver("overwrite", (i,), (value,))

    def swap(self, i: int, j: int) -> None:
        self._check(i)
        self._check(j)
        if i == j:
            return
        self._emitter.suspend()
        v = self._values
        v[i], v[j] = v[j], v[i]
        self._stats.record_access(2)
        self._stats.record_swap()
        self._deliver("swap", (i, j), (v[i], v[j]))

    def compare(self, i: int, j: int) -> bool:
        """
        True iff value at i > value at j (out of order for an ascending sort).
        """
        self._check(i)
        self._check(j)
        self._emitter.suspend()
        self._stats.record_comparison()
        self._stats.record_access(2)
        a, b = self._values[i], self._values[j]
        self._deliver("compare", (i, j), (a, b))
        return a > b

    def compare_with(self, i: int, value: int) -> bool:
        """
        True iff value at i > a held value (e.g. the insertion key).
        """
        self._check(i)
        self._emitter.suspend()
        self._stats.record_comparison()
        self._stats.record_access(2)
        a = self._values[i]
        self._deliver("compare", (i,), (a,), held=value)
        return a > value

    def compare_held(self, a: int, b: int, *, at: int) -> bool:
        """
        True iff a > b for two held values; `at` is the position being decided.
        """
        self._check(at)
        self._emitter.suspend()
        self._stats.record_comparison()
        self._stats.record_access(2)
        self._deliver("compare", (at,), (self._values[at],), left=a, right=b)
        return a > b

    def place(self, i: int, buffer: MutableSequence[int], slot: int) -> None:
        """
        Copy value at i into an auxiliary buffer (source read + buffer write).
        """
        self._check(i)
        if not 0 <= slot < len(buffer):
            raise IndexOutOfRange(f"buffer slot {slot} outside [0, {len(buffer)})")
        self._emitter.suspend()
        value = self._values[i]
        buffer[slot] = value
        self._stats.record_access(2)
        self._deliver("read", (i,), (value,), slot=slot)

    # ---------------- Markers ----------------

    def mark_sorted(self, i: int, *, delay_ms: float | None = None) -> None:
        self._mark("mark_sorted", i, delay_ms)

    def mark_pivot(self, i: int) -> None:
        self._mark("mark_pivot", i, None)

    # ---------------- Unwinding ----------------

    def restore(self, i: int, value: int) -> None:
        """
        Put a held value back after cancellation.

        Never suspends (the emitter is already cancelled); still counted and
        delivered so observers keep an exact picture of the sequence.
        """
        self._check(i)
        self._values[i] = value
        self._stats.record_access()
        self._deliver("overwrite", (i,), (value,), restored=True)

    # ---------------- Internals ----------------

    def _check(self, i: int) -> None:
        if not 0 <= i < len(self._values):
            raise IndexOutOfRange(f"index {i} outside [0, {len(self._values)})")

    def _mark(self, kind: StepKind, i: int, delay_ms: float | None) -> None:
        self._check(i)
        # Markers honour pause / cancel but are not paced unless asked to be
        self._emitter.suspend(weight=0.0, delay_ms=delay_ms)
        self._emitter.deliver(
            Step(kind=kind, indices=(i,), values=(self._values[i],), metadata=self._metadata),
        )

    def _deliver(
        self,
        kind: StepKind,
        indices: tuple[int, ...],
        values: tuple[int, ...],
        **extra: Any,
    ) -> None:
        metadata = {**self._metadata, **extra} if extra else self._metadata
        self._emitter.deliver(
            Step(kind=kind, indices=indices, values=values, metadata=metadata),
            statistics=self._stats.snapshot(),
        )
