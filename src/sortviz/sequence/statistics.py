from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RunStatistics:
    """
    Immutable counter snapshot for one run.
    """

    comparisons: int = 0
    swaps: int = 0
    array_accesses: int = 0

    @property
    def total_operations(self) -> int:
        return self.comparisons + self.swaps + self.array_accesses


class StatisticsAggregator:
    """
    Pure counters for one run.

    Only SequenceStore calls the record_* methods, so every counted operation
    has a matching Step. Counters never decrease except through reset().
    """

    def __init__(self) -> None:
        self._comparisons = 0
        self._swaps = 0
        self._accesses = 0

    def record_comparison(self) -> None:
        self._comparisons += 1

    def record_swap(self) -> None:
        self._swaps += 1

    def record_access(self, count: int = 1) -> None:
        if count < 0:
            raise ValueError("access count must be >= 0")
        self._accesses += count

    def reset(self) -> None:
        self._comparisons = 0
        self._swaps = 0
        self._accesses = 0

    def snapshot(self) -> RunStatistics:
        return RunStatistics(
            comparisons=self._comparisons,
            swaps=self._swaps,
            array_accesses=self._accesses,
        )
