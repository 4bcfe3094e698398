from __future__ import annotations

import structlog

from sortviz.sequence.progress import ProgressTracker
from sortviz.sequence.store import SequenceStore

log = structlog.get_logger()


def quick_sort(store: SequenceStore, progress: ProgressTracker) -> None:
    n = len(store)
    if n:
        _sort(store, progress, 0, n - 1, 0)


def _sort(store: SequenceStore, progress: ProgressTracker, low: int, high: int, depth: int) -> None:
    # Empty range next to a pivot that landed on a boundary
    if low > high:
        return

    if low == high:
        with store.annotated(depth=depth):
            store.mark_sorted(low)
    else:
        with store.annotated(depth=depth):
            pivot_index = _partition(store, low, high)
            store.mark_sorted(pivot_index)

        _sort(store, progress, low, pivot_index - 1, depth + 1)
        _sort(store, progress, pivot_index + 1, high, depth + 1)

    n = len(store)
    size = high - low + 1
    progress.report((n - size + 1) / n * 100, f"Quick Sort: Depth {depth}")


def _partition(store: SequenceStore, low: int, high: int) -> int:
    """
    Lomuto partition around the value at `high`.
    """
    pivot = store.read(high)
    store.mark_pivot(high)
    log.debug("quick.partition", low=low, high=high, pivot=pivot)

    i = low - 1
    for j in range(low, high):
        # True means the element at j is greater than the pivot: leave it
        if not store.compare(j, high):
            i += 1
            if i != j:
                store.swap(i, j)

    store.swap(i + 1, high)
    return i + 1
