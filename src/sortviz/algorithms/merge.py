from __future__ import annotations

from sortviz.core.errors import Cancelled
from sortviz.sequence.progress import ProgressTracker
from sortviz.sequence.store import SequenceStore

# Tail copies run at a quarter of the pacing delay
TAIL_WEIGHT = 0.25


def merge_sort(store: SequenceStore, progress: ProgressTracker) -> None:
    n = len(store)
    if n:
        _sort(store, progress, 0, n - 1, 0)


def _sort(store: SequenceStore, progress: ProgressTracker, left: int, right: int, depth: int) -> None:
    if left >= right:
        return

    mid = (left + right) // 2
    _sort(store, progress, left, mid, depth + 1)
    _sort(store, progress, mid + 1, right, depth + 1)

    with store.annotated(depth=depth, left=left, right=right):
        _merge(store, left, mid, right)

    # Approximation: larger finished ranges mean later stages
    n = len(store)
    size = right - left + 1
    progress.report((n - size + 1) / n * 100, "Merge Sort: Merging subarrays")


def _merge(store: SequenceStore, left: int, mid: int, right: int) -> None:
    left_vals = store.snapshot(left, mid)
    right_vals = store.snapshot(mid + 1, right)
    i = j = 0
    k = left

    try:
        while i < len(left_vals) and j < len(right_vals):
            # Ties take the left head (stable)
            if store.compare_held(left_vals[i], right_vals[j], at=k):
                store.write(k, right_vals[j])
                j += 1
            else:
                store.write(k, left_vals[i])
                i += 1
            k += 1

        while i < len(left_vals):
            store.write(k, left_vals[i], weight=TAIL_WEIGHT)
            i += 1
            k += 1

        while j < len(right_vals):
            store.write(k, right_vals[j], weight=TAIL_WEIGHT)
            j += 1
            k += 1

    except Cancelled:
        # [left, k) holds exactly the consumed heads; refill the rest
        for offset, value in enumerate(left_vals[i:] + right_vals[j:]):
            store.restore(k + offset, value)
        raise
