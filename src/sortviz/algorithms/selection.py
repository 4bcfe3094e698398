from __future__ import annotations

from sortviz.sequence.progress import ProgressTracker
from sortviz.sequence.store import SequenceStore


def selection_sort(store: SequenceStore, progress: ProgressTracker) -> None:
    n = len(store)

    for i in range(n - 1):
        with store.annotated(position=i + 1):
            min_index = i
            store.mark_pivot(min_index)

            for j in range(i + 1, n):
                # Candidate at min_index is larger than j -> j is the new minimum
                if store.compare(min_index, j):
                    min_index = j
                    store.mark_pivot(min_index)

            if min_index != i:
                store.swap(i, min_index)

            store.mark_sorted(i)

        progress.report((i + 1) / n * 100, f"Selection Sort: Position {i + 1}/{n}")

    if n:
        store.mark_sorted(n - 1)
