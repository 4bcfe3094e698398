from __future__ import annotations

from sortviz.core.errors import Cancelled
from sortviz.sequence.progress import ProgressTracker
from sortviz.sequence.store import SequenceStore


def insertion_sort(store: SequenceStore, progress: ProgressTracker) -> None:
    n = len(store)
    if n == 0:
        return

    store.mark_sorted(0)

    for i in range(1, n):
        with store.annotated(element=i + 1):
            key = store.peek(i)
            j = i - 1

            # `hole` is the slot whose value is held in `key`
            hole: int | None = i
            try:
                while j >= 0 and store.compare_with(j, key):
                    store.write(j + 1, store.read(j))
                    hole = j
                    j -= 1
                store.write(j + 1, key)
                hole = None
            except Cancelled:
                if hole is not None:
                    store.restore(hole, key)
                raise

            store.mark_sorted(j + 1)

        progress.report(i / (n - 1) * 100, f"Insertion Sort: Element {i + 1}/{n}")
