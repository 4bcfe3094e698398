from __future__ import annotations

import structlog

from sortviz.sequence.progress import ProgressTracker
from sortviz.sequence.store import SequenceStore

log = structlog.get_logger()


def bubble_sort(store: SequenceStore, progress: ProgressTracker) -> None:
    n = len(store)
    total = n * (n - 1) // 2
    done = 0
    sorted_from = n

    for i in range(n - 1):
        swapped = False
        label = f"Bubble Sort: Pass {i + 1}/{n - 1}"

        with store.annotated(pass_number=i + 1):
            for j in range(n - 1 - i):
                if store.compare(j, j + 1):
                    store.swap(j, j + 1)
                    swapped = True
                done += 1
                progress.report(done / total * 100, label)

            store.mark_sorted(n - 1 - i)
            sorted_from = n - 1 - i

        if not swapped:
            log.debug("bubble.early_exit", pass_number=i + 1)
            break

    # Early exit leaves the prefix unmarked
    for k in range(min(sorted_from, n - 1)):
        store.mark_sorted(k)
