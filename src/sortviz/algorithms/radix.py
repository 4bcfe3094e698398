from __future__ import annotations

import structlog

from sortviz.sequence.progress import ProgressTracker
from sortviz.sequence.store import SequenceStore

log = structlog.get_logger()

BASE = 10

# Copy-back writes run at a sixth of the pacing delay
COPY_BACK_WEIGHT = 1 / 6


def radix_sort(store: SequenceStore, progress: ProgressTracker) -> None:
    """
    LSD radix sort for non-negative integers.

    Each digit pass is a stable counting sort into an output buffer that is
    copied back at the end of the pass. Until that copy-back starts the
    sequence itself is untouched; during it the sequence is a mix of two
    passes. No comparisons are performed.
    """
    n = len(store)
    if n == 0:
        return

    values = store.values()
    if any(v < 0 for v in values):
        raise ValueError("radix sort requires non-negative integers")

    digits = len(str(max(values)))
    log.debug("radix.start", max_value=max(values), digits=digits)

    for digit in range(digits):
        with store.annotated(digit=digit + 1):
            _counting_pass(store, digit)
        progress.report((digit + 1) / digits * 100, f"Radix Sort: Digit {digit + 1}/{digits}")


def _counting_pass(store: SequenceStore, digit: int) -> None:
    n = len(store)
    divisor = BASE**digit
    count = [0] * BASE
    keys = [0] * n

    with store.annotated(phase="count"):
        for i in range(n):
            keys[i] = store.peek(i) // divisor % BASE
            count[keys[i]] += 1

    # Bucket counts -> end positions
    for b in range(1, BASE):
        count[b] += count[b - 1]

    output = [0] * n
    with store.annotated(phase="place"):
        # From the end so equal keys keep their relative order
        for i in range(n - 1, -1, -1):
            count[keys[i]] -= 1
            store.place(i, output, count[keys[i]])

    with store.annotated(phase="copy_back"):
        for i, value in enumerate(output):
            store.write(i, value, weight=COPY_BACK_WEIGHT)
