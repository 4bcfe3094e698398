from __future__ import annotations

from typing import Protocol

from sortviz.sequence.progress import ProgressTracker
from sortviz.sequence.store import SequenceStore


class SortAlgorithm(Protocol):
    """
    Algorithm engine interface.

    Engines:
    - sort the borrowed store in ascending order, in place
    - touch the sequence only through SequenceStore operations
    - report progress through the tracker
    - let Cancelled propagate (after restoring any held values)
    - keep no state between calls
    """

    def __call__(self, store: SequenceStore, progress: ProgressTracker) -> None:
        ...
