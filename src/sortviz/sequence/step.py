from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Literal, Mapping

StepKind = Literal[
    "compare",
    "swap",
    "overwrite",
    "read",
    "mark_sorted",
    "mark_pivot",
    "reset",
    "done",
]

# Kinds that describe the whole sequence rather than specific positions
WHOLE_SEQUENCE_KINDS: frozenset[str] = frozenset({"reset", "done"})


@dataclass(frozen=True, slots=True)
class Step:
    """
    Immutable record of one observable engine action.

    - indices: 1 or 2 positions (empty for reset / done)
    - values: post-action values at those indices, when applicable
    - metadata: read-only labels (pass, depth, digit, slot, ...)
    """

    kind: StepKind
    indices: tuple[int, ...] = ()
    values: tuple[int, ...] = ()
    metadata: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # reset / done describe the whole sequence, so they carry no positions
        if self.kind in WHOLE_SEQUENCE_KINDS:
            if self.indices:
                raise ValueError(f"{self.kind} steps carry no indices")
        elif not 1 <= len(self.indices) <= 2:
            raise ValueError(f"{self.kind} steps carry 1 or 2 indices, got {len(self.indices)}")

        if self.values and len(self.values) != len(self.indices):
            raise ValueError("values must align with indices")

        if not isinstance(self.metadata, MappingProxyType):
            object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))
