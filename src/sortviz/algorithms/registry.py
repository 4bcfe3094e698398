from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Literal, Mapping

from sortviz.algorithms.base import SortAlgorithm
from sortviz.algorithms.bubble import bubble_sort
from sortviz.algorithms.insertion import insertion_sort
from sortviz.algorithms.merge import merge_sort
from sortviz.algorithms.quick import quick_sort
from sortviz.algorithms.radix import radix_sort
from sortviz.algorithms.selection import selection_sort
from sortviz.core.errors import InvalidConfiguration

AlgorithmKind = Literal["bubble", "selection", "insertion", "merge", "quick", "radix"]


@dataclass(frozen=True, slots=True)
class AlgorithmInfo:
    """
    Catalogue entry: display metadata + the engine itself.
    """

    kind: AlgorithmKind
    name: str
    description: str
    complexity: str
    sort: SortAlgorithm


ALGORITHMS: Mapping[str, AlgorithmInfo] = MappingProxyType(
    {
        "bubble": AlgorithmInfo(
            kind="bubble",
            name="Bubble Sort",
            description=(
                "Compares adjacent elements and swaps them if they are in the wrong order. "
                "Repeats until the array is sorted."
            ),
            complexity="O(n^2)",
            sort=bubble_sort,
        ),
        "selection": AlgorithmInfo(
            kind="selection",
            name="Selection Sort",
            description=(
                "Finds the minimum element and places it at the beginning. "
                "Repeats for the remaining unsorted portion."
            ),
            complexity="O(n^2)",
            sort=selection_sort,
        ),
        "insertion": AlgorithmInfo(
            kind="insertion",
            name="Insertion Sort",
            description=(
                "Builds the sorted array one element at a time by inserting each element "
                "in its correct position."
            ),
            complexity="O(n^2)",
            sort=insertion_sort,
        ),
        "merge": AlgorithmInfo(
            kind="merge",
            name="Merge Sort",
            description=(
                "Divides the array into halves, recursively sorts them, and then merges "
                "the sorted halves."
            ),
            complexity="O(n log n)",
            sort=merge_sort,
        ),
        "quick": AlgorithmInfo(
            kind="quick",
            name="Quick Sort",
            description=(
                "Picks a pivot element and partitions the array around it, then recursively "
                "sorts the partitions."
            ),
            complexity="O(n log n)",
            sort=quick_sort,
        ),
        "radix": AlgorithmInfo(
            kind="radix",
            name="Radix Sort",
            description="Sorts numbers by processing individual digits from least to most significant digit.",
            complexity="O(nk)",
            sort=radix_sort,
        ),
    }
)

# Display / cycling order
ALGORITHM_ORDER: tuple[str, ...] = tuple(ALGORITHMS)


def get_algorithm(kind: str) -> AlgorithmInfo:
    try:
        return ALGORITHMS[kind]
    except KeyError:
        raise InvalidConfiguration(
            f"unknown algorithm {kind!r} (expected one of: {', '.join(ALGORITHM_ORDER)})",
        ) from None
