from __future__ import annotations

from sortviz.algorithms.registry import ALGORITHM_ORDER, ALGORITHMS, AlgorithmInfo, AlgorithmKind, get_algorithm

__all__ = ["ALGORITHMS", "ALGORITHM_ORDER", "AlgorithmInfo", "AlgorithmKind", "get_algorithm"]
