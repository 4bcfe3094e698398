from __future__ import annotations

import random

import pytest

from sortviz.core.errors import Cancelled, IndexOutOfRange
from sortviz.sequence.statistics import RunStatistics
from sortviz.sequence.store import MAX_VALUE, MIN_VALUE, generate_sequence


def test_read_counts_one_access_without_a_step(harness_factory) -> None:
    h = harness_factory([4, 2])

    assert h.store.read(1) == 2
    assert h.stats.snapshot() == RunStatistics(array_accesses=1)
    assert h.collector.steps == []


def test_out_of_range_is_index_error(harness_factory) -> None:
    h = harness_factory([1, 2, 3])

    with pytest.raises(IndexOutOfRange):
        h.store.read(3)
    with pytest.raises(IndexError):
        h.store.swap(-1, 0)


def test_compare_is_strictly_greater(harness_factory) -> None:
    h = harness_factory([5, 3, 5])

    assert h.store.compare(0, 1) is True
    assert h.store.compare(0, 2) is False
    assert h.stats.snapshot() == RunStatistics(comparisons=2, array_accesses=4)

    kinds = [e.step.kind for e in h.collector.steps]
    assert kinds == ["compare", "compare"]


def test_swap_same_index_is_a_silent_noop(harness_factory) -> None:
    h = harness_factory([1, 2])

    h.store.swap(1, 1)
    assert h.stats.snapshot() == RunStatistics()
    assert h.collector.steps == []


def test_swap_emits_new_values_and_counts(harness_factory) -> None:
    h = harness_factory([7, 9])

    h.store.swap(0, 1)
    assert h.store.values() == (9, 7)
    assert h.stats.snapshot() == RunStatistics(swaps=1, array_accesses=2)

    step = h.collector.steps[-1].step
    assert step.kind == "swap"
    assert step.indices == (0, 1)
    assert step.values == (9, 7)


def test_write_emits_overwrite_with_new_value(harness_factory) -> None:
    h = harness_factory([1, 2, 3])

    h.store.write(2, 42)
    assert h.store.values() == (1, 2, 42)
    step = h.collector.steps[-1].step
    assert (step.kind, step.indices, step.values) == ("overwrite", (2,), (42,))


def test_each_step_is_followed_by_a_statistics_snapshot(harness_factory) -> None:
    h = harness_factory([3, 1])

    h.store.compare(0, 1)
    h.store.swap(0, 1)

    kinds = [type(e).__name__ for e in h.collector.events]
    assert kinds == ["StepRecorded", "StatisticsUpdated", "StepRecorded", "StatisticsUpdated"]
    assert h.collector.statistics[-1].statistics == h.stats.snapshot()
    assert [e.step_number for e in h.collector.steps] == [1, 2]


def test_annotated_metadata_nests_and_unwinds(harness_factory) -> None:
    h = harness_factory([1, 2, 3])

    with h.store.annotated(depth=0):
        with h.store.annotated(depth=1, left=0):
            h.store.compare(0, 1)
        h.store.compare(1, 2)
    h.store.compare(0, 2)

    metas = [dict(e.step.metadata) for e in h.collector.steps]
    assert metas == [{"depth": 1, "left": 0}, {"depth": 0}, {}]


def test_held_value_comparisons(harness_factory) -> None:
    h = harness_factory([8, 1])

    assert h.store.compare_with(0, 5) is True
    assert h.store.compare_held(2, 3, at=1) is False
    assert h.stats.snapshot() == RunStatistics(comparisons=2, array_accesses=4)
    assert h.collector.steps[-1].step.metadata["left"] == 2


def test_place_copies_into_buffer(harness_factory) -> None:
    h = harness_factory([11, 22])
    out = [0, 0]

    h.store.place(0, out, 1)
    assert out == [0, 11]
    assert h.stats.snapshot() == RunStatistics(array_accesses=2)
    assert h.collector.steps[-1].step.metadata["slot"] == 1

    with pytest.raises(IndexOutOfRange):
        h.store.place(1, out, 2)


def test_cancelled_operation_does_not_mutate(harness_factory) -> None:
    h = harness_factory([2, 1])
    h.emitter.cancel()

    with pytest.raises(Cancelled):
        h.store.swap(0, 1)
    with pytest.raises(Cancelled):
        h.store.write(0, 99)

    assert h.store.values() == (2, 1)
    assert h.stats.snapshot() == RunStatistics()


def test_restore_works_after_cancel(harness_factory) -> None:
    h = harness_factory([2, 2])
    h.emitter.cancel()

    h.store.restore(1, 5)
    assert h.store.values() == (2, 5)
    assert h.stats.snapshot().array_accesses == 1
    assert h.collector.steps[-1].step.metadata["restored"] is True


def test_generate_sequence_range() -> None:
    values = generate_sequence(200, rng=random.Random(3))
    assert len(values) == 200
    assert all(MIN_VALUE <= v <= MAX_VALUE for v in values)
    assert generate_sequence(0) == []
