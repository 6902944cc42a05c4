# tests/compute/test_stats.py
from __future__ import annotations

import math

import pytest

from game_dataset.compute.partitioner import HashPartitioner
from game_dataset.compute.stats import StatCounter


def test_merge_matches_single_pass():
    values = [1.0, 4.0, 2.0, 8.0, 5.0, 7.0]
    whole = StatCounter.of(values)
    merged = StatCounter.of(values[:2]).merge(StatCounter.of(values[2:]))

    assert merged.count == whole.count
    assert merged.mean == pytest.approx(whole.mean)
    assert merged.stdev == pytest.approx(whole.stdev)
    assert merged.max == 8.0
    assert merged.min == 1.0


def test_merge_with_empty_counter():
    counter = StatCounter.of([2.0, 2.0])
    assert StatCounter().merge(counter).count == 2
    assert counter.merge(StatCounter()).mean == 2.0


def test_empty_counter_stdev_is_nan():
    assert math.isnan(StatCounter().stdev)


def test_string_format():
    assert str(StatCounter.of([2, 2])) == (
        "(count: 2, mean: 2.000000, stdev: 0.000000, max: 2.000000, min: 2.000000)"
    )


def test_partitioner_is_deterministic_for_non_int_keys():
    p = HashPartitioner(5)
    assert p.partition_for("user-42") == p.partition_for("user-42")
    assert 0 <= p.partition_for(("a", 1)) < 5


def test_partitioner_rejects_zero_partitions():
    with pytest.raises(ValueError):
        HashPartitioner(0)


def test_collection_stats_merge_partition_summaries(ctx):
    values = [float(v) for v in range(1, 21)]
    coll = ctx.parallelize(list(enumerate(values)), num_partitions=6)

    stats = coll.stats()
    whole = StatCounter.of(values)

    assert stats.count == 20
    assert stats.mean == pytest.approx(whole.mean)
    assert stats.stdev == pytest.approx(whole.stdev)
    assert (stats.min, stats.max) == (1.0, 20.0)
