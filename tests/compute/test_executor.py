# tests/compute/test_executor.py
from __future__ import annotations

import pytest

from game_dataset.compute.executor import ParallelExecutor
from game_dataset.utils.errors import ConfigurationError


def square(x):
    return x * x


def handler(x):
    if x == 2:
        raise RuntimeError("boom")
    return x


def test_run_with_empty_items_returns_empty_list():
    assert ParallelExecutor(mode="thread").run(items=[], handler=square) == []


def test_run_sequential_order_preserved():
    called = []

    def record(x):
        called.append(x)
        return x

    items = [3, 1, 2]
    result = ParallelExecutor(mode="sequential").run(items=items, handler=record)

    assert called == items
    assert result == items


@pytest.mark.parametrize("mode", ["thread", "process"])
def test_parallel_results_follow_item_order(mode):
    # builtin handler so process workers can unpickle it
    result = ParallelExecutor(mode=mode, max_workers=2).run(
        items=[-3, 1, -2, 4],
        handler=abs,
    )
    assert result == [3, 1, 2, 4]


def test_run_parallel_propagates_exception():
    with pytest.raises(RuntimeError, match="boom"):
        ParallelExecutor(mode="thread", max_workers=2).run(
            items=[0, 1, 2, 3],
            handler=handler,
        )


def test_unknown_mode_rejected():
    with pytest.raises(ConfigurationError):
        ParallelExecutor(mode="gpu")
