# tests/conftest.py
from __future__ import annotations

import numpy as np
import pytest
from loguru import logger

from game_dataset.compute.context import ComputeContext
from game_dataset.data.fixed_effect_dataset import FixedEffectDataSet
from game_dataset.data.labeled_point import LabeledPoint


@pytest.fixture(autouse=True)
def disable_file_logger():
    logger.remove()
    logger.add(lambda msg: None)
    yield


@pytest.fixture
def ctx(tmp_path) -> ComputeContext:
    """
    Threaded context with 4 partitions; spill files isolated under tmp_path.
    """
    context = ComputeContext(
        default_parallelism=4,
        executor="thread",
        max_workers=2,
        spill_dir=str(tmp_path / "blocks"),
    )
    yield context
    context.stop()


@pytest.fixture
def seq_ctx() -> ComputeContext:
    context = ComputeContext(default_parallelism=3, executor="sequential")
    yield context
    context.stop()


@pytest.fixture
def two_points() -> dict[int, LabeledPoint]:
    """
    1: label=1.0, features=[0.1, 0.2], offset=0.0, weight=1.0
    2: label=0.0, features=[0.3, 0.1], offset=0.5, weight=2.0
    """
    return {
        1: LabeledPoint(label=1.0, features=np.array([0.1, 0.2]), offset=0.0, weight=1.0),
        2: LabeledPoint(label=0.0, features=np.array([0.3, 0.1]), offset=0.5, weight=2.0),
    }


@pytest.fixture
def two_point_dataset(ctx, two_points) -> FixedEffectDataSet:
    return FixedEffectDataSet(ctx.parallelize(two_points.items()), "globalShard")
