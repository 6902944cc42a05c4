# tests/data/test_dataset_builder.py
from __future__ import annotations

import pytest
from pydantic import ValidationError

from game_dataset.config.data_config import FixedEffectDataConfiguration
from game_dataset.data.dataset_builder import FixedEffectDataSetBuilder
from game_dataset.data.game_datum import GameDatum
from game_dataset.data.labeled_point import LabeledPoint
from game_dataset.utils.errors import (
    ConfigurationError,
    FeatureDimensionMismatchError,
    FeatureShardNotFoundError,
)


def make_data(n: int = 6) -> list[tuple[int, GameDatum]]:
    return [
        (
            k,
            GameDatum(
                response=float(k % 2),
                offset=0.0,
                weight=1.0 + k,
                feature_shard_container={
                    "global": [float(k), 1.0, 0.0],
                    "user": [1.0],
                },
            ),
        )
        for k in range(n)
    ]


def test_build_projects_configured_shard(ctx):
    source = ctx.parallelize(make_data())
    ds = FixedEffectDataSetBuilder.build_with_configuration(
        source, FixedEffectDataConfiguration(feature_shard_id="global")
    )

    points = ds.labeled_points.collect_as_map()
    assert ds.feature_shard_id == "global"
    assert sorted(points) == list(range(6))
    assert points[3] == LabeledPoint(label=1.0, features=[3.0, 1.0, 0.0], offset=0.0, weight=4.0)
    assert ds.num_features == 3


def test_build_repartitions_to_min_partitions(ctx):
    source = ctx.parallelize(make_data(), num_partitions=1)
    ds = FixedEffectDataSetBuilder.build_with_configuration(
        source, FixedEffectDataConfiguration(feature_shard_id="user", min_num_partitions=3)
    )

    assert ds.labeled_points.num_partitions == 3
    assert ds.labeled_points.count() == 6


def test_unknown_shard_fails_at_build_time(ctx):
    source = ctx.parallelize(make_data())

    with pytest.raises(FeatureShardNotFoundError):
        FixedEffectDataSetBuilder.build_with_configuration(
            source, FixedEffectDataConfiguration(feature_shard_id="item")
        )


def test_unknown_shard_is_lazy_without_validation(ctx):
    source = ctx.parallelize(make_data())
    ds = FixedEffectDataSetBuilder.build_with_configuration(
        source,
        FixedEffectDataConfiguration(feature_shard_id="item", validate_feature_dimension=False),
    )

    with pytest.raises(FeatureShardNotFoundError):
        ds.materialize()


def test_blank_shard_id_rejected(ctx):
    with pytest.raises(ConfigurationError):
        FixedEffectDataSetBuilder.build_with_configuration(
            ctx.parallelize(make_data()),
            FixedEffectDataConfiguration(feature_shard_id="   "),
        )


def test_inconsistent_feature_lengths_rejected(ctx):
    data = make_data()
    data.append((99, GameDatum(response=0.0, feature_shard_container={"global": [1.0]})))

    with pytest.raises(FeatureDimensionMismatchError, match=r"\[1, 3\]"):
        FixedEffectDataSetBuilder.build_with_configuration(
            ctx.parallelize(data), FixedEffectDataConfiguration(feature_shard_id="global")
        )


def test_config_rejects_zero_partitions():
    with pytest.raises(ValidationError):
        FixedEffectDataConfiguration(feature_shard_id="global", min_num_partitions=0)
