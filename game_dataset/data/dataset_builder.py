# game_dataset/data/dataset_builder.py
from __future__ import annotations

from functools import partial

from game_dataset import logs
from game_dataset.compute.collection import PartitionedKeyedCollection
from game_dataset.config.data_config import FixedEffectDataConfiguration
from game_dataset.data.fixed_effect_dataset import FixedEffectDataSet
from game_dataset.data.game_datum import GameDatum
from game_dataset.data.labeled_point import LabeledPoint
from game_dataset.utils.errors import ConfigurationError, FeatureDimensionMismatchError


def _project(feature_shard_id: str, datum: GameDatum) -> LabeledPoint:
    return datum.generate_labeled_point_with_feature_shard_id(feature_shard_id)


def _add_length(acc: set, point: LabeledPoint) -> set:
    acc.add(point.num_features)
    return acc


def _union(a: set, b: set) -> set:
    a |= b
    return a


class FixedEffectDataSetBuilder:
    """
    FixedEffectDataSetBuilder

    Responsibility:
    - validate the fixed-effect data configuration
    - project every GameDatum onto the configured feature shard
    - optionally check that the shard has a single vector length

    Contract:
    - key set and cardinality of the source are preserved
    - configuration errors are raised here, before any dataset is returned
    - with validate_feature_dimension the source is evaluated once at build
      time; otherwise building is lazy and projection errors surface at
      the first evaluation
    """

    @staticmethod
    def build_with_configuration(
            game_data: PartitionedKeyedCollection[int, GameDatum],
            config: FixedEffectDataConfiguration,
    ) -> FixedEffectDataSet:
        feature_shard_id = config.feature_shard_id
        if not feature_shard_id:
            raise ConfigurationError("[FixedEffectDataSetBuilder] feature_shard_id is empty")

        if game_data.num_partitions < config.min_num_partitions:
            game_data = game_data.repartition(config.min_num_partitions)

        labeled_points = game_data.map_values(partial(_project, feature_shard_id))

        if config.validate_feature_dimension:
            FixedEffectDataSetBuilder._validate_feature_dimension(labeled_points, feature_shard_id)

        logs.info(
            f"[FixedEffectDataSetBuilder] built shard={feature_shard_id} "
            f"partitions={labeled_points.num_partitions}"
        )
        return FixedEffectDataSet(labeled_points, feature_shard_id)

    @staticmethod
    def _validate_feature_dimension(
            labeled_points: PartitionedKeyedCollection[int, LabeledPoint],
            feature_shard_id: str,
    ) -> None:
        lengths = labeled_points.aggregate_values(
            zero=set,
            seq_op=_add_length,
            comb_op=_union,
        )
        if len(lengths) > 1:
            raise FeatureDimensionMismatchError(
                f"[FixedEffectDataSetBuilder] shard={feature_shard_id} "
                f"has inconsistent feature lengths: {sorted(lengths)}"
            )
