# game_dataset/data/fixed_effect_dataset.py
from __future__ import annotations

from dataclasses import dataclass
from functools import cached_property
from typing import Optional, Tuple

from game_dataset import logs
from game_dataset.compute.collection import PartitionedKeyedCollection
from game_dataset.compute.context import ComputeContext
from game_dataset.compute.stats import StatCounter
from game_dataset.compute.storage_level import StorageLevel
from game_dataset.data.dataset import CollectionLike, DataSet
from game_dataset.data.labeled_point import LabeledPoint
from game_dataset.data.scores import CoordinateDataScores


def _add_score_to_offset(pair: Tuple[LabeledPoint, Optional[float]]) -> LabeledPoint:
    point, score = pair
    # missing score: additive identity, the record is kept as is
    return point.add_to_offset(score if score is not None else 0.0)


@dataclass(frozen=True)
class DatasetSummary:
    num_samples: int
    weight_sum: float
    response_sum: float
    num_features: int
    feature_stats: StatCounter
    feature_shard_id: str

    def __str__(self) -> str:
        return (
            f"numSamples: {self.num_samples}\n"
            f"weightSum: {self.weight_sum}\n"
            f"responseSum: {self.response_sum}\n"
            f"numFeatures: {self.num_features}\n"
            f"featureStats: {self.feature_stats}\n"
            f"featureShardId: {self.feature_shard_id}"
        )


class FixedEffectDataSet(DataSet["FixedEffectDataSet"], CollectionLike):
    """
    FixedEffectDataSet

    Labeled points of one feature shard, keyed by unique record id.

    Semantics:
    - add_scores_to_offsets never mutates this object; it returns a new
      dataset over a new (lazy) collection
    - lifecycle calls act on ``labeled_points`` and return ``self``
    - datasets sharing one collection share its cache state: unpersisting
      through one of them releases it for all
    """

    def __init__(
            self,
            labeled_points: PartitionedKeyedCollection[int, LabeledPoint],
            feature_shard_id: str,
    ):
        self.labeled_points = labeled_points
        self._feature_shard_id = feature_shard_id

    @property
    def feature_shard_id(self) -> str:
        return self._feature_shard_id

    @cached_property
    def num_features(self) -> int:
        """
        Vector length of the first record. All records of a shard are
        assumed to share it (see FixedEffectDataSetBuilder validation).
        """
        _, point = self.labeled_points.first()
        return point.num_features

    # ======================================================================
    # Offsets
    # ======================================================================
    def add_scores_to_offsets(self, scores: CoordinateDataScores) -> "FixedEffectDataSet":
        """
        Left outer join the labeled points with ``scores`` and add each
        score to the record offset.

        Keys without a score keep their offset; scores for unknown keys are
        ignored. Result has exactly the same key set.
        """
        updated = (
            self.labeled_points
            .left_outer_join(scores.scores)
            .map_values(_add_score_to_offset)
        )
        return FixedEffectDataSet(updated, self._feature_shard_id)

    # ======================================================================
    # Lifecycle
    # ======================================================================
    @property
    def context(self) -> ComputeContext:
        return self.labeled_points.context

    def set_name(self, name: str) -> "FixedEffectDataSet":
        """
        Name the underlying collection. Only used for logging, never to
        reference the dataset.
        """
        self.labeled_points.set_name(name)
        return self

    def persist_rdd(self, storage_level: StorageLevel) -> "FixedEffectDataSet":
        if not self.labeled_points.storage_level.is_valid:
            self.labeled_points.persist(storage_level)
        return self

    def unpersist_rdd(self) -> "FixedEffectDataSet":
        if self.labeled_points.storage_level.is_valid:
            self.labeled_points.unpersist()
        return self

    @logs.catch(msg="materialize failed")
    def materialize(self) -> "FixedEffectDataSet":
        self.labeled_points.force_evaluate()
        logs.info(
            f"[FixedEffectDataSet] materialized shard={self._feature_shard_id} "
            f"name={self.labeled_points.name}"
        )
        return self

    # ======================================================================
    # Summary
    # ======================================================================
    @logs.catch(msg="summary failed")
    def summary(self) -> DatasetSummary:
        """
        Reductions over the whole collection; as expensive as materialize().
        """
        points = self.labeled_points

        num_samples = points.count()
        weight_sum = points.sum_values(lambda p: p.weight)
        response_sum = points.sum_values(lambda p: p.label)
        feature_stats = points.stats(lambda p: p.active_size)

        if num_samples == 0:
            logs.warning(f"[FixedEffectDataSet] shard={self._feature_shard_id} is empty")
            num_features = 0
        else:
            num_features = self.num_features

        return DatasetSummary(
            num_samples=num_samples,
            weight_sum=weight_sum,
            response_sum=response_sum,
            num_features=num_features,
            feature_stats=feature_stats,
            feature_shard_id=self._feature_shard_id,
        )

    def to_summary_string(self) -> str:
        return str(self.summary())

    def summarize(self) -> str:
        return self.to_summary_string()

    def __repr__(self) -> str:
        return (
            f"FixedEffectDataSet(feature_shard_id={self._feature_shard_id!r}, "
            f"labeled_points={self.labeled_points!r})"
        )
