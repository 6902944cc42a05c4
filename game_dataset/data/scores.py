# game_dataset/data/scores.py
from __future__ import annotations

from typing import Optional, Tuple

from game_dataset.compute.collection import PartitionedKeyedCollection
from game_dataset.compute.context import ComputeContext
from game_dataset.compute.storage_level import StorageLevel
from game_dataset.data.dataset import CollectionLike


def _sum_scores(pair: Tuple[Optional[float], Optional[float]]) -> float:
    left, right = pair
    return (left or 0.0) + (right or 0.0)


def _diff_scores(pair: Tuple[Optional[float], Optional[float]]) -> float:
    left, right = pair
    return (left or 0.0) - (right or 0.0)


class CoordinateDataScores(CollectionLike):
    """
    Scores produced by one coordinate for every record key.

    Score tables are combined between coordinate-descent iterations with
    ``+`` and ``-``: a key missing from one side counts as 0.0, so the
    result covers the union of both key sets.
    """

    def __init__(self, scores: PartitionedKeyedCollection[int, float]):
        self.scores = scores

    @classmethod
    def from_mapping(
            cls,
            context: ComputeContext,
            scores: dict[int, float],
            num_partitions: Optional[int] = None,
    ) -> "CoordinateDataScores":
        return cls(context.parallelize(scores.items(), num_partitions=num_partitions))

    @classmethod
    def empty(cls, context: ComputeContext) -> "CoordinateDataScores":
        return cls(context.empty())

    # --------------------------------------------------
    def __add__(self, other: "CoordinateDataScores") -> "CoordinateDataScores":
        return CoordinateDataScores(self.scores.full_outer_join(other.scores).map_values(_sum_scores))

    def __sub__(self, other: "CoordinateDataScores") -> "CoordinateDataScores":
        return CoordinateDataScores(self.scores.full_outer_join(other.scores).map_values(_diff_scores))

    # --------------------------------------------------
    @property
    def context(self) -> ComputeContext:
        return self.scores.context

    def set_name(self, name: str) -> "CoordinateDataScores":
        self.scores.set_name(name)
        return self

    def persist_rdd(self, storage_level: StorageLevel) -> "CoordinateDataScores":
        if not self.scores.storage_level.is_valid:
            self.scores.persist(storage_level)
        return self

    def unpersist_rdd(self) -> "CoordinateDataScores":
        if self.scores.storage_level.is_valid:
            self.scores.unpersist()
        return self

    def materialize(self) -> "CoordinateDataScores":
        self.scores.force_evaluate()
        return self

    def to_map(self) -> dict[int, float]:
        return self.scores.collect_as_map()

    def __repr__(self) -> str:
        return f"CoordinateDataScores({self.scores!r})"

