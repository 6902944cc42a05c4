# game_dataset/data/dataset.py
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, TypeVar, TYPE_CHECKING

from game_dataset.compute.storage_level import StorageLevel

if TYPE_CHECKING:
    from game_dataset.compute.context import ComputeContext
    from game_dataset.data.scores import CoordinateDataScores

D = TypeVar("D", bound="DataSet")
C = TypeVar("C", bound="CollectionLike")


class DataSet(ABC, Generic[D]):
    """A training dataset that can absorb scores from other coordinates."""

    @abstractmethod
    def add_scores_to_offsets(self, scores: "CoordinateDataScores") -> D:
        """Return a new dataset with ``scores`` added to the record offsets."""

    @abstractmethod
    def to_summary_string(self) -> str:
        ...


class CollectionLike(ABC):
    """
    Lifecycle contract for objects backed by partitioned collections.

    Every method returns ``self`` so calls can be chained:

        ds.set_name("fixed").persist_rdd(StorageLevel.MEMORY_AND_DISK).materialize()
    """

    @property
    @abstractmethod
    def context(self) -> "ComputeContext":
        ...

    @abstractmethod
    def set_name(self: C, name: str) -> C:
        ...

    @abstractmethod
    def persist_rdd(self: C, storage_level: StorageLevel) -> C:
        ...

    @abstractmethod
    def unpersist_rdd(self: C) -> C:
        ...

    @abstractmethod
    def materialize(self: C) -> C:
        ...

    # short names used by the training loop
    def persist(self: C, storage_level: StorageLevel = StorageLevel.MEMORY_AND_DISK) -> C:
        return self.persist_rdd(storage_level)

    def unpersist(self: C) -> C:
        return self.unpersist_rdd()

    def rename(self: C, name: str) -> C:
        return self.set_name(name)
