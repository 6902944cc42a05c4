# game_dataset/compute/context.py
from __future__ import annotations

import itertools
import threading
from typing import TYPE_CHECKING, Hashable, Iterable, Optional, Tuple, TypeVar

from game_dataset import logs
from game_dataset.compute.block_store import BlockStore
from game_dataset.compute.executor import ParallelExecutor
from game_dataset.compute.partitioner import HashPartitioner
from game_dataset.config.app_config import AppConfig
from game_dataset.config.compute_config import ComputeConfig
from game_dataset.utils.logger import Logging

if TYPE_CHECKING:
    from game_dataset.compute.collection import PartitionedKeyedCollection

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class ComputeContext:
    """
    ComputeContext

    Entry point of the partitioned-collection substrate.
    - owns the ParallelExecutor that runs partition tasks
    - owns the BlockStore holding persisted partitions
    - tracks which collections are currently persisted

    One context per training run; ``stop()`` releases every cached block.
    """

    def __init__(
            self,
            *,
            default_parallelism: int = 4,
            executor: str = "thread",
            max_workers: Optional[int] = None,
            spill_dir: Optional[str] = None,
    ):
        if default_parallelism < 1:
            raise ValueError(f"default_parallelism must be >= 1, got {default_parallelism}")

        self.default_parallelism = default_parallelism
        self.executor = ParallelExecutor(mode=executor, max_workers=max_workers)
        self.block_store = BlockStore(spill_dir=spill_dir)

        self._ids = itertools.count()
        self._ids_lock = threading.Lock()
        # persisted collections stay reachable until unpersisted or stop()
        self._persistent: dict[int, "PartitionedKeyedCollection"] = {}

    @classmethod
    def from_config(cls, cfg: ComputeConfig) -> "ComputeContext":
        return cls(
            default_parallelism=cfg.default_parallelism,
            executor=cfg.executor,
            max_workers=cfg.max_workers,
            spill_dir=cfg.spill_dir,
        )

    @classmethod
    def from_app_config(cls, cfg: AppConfig, log: Logging = logs) -> "ComputeContext":
        """Run entry point: attach the configured log sink, then build the context."""
        cfg.configure_logging(log)
        return cls.from_config(cfg.compute)

    # --------------------------------------------------
    def parallelize(
            self,
            pairs: Iterable[Tuple[K, V]],
            num_partitions: Optional[int] = None,
    ) -> "PartitionedKeyedCollection[K, V]":
        """
        Distribute (key, value) pairs into a hash-partitioned collection.
        """
        from game_dataset.compute.collection import PartitionedKeyedCollection

        partitioner = HashPartitioner(num_partitions or self.default_parallelism)
        return PartitionedKeyedCollection.from_pairs(self, pairs, partitioner)

    def empty(self) -> "PartitionedKeyedCollection":
        return self.parallelize([])

    # --------------------------------------------------
    def new_collection_id(self) -> int:
        with self._ids_lock:
            return next(self._ids)

    def register_persistent(self, collection: "PartitionedKeyedCollection") -> None:
        self._persistent[collection.id] = collection

    def unregister_persistent(self, collection: "PartitionedKeyedCollection") -> None:
        self._persistent.pop(collection.id, None)

    def persistent_collections(self) -> dict[int, "PartitionedKeyedCollection"]:
        return dict(self._persistent)

    # --------------------------------------------------
    def stop(self) -> None:
        persisted = list(self._persistent.values())
        for collection in persisted:
            collection.unpersist()
        self._persistent.clear()
        self.block_store.clear()
        logs.info(f"[ComputeContext] stopped, released {len(persisted)} persisted collections")

    # --------------------------------------------------
    # Worker processes get a fresh, sequential context: blocks cached in the
    # parent are not visible there and are recomputed from lineage.
    def __getstate__(self):
        return {"default_parallelism": self.default_parallelism}

    def __setstate__(self, state):
        self.__init__(
            default_parallelism=state["default_parallelism"],
            executor="sequential",
        )
