# game_dataset/compute/collection.py
from __future__ import annotations

import threading
from functools import partial
from time import perf_counter
from typing import (
    Any,
    Callable,
    Dict,
    Generic,
    Hashable,
    Iterable,
    List,
    Optional,
    Tuple,
    TypeVar,
    TYPE_CHECKING,
)

from game_dataset import logs
from game_dataset.compute.partitioner import HashPartitioner
from game_dataset.compute.stats import StatCounter
from game_dataset.compute.storage_level import StorageLevel
from game_dataset.utils.errors import StorageLevelError

if TYPE_CHECKING:
    from game_dataset.compute.context import ComputeContext

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")
W = TypeVar("W")
U = TypeVar("U")
A = TypeVar("A")

Pairs = List[Tuple[Any, Any]]


class PartitionedKeyedCollection(Generic[K, V]):
    """
    PartitionedKeyedCollection

    A lazily evaluated, hash-partitioned mapping from key to value.

    Contract:
    - transformations (map_values / left_outer_join / full_outer_join) only
      build a plan node; nothing is computed until a terminal operation
      (count / collect / first / aggregate / force_evaluate ...)
    - every transformation preserves the parent's partitioner, so a key
      always lives in partition ``partitioner.partition_for(key)``
    - persist / unpersist are idempotent; the cache state lives on this
      object, so every wrapper holding it observes the same state
    - a shuffle evaluates each parent partition once and keeps the
      bucketed rows for the lifetime of the shuffle node
    - results depend only on key identity, never on partition order
    """

    # --------------------------------------------------
    def __init__(
            self,
            context: "ComputeContext",
            partitioner: HashPartitioner,
            op: str,
            parents: Tuple["PartitionedKeyedCollection", ...] = (),
            fn: Optional[Callable] = None,
            data: Optional[List[Pairs]] = None,
    ):
        self.context = context
        self.partitioner = partitioner
        self.id = context.new_collection_id()

        self._op = op
        self._parents = parents
        self._fn = fn
        self._data = data

        self._name: Optional[str] = None
        self._storage_level = StorageLevel.NONE

        # shuffle nodes: parent rows bucketed by target partition, computed once
        self._shuffle_output: Optional[List[Pairs]] = None
        self._shuffle_lock = threading.Lock()

    @classmethod
    def from_pairs(
            cls,
            context: "ComputeContext",
            pairs: Iterable[Tuple[K, V]],
            partitioner: HashPartitioner,
    ) -> "PartitionedKeyedCollection[K, V]":
        buckets: List[Pairs] = [[] for _ in range(partitioner.num_partitions)]
        for key, value in pairs:
            buckets[partitioner.partition_for(key)].append((key, value))
        return cls(context, partitioner, op="source", data=buckets)

    # --------------------------------------------------
    @property
    def num_partitions(self) -> int:
        return self.partitioner.num_partitions

    @property
    def name(self) -> Optional[str]:
        return self._name

    def set_name(self, name: str) -> "PartitionedKeyedCollection[K, V]":
        """Diagnostic label; has no effect on identity or equality."""
        self._name = name
        return self

    def __repr__(self) -> str:
        label = self._name or self._op
        return f"<PartitionedKeyedCollection id={self.id} name={label} partitions={self.num_partitions}>"

    # ==================================================
    # Transformations (lazy)
    # ==================================================
    def map_values(self, f: Callable[[V], U]) -> "PartitionedKeyedCollection[K, U]":
        return PartitionedKeyedCollection(
            self.context, self.partitioner, op="map_values", parents=(self,), fn=f
        )

    def left_outer_join(
            self,
            other: "PartitionedKeyedCollection[K, W]",
    ) -> "PartitionedKeyedCollection[K, Tuple[V, Optional[W]]]":
        """
        Pair every key of this collection with other's value, or None.

        Keys only present in ``other`` are dropped. ``other`` must hold
        unique keys; with duplicates the last pair seen wins.
        """
        right = other._aligned_with(self.partitioner)
        return PartitionedKeyedCollection(
            self.context, self.partitioner, op="left_outer_join", parents=(self, right)
        )

    def full_outer_join(
            self,
            other: "PartitionedKeyedCollection[K, W]",
    ) -> "PartitionedKeyedCollection[K, Tuple[Optional[V], Optional[W]]]":
        right = other._aligned_with(self.partitioner)
        return PartitionedKeyedCollection(
            self.context, self.partitioner, op="full_outer_join", parents=(self, right)
        )

    def repartition(self, num_partitions: int) -> "PartitionedKeyedCollection[K, V]":
        return self._aligned_with(HashPartitioner(num_partitions))

    def _aligned_with(self, partitioner: HashPartitioner) -> "PartitionedKeyedCollection[K, V]":
        if self.partitioner == partitioner:
            return self
        logs.debug(
            f"[Collection] shuffle id={self.id} "
            f"{self.num_partitions} → {partitioner.num_partitions} partitions"
        )
        return PartitionedKeyedCollection(
            self.context, partitioner, op="shuffle", parents=(self,)
        )

    # ==================================================
    # Lifecycle
    # ==================================================
    @property
    def storage_level(self) -> StorageLevel:
        return self._storage_level

    @property
    def is_cached(self) -> bool:
        return self._storage_level.is_valid

    def persist(
            self,
            level: StorageLevel = StorageLevel.MEMORY_ONLY,
    ) -> "PartitionedKeyedCollection[K, V]":
        """
        Keep computed partitions at ``level`` from their next evaluation on.

        No-op when already persisted: the first valid level is kept.
        """
        level = StorageLevel(level)
        if not level.is_valid:
            raise StorageLevelError("cannot persist with StorageLevel.NONE, use unpersist()")

        if self._storage_level.is_valid:
            if level != self._storage_level:
                logs.debug(
                    f"[Collection] id={self.id} already persisted at "
                    f"{self._storage_level.value}, ignoring {level.value}"
                )
            return self

        self._storage_level = level
        self.context.register_persistent(self)
        logs.info(f"[Collection] persist id={self.id} name={self._name} level={level.value}")
        return self

    def cache(self) -> "PartitionedKeyedCollection[K, V]":
        return self.persist(StorageLevel.MEMORY_ONLY)

    def unpersist(self) -> "PartitionedKeyedCollection[K, V]":
        if not self._storage_level.is_valid:
            return self

        self._storage_level = StorageLevel.NONE
        removed = self.context.block_store.remove_collection(self.id)
        self.context.unregister_persistent(self)
        logs.info(f"[Collection] unpersist id={self.id} name={self._name} blocks={removed}")
        return self

    def uncache(self) -> "PartitionedKeyedCollection[K, V]":
        return self.unpersist()

    def num_cached_partitions(self) -> int:
        return len(self.context.block_store.block_ids(self.id))

    def force_evaluate(self) -> "PartitionedKeyedCollection[K, V]":
        """Compute every partition (storing them when persisted)."""
        start = perf_counter()
        parts = self._evaluate(range(self.num_partitions))
        rows = sum(len(p) for p in parts)
        logs.info(
            f"[Collection] materialized id={self.id} name={self._name} "
            f"rows={rows} took {perf_counter() - start:.4f}s"
        )
        return self

    # ==================================================
    # Evaluation
    # ==================================================
    def partition(self, index: int) -> Pairs:
        """Compute (or read from cache) one partition."""
        block_id = (self.id, index)
        if self._storage_level.is_valid:
            found, payload = self.context.block_store.get(block_id)
            if found:
                return payload

        payload = self._compute(index)

        if self._storage_level.is_valid:
            self.context.block_store.put(block_id, payload, self._storage_level)
        return payload

    def _compute(self, index: int) -> Pairs:
        op = self._op

        if op == "source":
            return list(self._data[index])

        if op == "map_values":
            f = self._fn
            return [(k, f(v)) for k, v in self._parents[0].partition(index)]

        if op == "shuffle":
            return list(self._shuffle_buckets()[index])

        if op == "left_outer_join":
            left, right = self._parents
            lookup = dict(right.partition(index))
            return [
                (k, (v, lookup[k] if k in lookup else None))
                for k, v in left.partition(index)
            ]

        if op == "full_outer_join":
            left, right = self._parents
            left_map = dict(left.partition(index))
            right_map = dict(right.partition(index))
            out = [
                (k, (v, right_map[k] if k in right_map else None))
                for k, v in left_map.items()
            ]
            out.extend((k, (None, w)) for k, w in right_map.items() if k not in left_map)
            return out

        raise ValueError(f"unknown plan op: {op}")

    # --------------------------------------------------
    # Shuffle
    # --------------------------------------------------
    def _bucket(self, parts: Iterable[Pairs]) -> List[Pairs]:
        target = self.partitioner
        buckets: List[Pairs] = [[] for _ in range(target.num_partitions)]
        for part in parts:
            for k, v in part:
                buckets[target.partition_for(k)].append((k, v))
        return buckets

    def _shuffle_buckets(self) -> List[Pairs]:
        with self._shuffle_lock:
            if self._shuffle_output is None:
                parent = self._parents[0]
                self._shuffle_output = self._bucket(
                    parent.partition(j) for j in range(parent.num_partitions)
                )
            return self._shuffle_output

    def _fully_cached(self) -> bool:
        return (
            self._storage_level.is_valid
            and self.num_cached_partitions() == self.num_partitions
        )

    def _prepare_shuffles(self) -> None:
        """
        Run pending upstream shuffles in this process before partition tasks
        are dispatched, so each shuffle parent partition is evaluated once
        (through the executor) and workers receive the bucketed rows.
        """
        if self._fully_cached():
            return

        if self._op == "shuffle":
            with self._shuffle_lock:
                if self._shuffle_output is None:
                    parent = self._parents[0]
                    self._shuffle_output = self._bucket(
                        parent._evaluate(range(parent.num_partitions))
                    )
            return

        for parent in self._parents:
            parent._prepare_shuffles()

    # --------------------------------------------------
    def _evaluate(self, indices: Iterable[int]) -> List[Pairs]:
        """Run one task per partition index through the context's executor."""
        indices = list(indices)
        self._prepare_shuffles()
        results = self.context.executor.run(
            items=indices,
            handler=partial(_evaluate_partition, self),
        )
        # process workers never cache, their results are stored here
        if self._storage_level.is_valid:
            store = self.context.block_store
            for index, payload in zip(indices, results):
                if not store.contains((self.id, index)):
                    store.put((self.id, index), payload, self._storage_level)
        return results

    # ==================================================
    # Terminal operations (force evaluation)
    # ==================================================
    def collect(self) -> List[Tuple[K, V]]:
        out: List[Tuple[K, V]] = []
        for part in self._evaluate(range(self.num_partitions)):
            out.extend(part)
        return out

    def collect_as_map(self) -> Dict[K, V]:
        return dict(self.collect())

    def keys(self) -> List[K]:
        return [k for k, _ in self.collect()]

    def values(self) -> List[V]:
        return [v for _, v in self.collect()]

    def count(self) -> int:
        return sum(self._evaluate_partition_sizes())

    def _evaluate_partition_sizes(self) -> List[int]:
        return [len(p) for p in self._evaluate(range(self.num_partitions))]

    def is_empty(self) -> bool:
        return self.count() == 0

    def first(self) -> Tuple[K, V]:
        """
        First pair of the first non-empty partition.

        Partitions are scanned one at a time so only the needed prefix is
        computed.
        """
        for index in range(self.num_partitions):
            part = self.partition(index)
            if part:
                return part[0]
        raise ValueError(f"empty collection id={self.id} has no first element")

    def lookup(self, key: K) -> Optional[V]:
        for k, v in self.partition(self.partitioner.partition_for(key)):
            if k == key:
                return v
        return None

    def aggregate_values(
            self,
            zero: Callable[[], A],
            seq_op: Callable[[A, V], A],
            comb_op: Callable[[A, A], A],
    ) -> A:
        """
        Fold values per partition with ``seq_op`` then combine partition
        results with ``comb_op``. ``zero`` builds a fresh accumulator.
        """
        partials = []
        for part in self._evaluate(range(self.num_partitions)):
            acc = zero()
            for _, v in part:
                acc = seq_op(acc, v)
            partials.append(acc)

        result = zero()
        for acc in partials:
            result = comb_op(result, acc)
        return result

    def sum_values(self, f: Callable[[V], float] = float) -> float:
        return self.aggregate_values(
            zero=lambda: 0.0,
            seq_op=lambda acc, v: acc + f(v),
            comb_op=lambda a, b: a + b,
        )

    def stats(self, f: Callable[[V], float] = float) -> StatCounter:
        """One numpy summary per partition, merged into a single counter."""
        result = StatCounter()
        for part in self._evaluate(range(self.num_partitions)):
            result.merge(StatCounter.of(f(v) for _, v in part))
        return result

    def group_sizes(self) -> Dict[int, int]:
        """Rows per partition index (diagnostics for skew)."""
        return dict(enumerate(self._evaluate_partition_sizes()))

    # --------------------------------------------------
    # Pickling (process executor)
    # --------------------------------------------------
    def __getstate__(self):
        # worker copies never cache: blocks only live in the parent's store
        state = self.__dict__.copy()
        state["_storage_level"] = StorageLevel.NONE
        del state["_shuffle_lock"]
        return state

    def __setstate__(self, state):
        self.__dict__.update(state)
        self._shuffle_lock = threading.Lock()


def _evaluate_partition(collection: PartitionedKeyedCollection, index: int) -> Pairs:
    # module level so process pools can pickle the task
    return collection.partition(index)
