from .storage_level import StorageLevel
from .partitioner import HashPartitioner
from .context import ComputeContext
from .collection import PartitionedKeyedCollection
from .stats import StatCounter

__all__ = [
    "StorageLevel",
    "HashPartitioner",
    "ComputeContext",
    "PartitionedKeyedCollection",
    "StatCounter",
]
