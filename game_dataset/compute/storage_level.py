# game_dataset/compute/storage_level.py
from __future__ import annotations

from enum import Enum


class StorageLevel(str, Enum):
    """
    Where computed partitions of a persisted collection are kept.

    MEMORY_AND_DISK keeps blocks in memory and also spills a copy to disk,
    so a block dropped from memory can be restored without recomputation.
    """

    NONE = "none"
    MEMORY_ONLY = "memory_only"
    MEMORY_AND_DISK = "memory_and_disk"
    DISK_ONLY = "disk_only"

    @property
    def is_valid(self) -> bool:
        return self is not StorageLevel.NONE

    @property
    def use_memory(self) -> bool:
        return self in (StorageLevel.MEMORY_ONLY, StorageLevel.MEMORY_AND_DISK)

    @property
    def use_disk(self) -> bool:
        return self in (StorageLevel.MEMORY_AND_DISK, StorageLevel.DISK_ONLY)
