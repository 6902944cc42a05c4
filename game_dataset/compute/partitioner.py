# game_dataset/compute/partitioner.py
from __future__ import annotations

import hashlib
from dataclasses import dataclass
from typing import Hashable


@dataclass(frozen=True)
class HashPartitioner:
    """
    Deterministic key → partition mapping.

    Integer keys use their value directly so the layout is stable across
    interpreter runs (str hashing is salted per process, so other keys go
    through blake2b of their repr).
    """

    num_partitions: int

    def __post_init__(self):
        if self.num_partitions < 1:
            raise ValueError(f"num_partitions must be >= 1, got {self.num_partitions}")

    def partition_for(self, key: Hashable) -> int:
        if isinstance(key, int):
            return key % self.num_partitions
        digest = hashlib.blake2b(repr(key).encode("utf-8"), digest_size=8).digest()
        return int.from_bytes(digest, "big") % self.num_partitions
