# game_dataset/compute/block_store.py
from __future__ import annotations

import shutil
import tempfile
import threading
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import joblib

from game_dataset import logs
from game_dataset.compute.storage_level import StorageLevel

BlockId = Tuple[int, int]  # (collection_id, partition_index)


class BlockStore:
    """
    BlockStore

    Holds computed partitions of persisted collections.
    - memory tier : plain dict of partition payloads
    - disk tier   : one joblib file per block under spill_dir

    A block is written according to the storage level it was put with.
    Reads prefer memory and fall back to disk.
    """

    def __init__(self, spill_dir: Optional[str | Path] = None):
        self._owns_spill_dir = spill_dir is None
        self._spill_dir: Optional[Path] = Path(spill_dir) if spill_dir else None
        self._memory: Dict[BlockId, Any] = {}
        self._on_disk: set[BlockId] = set()
        self._lock = threading.Lock()

    # --------------------------------------------------
    @property
    def spill_dir(self) -> Path:
        if self._spill_dir is None:
            self._spill_dir = Path(tempfile.mkdtemp(prefix="game_dataset_blocks_"))
        self._spill_dir.mkdir(parents=True, exist_ok=True)
        return self._spill_dir

    def _block_path(self, block_id: BlockId) -> Path:
        collection_id, index = block_id
        return self.spill_dir / f"collection_{collection_id}" / f"part-{index:05d}.joblib"

    # --------------------------------------------------
    def put(self, block_id: BlockId, payload: Any, level: StorageLevel) -> None:
        if not level.is_valid:
            return

        if level.use_disk:
            path = self._block_path(block_id)
            path.parent.mkdir(parents=True, exist_ok=True)
            joblib.dump(payload, path)

        with self._lock:
            if level.use_memory:
                self._memory[block_id] = payload
            if level.use_disk:
                self._on_disk.add(block_id)

    def get(self, block_id: BlockId) -> Tuple[bool, Any]:
        """Return (found, payload)."""
        with self._lock:
            if block_id in self._memory:
                return True, self._memory[block_id]
            on_disk = block_id in self._on_disk

        if not on_disk:
            return False, None

        return True, joblib.load(self._block_path(block_id))

    def contains(self, block_id: BlockId) -> bool:
        with self._lock:
            return block_id in self._memory or block_id in self._on_disk

    # --------------------------------------------------
    def remove_collection(self, collection_id: int) -> int:
        """Drop every block of one collection. Returns number of blocks removed."""
        with self._lock:
            mem_ids = [b for b in self._memory if b[0] == collection_id]
            disk_ids = [b for b in self._on_disk if b[0] == collection_id]
            for b in mem_ids:
                del self._memory[b]
            for b in disk_ids:
                self._on_disk.discard(b)

        if disk_ids and self._spill_dir is not None:
            shutil.rmtree(self._spill_dir / f"collection_{collection_id}", ignore_errors=True)

        removed = len(set(mem_ids) | set(disk_ids))
        if removed:
            logs.debug(f"[BlockStore] removed {removed} blocks of collection={collection_id}")
        return removed

    def block_ids(self, collection_id: int) -> list[BlockId]:
        with self._lock:
            ids = {b for b in self._memory if b[0] == collection_id}
            ids |= {b for b in self._on_disk if b[0] == collection_id}
        return sorted(ids)

    def clear(self) -> None:
        with self._lock:
            self._memory.clear()
            self._on_disk.clear()

        if self._spill_dir is not None and self._spill_dir.exists():
            if self._owns_spill_dir:
                shutil.rmtree(self._spill_dir, ignore_errors=True)
                self._spill_dir = None
            else:
                for child in self._spill_dir.glob("collection_*"):
                    shutil.rmtree(child, ignore_errors=True)
