# tests/compute/test_block_store.py
from __future__ import annotations

import numpy as np

from game_dataset.compute.block_store import BlockStore
from game_dataset.compute.storage_level import StorageLevel


def test_memory_only_block_roundtrip(tmp_path):
    store = BlockStore(spill_dir=tmp_path)
    store.put((1, 0), [(1, "a")], StorageLevel.MEMORY_ONLY)

    assert store.get((1, 0)) == (True, [(1, "a")])
    assert not any(tmp_path.iterdir())


def test_missing_block():
    store = BlockStore()
    assert store.get((9, 9)) == (False, None)
    assert not store.contains((9, 9))


def test_none_level_is_ignored(tmp_path):
    store = BlockStore(spill_dir=tmp_path)
    store.put((1, 0), [(1, "a")], StorageLevel.NONE)
    assert not store.contains((1, 0))


def test_remove_collection_only_touches_that_collection(tmp_path):
    store = BlockStore(spill_dir=tmp_path)
    store.put((1, 0), ["x"], StorageLevel.MEMORY_AND_DISK)
    store.put((1, 1), ["y"], StorageLevel.DISK_ONLY)
    store.put((2, 0), ["z"], StorageLevel.MEMORY_ONLY)

    assert store.remove_collection(1) == 2

    assert store.block_ids(1) == []
    assert store.block_ids(2) == [(2, 0)]
    assert not (tmp_path / "collection_1").exists()


def test_clear_removes_owned_temp_dir():
    store = BlockStore()
    store.put((1, 0), ["x"], StorageLevel.DISK_ONLY)
    spill = store.spill_dir
    assert spill.exists()

    store.clear()

    assert not spill.exists()
    assert not store.contains((1, 0))


def test_disk_block_holds_numpy_payload(tmp_path):
    store = BlockStore(spill_dir=tmp_path)
    payload = [(1, np.arange(4.0)), (2, np.ones(3))]
    store.put((3, 0), payload, StorageLevel.DISK_ONLY)

    assert (tmp_path / "collection_3" / "part-00000.joblib").is_file()

    found, loaded = store.get((3, 0))
    assert found
    assert [k for k, _ in loaded] == [1, 2]
    np.testing.assert_array_equal(loaded[0][1], np.arange(4.0))
    np.testing.assert_array_equal(loaded[1][1], np.ones(3))
