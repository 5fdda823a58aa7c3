import os

import pytest

from rewarder.models import MerkleLeaf, TreeSnapshot
from rewarder.store import SnapshotStore

from rewarder.test.conftest import TOKEN_A


def make_snapshot(root_byte: str, created_at: int, recipient: str) -> TreeSnapshot:
    return TreeSnapshot(
        root="0x" + root_byte * 32,
        leafHashes=["0x" + "ab" * 32],
        leaves=[
            MerkleLeaf(recipient=recipient, rewardToken=TOKEN_A, cumulativeAmount=10)
        ],
        generatedAtEpoch=created_at // 3600,
        createdAt=created_at,
    )


@pytest.fixture
def snapshots(ADDRESSES) -> list[TreeSnapshot]:
    return [
        make_snapshot("01", 3600, ADDRESSES[0]),
        make_snapshot("02", 7200, ADDRESSES[1]),
        make_snapshot("03", 10800, ADDRESSES[2]),
    ]


def test_empty_store():
    store = SnapshotStore()
    assert store.find_latest() is None
    assert store.find_all() == []
    assert store.find_by_root("0x" + "01" * 32) is None


def test_insert_and_find(snapshots):
    store = SnapshotStore()
    for s in snapshots:
        store.insert_snapshot(s)

    assert store.find_all() == snapshots
    assert store.find_latest() == snapshots[-1]
    assert store.find_by_root(snapshots[1].root) == snapshots[1]
    assert store.find_by_root(snapshots[1].root.upper().replace("0X", "0x")) == snapshots[1]


def test_latest_follows_generation_time(snapshots):
    store = SnapshotStore()
    for s in reversed(snapshots):
        store.insert_snapshot(s)

    assert store.find_latest() == snapshots[-1]
    assert store.find_all() == snapshots


def test_same_second_falls_back_to_insertion_order(ADDRESSES):
    store = SnapshotStore()
    first = make_snapshot("01", 3600, ADDRESSES[0])
    second = make_snapshot("02", 3600, ADDRESSES[1])
    store.insert_snapshot(first)
    store.insert_snapshot(second)

    assert store.find_latest() == second


def test_file_store_persists(tmp_path, snapshots):
    path = str(tmp_path / "db")
    store = SnapshotStore(path)
    store.insert_snapshot(snapshots[0])
    store.close()

    assert os.path.exists(f"{path}/rewarder-db.json")

    reopened = SnapshotStore(path)
    assert reopened.find_latest() == snapshots[0]

    dropped = SnapshotStore(path, drop=True)
    assert dropped.find_all() == []
