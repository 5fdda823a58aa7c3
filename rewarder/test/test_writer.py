import json
import os

import pytest

from rewarder.epoch import EpochClock
from rewarder.models import Distribution, TreeSnapshot
from rewarder.tree_builder import TreeBuilder
from rewarder.writer import Writer

from rewarder.test.conftest import CREATOR, POOL, TOKEN_A


@pytest.fixture
def snapshot(ADDRESSES) -> TreeSnapshot:
    distribution = Distribution(
        id="0x" + "01" * 32,
        creator=CREATOR,
        pool=POOL,
        rewardToken=TOKEN_A,
        totalAmount=1000,
        startEpoch=0,
        epochCount=10,
    )
    return TreeBuilder(EpochClock(3600)).build(
        {ADDRESSES[0]: 1, ADDRESSES[1]: 3}, [distribution], 10, created_at=36000
    )


@pytest.fixture
def writer(tmp_path) -> Writer:
    return Writer(str(tmp_path / "reports"), 10)


def test_create_dirs(writer):
    writer._create_dir()
    assert os.path.exists(writer.path)
    assert os.path.exists(writer.csv_path)
    assert os.path.exists(writer.json_path)


def test_write_csv(writer):
    writer.to_csv([{"key1": 1, "key2": 2}, {"key1": 3, "key2": 4}], "test", ["key1", "key2"])
    with open(f"{writer.csv_path}/test.csv", "r") as f:
        assert f.read() == "key1,key2\r\n1,2\r\n3,4\r\n"


def test_write_snapshot(writer, snapshot: TreeSnapshot, ADDRESSES):
    writer.write_snapshot(snapshot)

    with open(f"{writer.json_path}/tree.json") as f:
        assert TreeSnapshot.model_validate(json.load(f)) == snapshot

    with open(f"{writer.json_path}/summary.json") as f:
        summary = json.load(f)
    assert summary["root"] == snapshot.root
    assert summary["recipients"] == 2
    assert summary["totals"] == {TOKEN_A: "1000"}

    with open(f"{writer.csv_path}/leaves.csv") as f:
        lines = f.read().splitlines()
    assert lines[0] == "recipient,rewardToken,cumulativeAmount"
    assert len(lines) == 3
