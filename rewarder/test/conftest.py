import json
from dataclasses import dataclass
from typing import Any

import eth_utils as eth
import pytest

from rewarder.claims import ClaimProcessor
from rewarder.config import load_conf
from rewarder.context import RewarderContext
from rewarder.distributions import DistributionLedger
from rewarder.governor import RootGovernor
from rewarder.ledger import InMemoryTokenLedger
from rewarder.models import DistributionRequest, RewarderConfig
from rewarder.store import SnapshotStore
from rewarder.tree_builder import TreeBuilder

CONFIG_PATH = "rewarder/test/stubs/config"

CUSTODY = "0x5FbDB2315678afecb367f032d93F642f64180aa3"
POOL = "0x02203f2351e7ac6ab5051205172d3f772db7d814"
TOKEN_A = "0xCf7Ed3AccA5a467e9e704C703E8D87F634fB0Fc9"
TOKEN_B = "0x2279B7A0a67DB372996a5FaB50D91eAA73d2eBe6"
NOT_WHITELISTED = "0x0DCd1Bf9A1b36cE34237eEaFef220932846BCD82"
CREATOR = "0x3C44CdDdB6a900fa2b585dd299e03d12FA4293BC"
FEE_RECIPIENT = "0x70997970C51812dc3A010C7d01b50e0d17dc79C8"

HOUR = 3600
# 2023-11-14T22:13:20Z, sits inside epoch 472222
NOW = 1_700_000_000
NEXT_EPOCH = NOW // HOUR + 1
START = NEXT_EPOCH * HOUR


@pytest.fixture
def config() -> RewarderConfig:
    return load_conf(CONFIG_PATH)


@pytest.fixture()
def ADDRESSES():
    # checksummed so they compare equal to what the models store
    return [
        eth.to_checksum_address(a)
        for a in [
            "0x9bc33f6155eFAcc290c3C50E9B5b24b668562732",
            "0xfDe38ad4bBbeC867e6cb4Bb31FbFB2074c959A83",
            "0x8BB4C0b502f869af3B25166930507a6E8c3038D4",
            "0x7Ac54A0406FA2B465E0D57C66597BE83A4b149fC",
            "0xdeA708968f8dd520f5e2F0aB6785F28c98521ca8",
        ]
    ]


@pytest.fixture
def token_ledger() -> InMemoryTokenLedger:
    ledger = InMemoryTokenLedger(custody=CUSTODY)
    for token in [TOKEN_A, TOKEN_B, NOT_WHITELISTED]:
        ledger.mint(token, CREATOR, 1_000_000)
        ledger.approve(token, CREATOR, 1_000_000)
    return ledger


@pytest.fixture
def ctx(config: RewarderConfig, token_ledger: InMemoryTokenLedger) -> RewarderContext:
    return RewarderContext.from_config(config, token_ledger)


@pytest.fixture
def ledger(ctx: RewarderContext) -> DistributionLedger:
    return DistributionLedger(ctx)


@pytest.fixture
def governor(ctx: RewarderContext) -> RootGovernor:
    return RootGovernor(ctx)


@pytest.fixture
def processor(ctx: RewarderContext, governor: RootGovernor) -> ClaimProcessor:
    return ClaimProcessor(ctx, governor)


@pytest.fixture
def store() -> SnapshotStore:
    return SnapshotStore()


@pytest.fixture
def builder(ctx: RewarderContext, store: SnapshotStore) -> TreeBuilder:
    return TreeBuilder(ctx.clock, store)


def make_request(
    amount: int = 3000,
    epochs: int = 50,
    token: str = TOKEN_A,
    start: int = START,
) -> DistributionRequest:
    return DistributionRequest(
        pool=POOL,
        rewardToken=token,
        amount=amount,
        startTimestamp=start,
        endTimestamp=start + epochs * HOUR,
    )


@dataclass
class MockResponse:
    res: dict[str, Any]

    def json(self):
        return self.res


def mock_lp_shares(monkeypatch, stub: str) -> None:
    with open(stub) as j:
        mock_shares = json.load(j)

    monkeypatch.setenv("SUBGRAPH_LP_SHARES", "https://example.com/subgraph")
    monkeypatch.setattr(
        "rewarder.queries.common.graphql_iterate_query",
        lambda url, accessor, json: mock_shares["data"]["hypervisorShares"],
    )
