import datetime
import itertools
from collections import defaultdict
from typing import Iterable, Optional, Union

import eth_utils as eth

from rewarder.epoch import EpochClock
from rewarder.errors import EmptyShareTableError
from rewarder.merkle import MerkleTree, hash_leaf
from rewarder.models import (
    Distribution,
    EthereumAddress,
    MerkleLeaf,
    ShareTable,
    TreeSnapshot,
)
from rewarder.store import SnapshotStore


def aggregate_by_token(
    distributions: Iterable[Distribution], as_of_epoch: int
) -> dict[EthereumAddress, int]:
    """
    Sum everything each distribution has streamed before `as_of_epoch`, per reward token.
    Several distributions of the same token add up, they never replace each other.
    """
    aggregated: dict[EthereumAddress, int] = defaultdict(int)
    for d in distributions:
        aggregated[d.rewardToken] += d.disbursement(d.startEpoch, as_of_epoch)
    return dict(aggregated)


def apportion(
    share_table: ShareTable, aggregated: dict[EthereumAddress, int]
) -> list[MerkleLeaf]:
    """
    Split each token amount across LPs pro rata to their shares, truncating.
    Up to `len(shares) - 1` units per token are left undistributed, they are not redistributed.
    LPs owed nothing are left out of the tree.
    """
    total_shares = share_table.total_shares
    leaves = []
    for (recipient, share), (token, amount) in itertools.product(
        share_table.shares.items(), aggregated.items()
    ):
        leaf_amount = amount * share // total_shares
        if leaf_amount > 0:
            leaves.append(
                MerkleLeaf(recipient=recipient, rewardToken=token, cumulativeAmount=leaf_amount)
            )
    return leaves


def canonical_order(leaves: Iterable[MerkleLeaf]) -> list[MerkleLeaf]:
    """Sort by (recipient, token) bytes so the same entitlements always give the same root"""
    return sorted(leaves, key=lambda leaf: leaf.sort_key)


class TreeBuilder:
    """
    Turns distributions and an LP share table into a cumulative rewards tree.
    Read only with respect to ledger state: the only side effect is appending to the snapshot store.
    """

    def __init__(self, clock: EpochClock, store: Optional[SnapshotStore] = None):
        self.clock = clock
        self.store = store

    def build(
        self,
        share_table: Union[ShareTable, dict[EthereumAddress, int]],
        distributions: Iterable[Distribution],
        as_of_epoch: int,
        created_at: Optional[int] = None,
    ) -> TreeSnapshot:
        if not isinstance(share_table, ShareTable):
            share_table = ShareTable(shares=share_table)
        if len(share_table) == 0 or share_table.total_shares == 0:
            raise EmptyShareTableError("No LP shares to apportion rewards across")

        aggregated = aggregate_by_token(distributions, as_of_epoch)
        leaves = canonical_order(apportion(share_table, aggregated))
        leaf_hashes = [hash_leaf(leaf) for leaf in leaves]
        tree = MerkleTree(leaf_hashes)

        if created_at is None:
            created_at = int(datetime.datetime.now(tz=datetime.timezone.utc).timestamp())

        snapshot = TreeSnapshot(
            root=tree.hex_root,
            leafHashes=[eth.encode_hex(h) for h in leaf_hashes],
            leaves=leaves,
            generatedAtEpoch=as_of_epoch,
            createdAt=created_at,
        )
        if self.store is not None:
            self.store.insert_snapshot(snapshot)
        return snapshot
