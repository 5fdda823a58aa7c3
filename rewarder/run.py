import datetime
from typing import Optional

import eth_utils as eth

from rewarder.config import load_conf, load_distributions
from rewarder.epoch import EpochClock
from rewarder.models import Distribution, EthereumAddress, ShareTable, TreeSnapshot
from rewarder.queries import get_lp_shares, load_share_table
from rewarder.store import SnapshotStore
from rewarder.tree_builder import TreeBuilder
from rewarder.writer import Writer


def now_timestamp() -> int:
    return int(datetime.datetime.now(tz=datetime.timezone.utc).timestamp())


def fetch_shares(
    shares_path: Optional[str], pool: str, block: Optional[int]
) -> ShareTable:
    if shares_path:
        return load_share_table(shares_path)
    if block is not None:
        print(f"🔎 Fetching LP shares for {pool} at block {block}")
        return get_lp_shares(pool, block)
    raise ValueError("Pass either a shares file or a block to query")


def distributions_for_pool(
    distributions: list[Distribution], pool: EthereumAddress
) -> list[Distribution]:
    pool = eth.to_checksum_address(pool)
    return [d for d in distributions if d.pool == pool]


def run_tree_update(
    config_path: str,
    distributions_path: str,
    pool: str,
    shares_path: Optional[str] = None,
    block: Optional[int] = None,
    now: Optional[int] = None,
) -> TreeSnapshot:
    """
    Generate the next rewards tree for `pool`: cumulative amounts for every distribution funding the
    pool up to the current epoch, split across its LPs by share, stored in the tree history and
    written out for review. The shares file, when given, must hold the shares of `pool`.
    """

    # load the configuration file
    config = load_conf(config_path)
    clock = EpochClock(config.seconds_per_epoch)

    now = now if now is not None else now_timestamp()
    as_of_epoch = clock.epoch_index(now)
    print(f"⚗ Building tree as of epoch {as_of_epoch} ({clock.boundary(as_of_epoch).start_date})...")

    distributions = distributions_for_pool(load_distributions(distributions_path), pool)
    print(f"📦 {len(distributions)} distributions fund pool {pool}")
    shares = fetch_shares(shares_path, pool, block)

    store = SnapshotStore(config.db_path)
    snapshot = TreeBuilder(clock, store).build(
        shares, distributions, as_of_epoch, created_at=now
    )

    Writer(config.db_path, as_of_epoch).write_snapshot(snapshot)
    print(
        f"🚀🚀🚀 Successfully generated tree {snapshot.root}, check it and propose the root"
    )
    return snapshot
