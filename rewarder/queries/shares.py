import json
from typing import Literal, Union

from rewarder.env import SUBGRAPHS
from rewarder.models import EthereumAddress, ShareTable
from rewarder.queries import common

# {"account": {"id": "0x...0000"}, "shares": "1000"}
LPShareGraphQLReturn = list[dict[Literal["account", "shares"], Union[dict, str]]]


def get_lp_share_positions(pool: EthereumAddress, block: int) -> LPShareGraphQLReturn:
    """Every account holding a nonzero share balance of the pool at `block`"""
    query = """
        query($pool: String, $block: Int, $skip: Int) {
            hypervisorShares(
                block: {number: $block}
                where: {hypervisor: $pool, shares_gt: 0}
                orderBy: shares
                orderDirection: desc
                first: 1000
                skip: $skip
            ) {
                account {
                    id
                }
                shares
            }
        }
    """
    variables = {"pool": pool.lower(), "block": block, "skip": 0}

    return common.graphql_iterate_query(
        SUBGRAPHS.lp_shares(),
        ["hypervisorShares"],
        dict(query=query, variables=variables),
    )


def positions_to_share_table(positions: LPShareGraphQLReturn) -> ShareTable:
    shares: dict[str, int] = {}
    for p in positions:
        account = p["account"]["id"]
        shares[account] = shares.get(account, 0) + int(p["shares"])
    return ShareTable(shares=shares)


def get_lp_shares(pool: EthereumAddress, block: int) -> ShareTable:
    return positions_to_share_table(get_lp_share_positions(pool, block))


def load_share_table(path: str) -> ShareTable:
    """Reads a `{address: shares}` JSON file"""
    with open(path) as j:
        shares = json.load(j)
    return ShareTable(shares={addr: int(s) for addr, s in shares.items()})
