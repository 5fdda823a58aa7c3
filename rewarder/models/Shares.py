from __future__ import annotations

import eth_utils as eth
from pydantic import BaseModel, field_validator

from rewarder.models.types import EthereumAddress


class ShareTable(BaseModel):
    """
    Opaque liquidity weights per LP, supplied by whoever computes pool positions.
    Only the ratios matter: each LP is paid `share / total_shares` of every token.
    """

    shares: dict[EthereumAddress, int]

    @field_validator("shares")
    @classmethod
    def validate_shares(cls, shares: dict[str, int]) -> dict[str, int]:
        checksummed: dict[str, int] = {}
        for addr, share in shares.items():
            if share < 0:
                raise ValueError(f"Negative share for {addr}")
            key = eth.to_checksum_address(addr)
            # the same LP passed in two casings is one LP
            checksummed[key] = checksummed.get(key, 0) + share
        return checksummed

    @property
    def total_shares(self) -> int:
        return sum(self.shares.values())

    def __len__(self) -> int:
        return len(self.shares)
