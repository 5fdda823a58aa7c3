from __future__ import annotations

from enum import Enum
from typing import Optional

import eth_utils as eth
from pydantic import BaseModel, ConfigDict, field_validator

from rewarder.models.types import Bytes32, EthereumAddress


class MerkleLeaf(BaseModel):
    """
    Entitlement of a single recipient in a single token.
    :param `cumulativeAmount`: total amount ever owed as of tree generation, not the increment
    since the last tree. Regenerating a tree supersedes earlier leaves rather than adding to them.
    """

    model_config = ConfigDict(frozen=True)

    recipient: EthereumAddress
    rewardToken: EthereumAddress
    cumulativeAmount: int

    @field_validator("recipient", "rewardToken")
    @classmethod
    def checksum_address(cls, addr: str) -> str:
        return eth.to_checksum_address(addr)

    @field_validator("cumulativeAmount")
    @classmethod
    def validate_amount(cls, amount: int) -> int:
        if amount < 0:
            raise ValueError("Leaf amount cannot be negative")
        return amount

    @property
    def sort_key(self) -> tuple[bytes, bytes]:
        """Canonical (recipient, token) byte order used before hashing"""
        return (
            eth.to_canonical_address(self.recipient),
            eth.to_canonical_address(self.rewardToken),
        )


class ProofPosition(str, Enum):
    """Which side of the running hash the sibling sat on when the tree was built"""

    LEFT = "left"
    RIGHT = "right"


class ProofStep(BaseModel):
    sibling: Bytes32
    position: ProofPosition


class TreeSnapshot(BaseModel):
    """
    An immutable, stored generation of the rewards tree.
    :param `root`: hex encoded merkle root
    :param `leafHashes`: hashes in canonical leaf order, enough to rebuild the tree for proofs
    :param `leaves`: the (recipient, token, cumulative amount) records behind `leafHashes`
    :param `generatedAtEpoch`: epoch the cumulative amounts were computed up to
    :param `createdAt`: unix timestamp the snapshot was generated at
    """

    model_config = ConfigDict(frozen=True)

    root: Bytes32
    leafHashes: list[Bytes32]
    leaves: list[MerkleLeaf]
    generatedAtEpoch: int
    createdAt: int

    def find_leaf(
        self, recipient: EthereumAddress, token: EthereumAddress
    ) -> Optional[MerkleLeaf]:
        recipient = eth.to_checksum_address(recipient)
        token = eth.to_checksum_address(token)
        for leaf in self.leaves:
            if leaf.recipient == recipient and leaf.rewardToken == token:
                return leaf
        return None


class ClaimRequest(BaseModel):
    """Everything a recipient submits to settle one leaf"""

    recipient: EthereumAddress
    rewardToken: EthereumAddress
    cumulativeAmount: int
    proof: list[ProofStep]
    root: Bytes32
