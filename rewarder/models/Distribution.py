from __future__ import annotations

import eth_utils as eth
from pydantic import BaseModel, ConfigDict, field_validator

from rewarder.errors import InvalidAmountError, InvalidDurationError
from rewarder.models.types import DistributionId, EthereumAddress


class DistributionRequest(BaseModel):
    """
    What an incentive provider submits when funding a pool.
    :param `pool`: the liquidity pool (vault) whose LPs earn the rewards
    :param `rewardToken`: token paid out, must be whitelisted
    :param `amount`: total tokens escrowed, before protocol fees
    :param `startTimestamp`: first second of the distribution, must sit on an epoch boundary
    :param `endTimestamp`: exclusive end of the distribution
    """

    pool: EthereumAddress
    rewardToken: EthereumAddress
    amount: int
    startTimestamp: int
    endTimestamp: int

    @field_validator("pool", "rewardToken")
    @classmethod
    def checksum_address(cls, addr: str) -> str:
        return eth.to_checksum_address(addr)


class Distribution(BaseModel):
    """
    A creator-funded reward stream of one token over a fixed epoch range.
    Immutable once recorded, and never removed: expired distributions still back historical claims.

    :param `id`: keccak of the creator and its distribution nonce
    :param `totalAmount`: tokens streamed over the whole range, net of protocol fees
    :param `startEpoch`: first epoch the distribution pays out in
    :param `epochCount`: number of epochs, the distribution is active in `[startEpoch, startEpoch + epochCount)`
    """

    model_config = ConfigDict(frozen=True)

    id: DistributionId
    creator: EthereumAddress
    pool: EthereumAddress
    rewardToken: EthereumAddress
    totalAmount: int
    startEpoch: int
    epochCount: int

    @field_validator("creator", "pool", "rewardToken")
    @classmethod
    def checksum_address(cls, addr: str) -> str:
        return eth.to_checksum_address(addr)

    @field_validator("totalAmount")
    @classmethod
    def validate_amount(cls, amount: int) -> int:
        if amount <= 0:
            raise InvalidAmountError(f"Distribution amount must be positive, got {amount}")
        return amount

    @field_validator("epochCount")
    @classmethod
    def validate_epoch_count(cls, count: int) -> int:
        if count <= 0:
            raise InvalidDurationError(f"Distribution must span at least one epoch, got {count}")
        return count

    @property
    def endEpoch(self) -> int:
        return self.startEpoch + self.epochCount

    @property
    def amountPerEpoch(self) -> int:
        # truncation here is the only precision loss, at most epochCount - 1 units overall
        return self.totalAmount // self.epochCount

    def is_active(self, epoch: int) -> bool:
        return self.startEpoch <= epoch < self.endEpoch

    def elapsed_epochs(self, from_epoch: int, to_epoch: int) -> int:
        """Epochs of `[from_epoch, to_epoch)` that fall inside this distribution's own range"""
        start = max(from_epoch, self.startEpoch)
        end = min(to_epoch, self.endEpoch)
        return max(end - start, 0)

    def disbursement(self, from_epoch: int, to_epoch: int) -> int:
        return self.amountPerEpoch * self.elapsed_epochs(from_epoch, to_epoch)
