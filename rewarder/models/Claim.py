import eth_utils as eth
from pydantic import BaseModel, field_validator

from rewarder.models.types import EthereumAddress


class ClaimRecord(BaseModel):
    """
    Settlement history of one (recipient, token) pair.
    :param `amountAlreadyPaid`: the cumulative leaf amount last settled. Only ever increases.
    """

    recipient: EthereumAddress
    rewardToken: EthereumAddress
    amountAlreadyPaid: int = 0

    @field_validator("recipient", "rewardToken")
    @classmethod
    def checksum_address(cls, addr: str) -> str:
        return eth.to_checksum_address(addr)
