from __future__ import annotations

from typing import Optional

import eth_utils as eth
from pydantic import BaseModel, field_validator, model_validator

from rewarder.errors import BadConfigException
from rewarder.models.types import EthereumAddress

# protocol fees are expressed in parts per billion
FEE_BASE = 10**9

ONE_HOUR = 3600
ONE_YEAR = 365 * 24 * ONE_HOUR


class RewarderConfig(BaseModel):
    """
    Parameters governing distribution accounting and root governance.
    :param `seconds_per_epoch`: width of a single epoch, shared by every component
    :param `max_distribution_duration`: longest window (in seconds) a distribution can run for
    :param `dispute_period`: seconds a proposed root must wait before activation. 0 means unset.
    :param `protocol_fee`: fee taken on distribution creation, in parts per `FEE_BASE`
    :param `fee_recipient`: receives the protocol fee
    :param `whitelist`: reward tokens accepted at startup
    :param `db_path`: directory holding the tree history
    """

    seconds_per_epoch: int = ONE_HOUR
    max_distribution_duration: int = ONE_YEAR
    dispute_period: int = 0
    protocol_fee: int = 0
    fee_recipient: Optional[EthereumAddress] = None
    whitelist: list[EthereumAddress] = []
    db_path: str = "reports"

    @field_validator("seconds_per_epoch")
    @classmethod
    def validate_epoch_width(cls, seconds: int) -> int:
        if seconds <= 0:
            raise BadConfigException("Epoch width must be positive")
        return seconds

    @field_validator("max_distribution_duration")
    @classmethod
    def validate_max_duration(cls, seconds: int) -> int:
        if seconds <= 0:
            raise BadConfigException("Max distribution duration must be positive")
        return seconds

    @field_validator("dispute_period")
    @classmethod
    def validate_dispute_period(cls, seconds: int) -> int:
        if seconds < 0:
            raise BadConfigException("Dispute period cannot be negative")
        return seconds

    @field_validator("protocol_fee")
    @classmethod
    def validate_protocol_fee(cls, fee: int) -> int:
        if fee < 0 or fee >= FEE_BASE:
            raise BadConfigException("Protocol fee out of range")
        return fee

    @field_validator("fee_recipient")
    @classmethod
    def checksum_fee_recipient(cls, addr: Optional[str]) -> Optional[str]:
        return eth.to_checksum_address(addr) if addr else None

    @field_validator("whitelist")
    @classmethod
    def checksum_whitelist(cls, tokens: list[str]) -> list[str]:
        return [eth.to_checksum_address(t) for t in tokens]

    @model_validator(mode="after")
    def ensure_recipient_if_fee(self) -> RewarderConfig:
        if self.protocol_fee > 0 and not self.fee_recipient:
            raise BadConfigException("Must provide a fee recipient if charging a fee")
        if self.max_distribution_duration < self.seconds_per_epoch:
            raise BadConfigException("Max distribution duration is shorter than an epoch")
        return self
