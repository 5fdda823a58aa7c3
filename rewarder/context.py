from __future__ import annotations

from dataclasses import dataclass, field

from rewarder.epoch import EpochClock
from rewarder.ledger import TokenLedger, TokenWhitelist
from rewarder.models import (
    ClaimRecord,
    Distribution,
    DistributionId,
    EthereumAddress,
    RewarderConfig,
    RootState,
)


@dataclass
class RewarderContext:
    """
    All mutable rewarder state, passed explicitly to every component.
    Separate contexts never share state, so independent instances can run side by side.

    :param `distributions`: every distribution ever created, in creation order
    :param `nonces`: count of distributions created per creator, feeds the distribution id
    :param `root`: the governor's two-root state
    :param `claims`: settled amounts keyed by (recipient, token)
    """

    config: RewarderConfig
    token_ledger: TokenLedger
    whitelist: TokenWhitelist
    clock: EpochClock
    distributions: dict[DistributionId, Distribution] = field(default_factory=dict)
    nonces: dict[EthereumAddress, int] = field(default_factory=dict)
    root: RootState = field(default_factory=RootState)
    claims: dict[tuple[EthereumAddress, EthereumAddress], ClaimRecord] = field(
        default_factory=dict
    )

    @staticmethod
    def from_config(config: RewarderConfig, token_ledger: TokenLedger) -> RewarderContext:
        return RewarderContext(
            config=config,
            token_ledger=token_ledger,
            whitelist=TokenWhitelist(config.whitelist),
            clock=EpochClock(config.seconds_per_epoch),
            root=RootState(disputePeriodSeconds=config.dispute_period),
        )
