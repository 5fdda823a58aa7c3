from typing import Iterator, Optional

import eth_utils as eth
from eth_abi.packed import encode_packed

from rewarder.context import RewarderContext
from rewarder.errors import (
    InvalidAmountError,
    InvalidDurationError,
    NotWhitelistedError,
    StaleStartError,
    UnknownDistributionError,
)
from rewarder.models import (
    FEE_BASE,
    Distribution,
    DistributionId,
    DistributionRequest,
    EthereumAddress,
)


def distribution_id(creator: EthereumAddress, nonce: int) -> DistributionId:
    """keccak256(abi.encodePacked(creator, nonce))"""
    packed = encode_packed(["address", "uint256"], [eth.to_checksum_address(creator), nonce])
    return eth.encode_hex(eth.keccak(packed))


class ActiveDistributions:
    """
    Distributions active in a given epoch, optionally restricted to one pool.
    Evaluated lazily on each iteration, so the same object can be walked more than once.
    """

    def __init__(
        self,
        distributions: dict[DistributionId, Distribution],
        epoch: int,
        pool: Optional[EthereumAddress] = None,
    ):
        self._distributions = distributions
        self.epoch = epoch
        self.pool = eth.to_checksum_address(pool) if pool else None

    def __iter__(self) -> Iterator[Distribution]:
        for d in list(self._distributions.values()):
            if not d.is_active(self.epoch):
                continue
            if self.pool is not None and d.pool != self.pool:
                continue
            yield d


class DistributionLedger:
    """Records reward distributions and computes how much of each has been streamed"""

    def __init__(self, ctx: RewarderContext):
        self.ctx = ctx

    def _validate_window(self, request: DistributionRequest, now: int) -> tuple[int, int]:
        clock = self.ctx.clock
        duration = request.endTimestamp - request.startTimestamp

        if duration <= 0:
            raise InvalidDurationError("Distribution must end after it starts")
        if not clock.is_boundary(request.startTimestamp):
            raise InvalidDurationError(
                f"Start {request.startTimestamp} is not on an epoch boundary"
            )
        if duration % clock.seconds_per_epoch != 0:
            raise InvalidDurationError(
                f"Duration {duration} is not a whole number of {clock.seconds_per_epoch}s epochs"
            )
        if duration > self.ctx.config.max_distribution_duration:
            raise InvalidDurationError(
                f"Duration {duration} exceeds max of {self.ctx.config.max_distribution_duration}"
            )

        start_epoch = clock.epoch_index(request.startTimestamp)
        if start_epoch < clock.epoch_index(now):
            raise StaleStartError(
                f"Distribution starts in epoch {start_epoch}, current epoch is {clock.epoch_index(now)}"
            )
        return start_epoch, duration // clock.seconds_per_epoch

    def create(
        self, request: DistributionRequest, creator: EthereumAddress, now: int
    ) -> DistributionId:
        """
        Validate and record a distribution, escrowing its tokens from `creator`.
        Nothing is recorded if validation or either transfer fails. The fee leg runs after escrow,
        so a failed fee transfer returns the escrowed amount to `creator` before propagating.
        """
        creator = eth.to_checksum_address(creator)

        if request.amount <= 0:
            raise InvalidAmountError(f"Distribution amount must be positive, got {request.amount}")
        if request.rewardToken not in self.ctx.whitelist:
            raise NotWhitelistedError(request.rewardToken)

        start_epoch, epoch_count = self._validate_window(request, now)

        fee = request.amount * self.ctx.config.protocol_fee // FEE_BASE
        nonce = self.ctx.nonces.get(creator, 0)
        distribution = Distribution(
            id=distribution_id(creator, nonce),
            creator=creator,
            pool=request.pool,
            rewardToken=request.rewardToken,
            totalAmount=request.amount - fee,
            startEpoch=start_epoch,
            epochCount=epoch_count,
        )

        # transfer failures propagate before anything is recorded
        self.ctx.token_ledger.transfer_in(request.rewardToken, creator, request.amount)
        if fee > 0:
            try:
                self.ctx.token_ledger.transfer_out(
                    request.rewardToken, self.ctx.config.fee_recipient, fee
                )
            except Exception:
                self.ctx.token_ledger.transfer_out(request.rewardToken, creator, request.amount)
                raise

        self.ctx.distributions[distribution.id] = distribution
        self.ctx.nonces[creator] = nonce + 1
        return distribution.id

    def get(self, id: DistributionId) -> Distribution:
        try:
            return self.ctx.distributions[id]
        except KeyError:
            raise UnknownDistributionError(id)

    def all(self) -> list[Distribution]:
        return list(self.ctx.distributions.values())

    def count(self) -> int:
        return len(self.ctx.distributions)

    def distribution_id(self, index: int) -> DistributionId:
        """Id of the `index`-th distribution ever created"""
        return self.all()[index].id

    def disbursement_for_window(
        self, id: DistributionId, from_timestamp: int, to_timestamp: int
    ) -> int:
        """
        Tokens streamed by a distribution between two timestamps.
        Both ends are rounded down to their epoch and the window is clamped to the distribution's range.
        """
        clock = self.ctx.clock
        return self.get(id).disbursement(
            clock.epoch_index(from_timestamp), clock.epoch_index(to_timestamp)
        )

    def active_distributions(self, at_epoch: int) -> ActiveDistributions:
        return ActiveDistributions(self.ctx.distributions, at_epoch)

    def distributions_for_epoch(
        self, pool: EthereumAddress, epoch: int
    ) -> ActiveDistributions:
        return ActiveDistributions(self.ctx.distributions, epoch, pool)
