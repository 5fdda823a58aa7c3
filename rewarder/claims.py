from typing import Optional, Sequence

import eth_utils as eth

from rewarder.context import RewarderContext
from rewarder.errors import InvalidProofError, NothingToClaimError
from rewarder.governor import RootGovernor
from rewarder.merkle import hash_leaf, verify_proof
from rewarder.models import (
    ClaimRecord,
    ClaimRequest,
    EthereumAddress,
    MerkleLeaf,
    ProofStep,
)


class ClaimProcessor:
    """
    Settles merkle claims against the governing root.

    Leaves carry cumulative entitlements, so each claim pays only the difference to what was already
    settled for that (recipient, token). Claiming the same leaf twice, or an older leaf after a newer
    one, pays nothing.
    """

    def __init__(self, ctx: RewarderContext, governor: Optional[RootGovernor] = None):
        self.ctx = ctx
        self.governor = governor or RootGovernor(ctx)

    def claimed(self, recipient: EthereumAddress, token: EthereumAddress) -> ClaimRecord:
        key = (eth.to_checksum_address(recipient), eth.to_checksum_address(token))
        return self.ctx.claims.get(key) or ClaimRecord(recipient=key[0], rewardToken=key[1])

    def claim(
        self,
        recipient: EthereumAddress,
        reward_token: EthereumAddress,
        cumulative_amount: int,
        proof: Sequence[ProofStep],
        now: Optional[int] = None,
    ) -> int:
        """
        Verify and pay out a claim, returning the amount transferred.
        Passing `now` lets a pending root whose window has elapsed activate before verification.
        """
        if now is not None:
            self.governor.tick(now)

        leaf = MerkleLeaf(
            recipient=recipient, rewardToken=reward_token, cumulativeAmount=cumulative_amount
        )
        root = self.governor.get_governing_root()
        try:
            valid = verify_proof(hash_leaf(leaf), proof, root)
        except ValueError as e:
            raise InvalidProofError(f"Malformed proof: {e}")
        if not valid:
            raise InvalidProofError(
                f"Proof for {leaf.recipient} / {leaf.rewardToken} does not match root {root}"
            )

        record = self.claimed(leaf.recipient, leaf.rewardToken)
        if leaf.cumulativeAmount <= record.amountAlreadyPaid:
            raise NothingToClaimError(
                f"{leaf.recipient} already claimed {record.amountAlreadyPaid} of {leaf.rewardToken}"
            )

        payout = leaf.cumulativeAmount - record.amountAlreadyPaid
        # a failed transfer propagates and leaves the record untouched
        self.ctx.token_ledger.transfer_out(leaf.rewardToken, leaf.recipient, payout)
        self.ctx.claims[(leaf.recipient, leaf.rewardToken)] = record.model_copy(
            update={"amountAlreadyPaid": leaf.cumulativeAmount}
        )
        return payout

    def submit(self, request: ClaimRequest, now: Optional[int] = None) -> int:
        return self.claim(
            request.recipient,
            request.rewardToken,
            request.cumulativeAmount,
            request.proof,
            now=now,
        )
