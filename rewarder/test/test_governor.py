import pytest

from rewarder.context import RewarderContext
from rewarder.errors import BadConfigException, EmptyRootError, ZeroDisputePeriodError
from rewarder.governor import RootGovernor
from rewarder.ledger import InMemoryTokenLedger
from rewarder.merkle import MerkleTree
from rewarder.models import NO_ROOT, RewarderConfig, RootStatus

R1 = "0x" + "11" * 32
R2 = "0x" + "22" * 32
R3 = "0x" + "33" * 32


def test_starts_empty(governor: RootGovernor):
    assert governor.status == RootStatus.EMPTY
    assert governor.get_governing_root() == NO_ROOT
    assert not governor.has_governing_root()
    assert governor.latest_proposed_root is None


def test_dispute_window(governor: RootGovernor, ctx: RewarderContext):
    assert ctx.root.disputePeriodSeconds == 3600
    governor.propose(R1, 0)
    assert governor.status == RootStatus.PENDING_REVIEW
    assert governor.latest_proposed_root == R1

    assert governor.tick(3599) == RootStatus.PENDING_REVIEW
    assert governor.get_governing_root() == NO_ROOT

    assert governor.tick(3600) == RootStatus.ACTIVE
    assert governor.get_governing_root() == R1
    assert governor.latest_proposed_root is None


def test_tick_is_idempotent(governor: RootGovernor, ctx: RewarderContext):
    governor.propose(R1, 0)
    governor.tick(3600)
    state = ctx.root

    governor.tick(3600)
    governor.tick(100_000)
    assert ctx.root == state


def test_tick_without_proposal_is_noop(governor: RootGovernor, ctx: RewarderContext):
    state = ctx.root
    assert governor.tick(10**9) == RootStatus.EMPTY
    assert ctx.root == state


def test_query_does_not_advance(governor: RootGovernor):
    governor.propose(R1, 0)
    # window has elapsed, but nobody called tick
    assert governor.get_governing_root(now=10_000) == NO_ROOT
    assert governor.status == RootStatus.PENDING_REVIEW
    assert governor.ctx.root.is_ready(10_000)


def test_active_root_governs_during_next_review(governor: RootGovernor):
    governor.propose(R1, 0)
    governor.tick(3600)

    governor.propose(R2, 4000)
    assert governor.status == RootStatus.PENDING_REVIEW
    assert governor.get_governing_root() == R1

    governor.tick(7599)
    assert governor.get_governing_root() == R1

    governor.tick(7600)
    assert governor.get_governing_root() == R2


def test_new_proposal_displaces_pending_and_resets_timer(governor: RootGovernor):
    governor.propose(R1, 0)
    # R1 is disputed, governance proposes a correction inside the window
    governor.propose(R2, 3000)

    governor.tick(3600)
    assert governor.get_governing_root() == NO_ROOT
    assert governor.latest_proposed_root == R2

    governor.tick(6600)
    assert governor.get_governing_root() == R2


def test_roots_are_normalised(governor: RootGovernor):
    governor.propose("0x" + "AB" * 32, 0)
    governor.tick(3600)
    assert governor.get_governing_root() == "0x" + "ab" * 32


def test_zero_dispute_period(token_ledger: InMemoryTokenLedger):
    governor = RootGovernor(RewarderContext.from_config(RewarderConfig(), token_ledger))
    with pytest.raises(ZeroDisputePeriodError):
        governor.propose(R1, 0)

    governor.set_dispute_period(60)
    governor.propose(R1, 0)
    governor.tick(60)
    assert governor.get_governing_root() == R1


def test_negative_dispute_period(governor: RootGovernor):
    with pytest.raises(BadConfigException):
        governor.set_dispute_period(-1)


def test_independent_contexts(config: RewarderConfig, token_ledger: InMemoryTokenLedger):
    first = RootGovernor(RewarderContext.from_config(config, token_ledger))
    second = RootGovernor(RewarderContext.from_config(config, token_ledger))

    first.propose(R3, 0)
    first.tick(3600)
    assert first.get_governing_root() == R3
    assert second.get_governing_root() == NO_ROOT


@pytest.mark.parametrize("empty_root", [NO_ROOT, MerkleTree([]).hex_root, "0X" + "00" * 32])
def test_empty_tree_root_never_replaces_active(governor: RootGovernor, empty_root):
    governor.set_dispute_period(10)
    governor.propose(R1, 0)
    assert governor.tick(10) == RootStatus.ACTIVE

    with pytest.raises(EmptyRootError):
        governor.propose(empty_root, 20)

    governor.tick(30)
    assert governor.get_governing_root() == R1
    assert governor.status == RootStatus.ACTIVE
    assert governor.latest_proposed_root is None


def test_empty_root_rejected_before_any_activation(governor: RootGovernor):
    with pytest.raises(EmptyRootError):
        governor.propose(MerkleTree([]).hex_root, 0)
    assert governor.status == RootStatus.EMPTY


def test_period_change_keeps_pending_activation_time(governor: RootGovernor):
    governor.propose(R1, 0)

    # shortening the period does not let the pending root skip its review
    governor.set_dispute_period(60)
    assert governor.tick(60) == RootStatus.PENDING_REVIEW
    assert governor.tick(3600) == RootStatus.ACTIVE
    assert governor.get_governing_root() == R1

    # the new period applies to the next proposal
    governor.propose(R2, 4000)
    governor.tick(4060)
    assert governor.get_governing_root() == R2
