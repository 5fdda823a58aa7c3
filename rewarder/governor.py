from typing import Optional

from rewarder.context import RewarderContext
from rewarder.errors import BadConfigException, EmptyRootError, ZeroDisputePeriodError
from rewarder.models import NO_ROOT, Bytes32, RootStatus


class RootGovernor:
    """
    Dispute period state machine over the context's `RootState`.

    A proposed root waits `disputePeriodSeconds` before it governs claims. Disputing a root means
    never promoting it: governance proposes a corrected root inside the window, displacing the bad one.
    Time only moves when a caller passes it in, the governor never reads a clock of its own.
    """

    def __init__(self, ctx: RewarderContext):
        self.ctx = ctx

    @property
    def status(self) -> RootStatus:
        return self.ctx.root.status

    @property
    def latest_proposed_root(self) -> Optional[Bytes32]:
        return self.ctx.root.pendingRoot

    def set_dispute_period(self, seconds: int) -> None:
        """Applies to roots proposed from now on, a root already in review keeps its activation time"""
        if seconds < 0:
            raise BadConfigException("Dispute period cannot be negative")
        self.ctx.root = self.ctx.root.model_copy(update={"disputePeriodSeconds": seconds})

    def propose(self, new_root: Bytes32, proposed_at: int) -> None:
        """Queue `new_root` for review, replacing any root still waiting and restarting the timer"""
        period = self.ctx.root.disputePeriodSeconds
        if period == 0:
            raise ZeroDisputePeriodError("Set a dispute period before proposing roots")
        # a tree with no leaves hashes to the sentinel, promoting it would revoke the active root
        if new_root.lower() == NO_ROOT:
            raise EmptyRootError("Cannot propose the empty root, the tree has no leaves")
        self.ctx.root = self.ctx.root.model_copy(
            update={
                "pendingRoot": new_root.lower(),
                "proposedAt": proposed_at,
                "readyAt": proposed_at + period,
            }
        )

    def tick(self, now: int) -> RootStatus:
        """Promote the pending root once its window has fully elapsed. Safe to call at any time."""
        state = self.ctx.root
        if state.is_ready(now):
            self.ctx.root = state.model_copy(
                update={
                    "activeRoot": state.pendingRoot,
                    "pendingRoot": None,
                    "proposedAt": None,
                    "readyAt": None,
                }
            )
        return self.status

    def get_governing_root(self, now: Optional[int] = None) -> Bytes32:
        """
        The root claims are verified against, or `NO_ROOT` before anything was activated.
        `now` is ignored: state only advances through `tick`.
        """
        return self.ctx.root.activeRoot

    def has_governing_root(self) -> bool:
        return self.ctx.root.activeRoot != NO_ROOT
