from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel

from rewarder.models.types import Bytes32, NO_ROOT


class RootStatus(str, Enum):
    """
    :state EMPTY: no root has ever been proposed
    :state PENDING_REVIEW: a root has been proposed and its dispute window is running
    :state ACTIVE: the last proposed root has been promoted and governs claims
    """

    EMPTY = "empty"
    PENDING_REVIEW = "pending_review"
    ACTIVE = "active"


class RootState(BaseModel):
    """
    The two-root state held by the governor.
    The active root keeps governing claims while a newer root sits in review.
    """

    activeRoot: Bytes32 = NO_ROOT
    pendingRoot: Optional[Bytes32] = None
    proposedAt: Optional[int] = None
    # fixed when the root is proposed, later period changes only apply to new proposals
    readyAt: Optional[int] = None
    disputePeriodSeconds: int = 0

    @property
    def status(self) -> RootStatus:
        if self.pendingRoot is not None:
            return RootStatus.PENDING_REVIEW
        if self.activeRoot != NO_ROOT:
            return RootStatus.ACTIVE
        return RootStatus.EMPTY

    def is_ready(self, now: int) -> bool:
        return (
            self.pendingRoot is not None and self.readyAt is not None and now >= self.readyAt
        )
