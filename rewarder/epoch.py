import datetime
from dataclasses import dataclass
from typing import NamedTuple


class EpochBoundary(NamedTuple):
    index: int
    start_timestamp: int
    end_timestamp: int

    @property
    def start_date(self) -> datetime.datetime:
        return datetime.datetime.fromtimestamp(
            self.start_timestamp, tz=datetime.timezone.utc
        )


@dataclass(frozen=True)
class EpochClock:
    """
    Converts unix timestamps to fixed width epochs.

    Every component rounds through the same clock: recomputing epochs from raw timestamps elsewhere
    lets tree generation and on-chain settlement drift apart at epoch boundaries.
    """

    seconds_per_epoch: int

    def epoch_index(self, timestamp: int) -> int:
        return timestamp // self.seconds_per_epoch

    def epoch_start(self, timestamp: int) -> int:
        return self.epoch_index(timestamp) * self.seconds_per_epoch

    def timestamp_of(self, epoch: int) -> int:
        """First second of `epoch`"""
        return epoch * self.seconds_per_epoch

    def is_boundary(self, timestamp: int) -> bool:
        return timestamp % self.seconds_per_epoch == 0

    def elapsed_epochs(self, from_timestamp: int, to_timestamp: int) -> int:
        """Epoch boundaries crossed going from `from_timestamp` to `to_timestamp`, never negative"""
        return max(self.epoch_index(to_timestamp) - self.epoch_index(from_timestamp), 0)

    def boundary(self, epoch: int) -> EpochBoundary:
        start = self.timestamp_of(epoch)
        return EpochBoundary(epoch, start, start + self.seconds_per_epoch - 1)
