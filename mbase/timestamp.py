"""UTC timestamps with microsecond resolution."""

from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import datetime, timedelta

MICRO_SECONDS_PER_SECOND = 1000 * 1000

_EPOCH = datetime(1970, 1, 1)


def _cdiv(a: int, b: int) -> int:
    """Integer division truncating toward zero."""
    q = abs(a) // abs(b)
    return q if (a < 0) == (b < 0) else -q


def _cmod(a: int, b: int) -> int:
    """Remainder whose sign follows the dividend."""
    return a - b * _cdiv(a, b)


@dataclass(frozen=True, order=True)
class Timestamp:
    """A point in time, in microseconds since the Unix epoch (UTC).

    A timestamp of zero or less is considered invalid.
    """

    micro_seconds_since_epoch: int = 0

    @classmethod
    def now(cls) -> Timestamp:
        """Return the current time."""
        return cls(time.time_ns() // 1000)

    @classmethod
    def invalid(cls) -> Timestamp:
        """Return an invalid timestamp."""
        return cls()

    @classmethod
    def from_unix_time(cls, t: int, microseconds: int = 0) -> Timestamp:
        """Build a timestamp from seconds since the epoch plus microseconds."""
        return cls(int(t) * MICRO_SECONDS_PER_SECOND + microseconds)

    def valid(self) -> bool:
        return self.micro_seconds_since_epoch > 0

    def seconds_since_epoch(self) -> int:
        return _cdiv(self.micro_seconds_since_epoch, MICRO_SECONDS_PER_SECOND)

    def to_string(self) -> str:
        """Format as ``seconds.microseconds``."""
        seconds = _cdiv(self.micro_seconds_since_epoch, MICRO_SECONDS_PER_SECOND)
        micro = _cmod(self.micro_seconds_since_epoch, MICRO_SECONDS_PER_SECOND)
        return f"{seconds}.{micro:06d}"

    def to_formatted_string(self, show_microseconds: bool = True) -> str:
        """Format as ``YYYYMMDD HH:MM:SS[.uuuuuu]`` in UTC."""
        seconds = self.seconds_since_epoch()
        moment = _EPOCH + timedelta(seconds=seconds)
        text = (
            f"{moment.year:4d}{moment.month:02d}{moment.day:02d} "
            f"{moment.hour:02d}:{moment.minute:02d}:{moment.second:02d}"
        )
        if show_microseconds:
            micro = _cmod(self.micro_seconds_since_epoch, MICRO_SECONDS_PER_SECOND)
            text += f".{micro:06d}"
        return text

    def __str__(self) -> str:
        return self.to_string()


def time_difference(high: Timestamp, low: Timestamp) -> float:
    """Return ``high - low`` in seconds."""
    diff = high.micro_seconds_since_epoch - low.micro_seconds_since_epoch
    return diff / MICRO_SECONDS_PER_SECOND


def add_time(timestamp: Timestamp, seconds: float) -> Timestamp:
    """Return ``timestamp`` moved forward by ``seconds``."""
    delta = int(seconds * MICRO_SECONDS_PER_SECOND)
    return Timestamp(timestamp.micro_seconds_since_epoch + delta)