"""Timestamp source shared by repositories."""

from datetime import datetime, timedelta, timezone
from typing import Callable


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class MonotonicClock:
    """Wraps a clock so successive readings strictly increase.

    Two writes landing in the same clock tick still get distinct,
    ordered timestamps, which keeps ``updated_at`` moving forward on
    every mutation.
    """

    def __init__(self, clock: Callable[[], datetime] = utcnow):
        self._clock = clock
        self._last: datetime | None = None

    def __call__(self) -> datetime:
        now = self._clock()
        if self._last is not None and now <= self._last:
            now = self._last + timedelta(microseconds=1)
        self._last = now
        return now
