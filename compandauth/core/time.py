"""Time helpers and injectable clocks.

Everything here is UTC. Timeout CAAs take a ``Clock`` at construction so
tests can pin the current instant without patching globals:

    clock = FrozenClock(datetime(2024, 1, 1, tzinfo=timezone.utc))
    caa = TimeoutCAA(clock=clock)
    token = caa.issue()
    clock.advance(31)
"""

from __future__ import annotations

import math
from datetime import datetime, timedelta, timezone
from typing import Optional, Protocol, Union

Duration = Union[timedelta, int, float]


def utcnow() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def to_unix(dt: datetime) -> int:
    """Convert a datetime to whole Unix seconds.

    Naive datetimes are assumed to already be in UTC.
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return math.floor(dt.timestamp())


def to_seconds(duration: Duration) -> int:
    """Convert a duration into whole seconds, truncating toward zero.

    Args:
        duration: A ``timedelta`` or a number of seconds.

    Returns:
        Integer seconds, e.g. ``timedelta(seconds=1.9)`` -> 1 and
        ``timedelta(seconds=-1.9)`` -> -1.
    """
    if isinstance(duration, timedelta):
        duration = duration.total_seconds()
    if isinstance(duration, bool) or not isinstance(duration, (int, float)):
        raise TypeError(f"Expected timedelta or number of seconds, got {type(duration).__name__}")
    return int(duration)


class Clock(Protocol):
    """Source of the current instant."""

    def now(self) -> datetime:
        """Return the current instant as an aware UTC datetime."""
        ...


class SystemClock:
    """Wall clock, forced to UTC so servers in different zones agree."""

    def now(self) -> datetime:
        return utcnow()

    def __repr__(self) -> str:
        return "SystemClock()"


class FrozenClock:
    """Clock that can be pinned to a fixed instant for deterministic tests.

    While frozen, ``now()`` returns the pinned instant. ``reset()`` unpins
    it and the clock falls back to real UTC time.
    """

    def __init__(self, at: Optional[datetime] = None):
        self._frozen: Optional[datetime] = None
        if at is not None:
            self.freeze(at)

    @property
    def is_frozen(self) -> bool:
        return self._frozen is not None

    def now(self) -> datetime:
        if self._frozen is None:
            return utcnow()
        return self._frozen

    def freeze(self, at: datetime) -> None:
        """Pin the clock to ``at`` (naive values are treated as UTC)."""
        if at.tzinfo is None:
            at = at.replace(tzinfo=timezone.utc)
        self._frozen = at.astimezone(timezone.utc)

    def advance(self, delta: Duration) -> datetime:
        """Move the clock forward and return the new instant.

        An unfrozen clock is frozen at the current real time first.
        """
        if not isinstance(delta, timedelta):
            delta = timedelta(seconds=delta)
        self.freeze(self.now() + delta)
        return self.now()

    def reset(self) -> None:
        """Return to the real clock."""
        self._frozen = None

    def __repr__(self) -> str:
        return f"FrozenClock(at={self._frozen!r})"


system_clock = SystemClock()
