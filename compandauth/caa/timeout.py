"""Expiry-window CAA over wall-clock time.

Tokens are issue timestamps (Unix seconds, UTC). The frontier is an
anchor set on the first issue; a session is valid if it was issued at or
after the anchor and no more than ``duration`` seconds ago. Revoking
re-anchors to an arbitrary timestamp, so ``revoke(now)`` invalidates
everything issued before this second.
"""

from __future__ import annotations

from typing import Optional

from compandauth.caa.base import BaseCAA
from compandauth.caa.state import CAAState, in_int64_range, magnitude
from compandauth.core.logging import get_logger
from compandauth.core.time import Clock, system_clock, to_unix

logger = get_logger(__name__)


class TimeoutCAA(BaseCAA):
    """Keeps sessions valid for a fixed duration after they were issued."""

    strategy = "timeout"

    def __init__(self, value: int = 0, clock: Optional[Clock] = None):
        """
        Args:
            value: Stored signed integer (0 for a new entity).
            clock: Time source; defaults to the UTC system clock.
        """
        super().__init__(value)
        self.clock: Clock = clock or system_clock

    def now(self) -> int:
        """Current time from the injected clock, in Unix seconds."""
        return to_unix(self.clock.now())

    def is_valid(self, token: int, duration_secs: int) -> bool:
        """Check whether ``token`` was issued after the anchor and less
        than ``duration_secs`` ago.

        Signs on either argument are ignored.
        """
        if not (in_int64_range(token) and in_int64_range(duration_secs)):
            return False

        state = self._state
        if state.locked or not state.has_issued:
            return False

        token = magnitude(token)
        if token < state.frontier:
            return False
        return token + magnitude(duration_secs) >= self.now()

    def issue(self) -> int:
        """Return the current timestamp as the token for a new session.

        The first issue also anchors the CAA at that timestamp; later
        issues leave the state untouched, locked or not.
        """
        now = self.now()
        if not self._state.has_issued:
            self._state = CAAState.from_int(now)
            logger.debug("Timeout CAA anchored", data={"anchor": now})
        return now

    def revoke(self, expiry_timestamp: int) -> None:
        """Invalidate every session issued before ``expiry_timestamp``.

        The anchor is replaced outright, not advanced. Has no effect before
        the first issue; a locked CAA stays locked. Revoking to 0 returns
        the CAA to the unissued state.
        """
        if not self._state.has_issued:
            return

        self._state = self._state.with_frontier(magnitude(expiry_timestamp))
        logger.debug(
            "Timeout CAA re-anchored",
            data={"anchor": self._state.frontier, "locked": self._state.locked},
        )

    def __repr__(self) -> str:
        return f"TimeoutCAA({self.to_int()}, clock={self.clock!r})"
