"""Sliding-window CAA over an issuance count.

The frontier counts issued sessions. Issuing hands out the current
frontier and moves it on by one; a session stays valid while it is among
the last ``delta`` issued, i.e. ``token + delta >= frontier``. Revoking
``n`` pushes the frontier forward so the oldest ``n`` sessions fall out of
the window without ever being looked up. ``revoke(delta)`` kills every
live session.

The window size is passed per call rather than stored, so an entity can
change how many concurrent sessions it allows at any time.
"""

from __future__ import annotations

from compandauth.caa.base import BaseCAA
from compandauth.caa.state import in_int64_range, magnitude
from compandauth.core.logging import get_logger

logger = get_logger(__name__)


class CounterCAA(BaseCAA):
    """Keeps the last ``delta`` issued sessions valid."""

    strategy = "counter"

    def is_valid(self, token: int, delta: int) -> bool:
        """Check whether ``token`` is within the last ``delta`` issues.

        Signs on either argument are ignored.
        """
        if not (in_int64_range(token) and in_int64_range(delta)):
            return False

        state = self._state
        return (
            not state.locked
            and state.has_issued
            and magnitude(token) + magnitude(delta) >= state.frontier
        )

    def issue(self) -> int:
        """Return the token for a new session and advance the frontier.

        Works while locked too: the frontier still advances but the
        session only validates once the CAA is unlocked.
        """
        token = self._state.frontier
        self._state = self._state.with_frontier(token + 1)
        return token

    def revoke(self, n: int) -> None:
        """Invalidate the oldest ``n`` outstanding sessions.

        Has no effect before the first issue. While locked the revocation
        is still applied and takes effect once unlocked.
        """
        if not self._state.has_issued:
            return

        n = magnitude(n)
        self._state = self._state.with_frontier(self._state.frontier + n)
        logger.debug(
            "Counter CAA revoked sessions",
            data={"revoked": n, "frontier": self._state.frontier, "locked": self._state.locked},
        )
