"""Compare-and-authenticate (CAA) strategies.

A CAA is one small integer stored on an entity (e.g. a user row). Each
issued session carries a token derived from it; validating a session
compares its token against the entity's current CAA, so sessions can be
expired, locked out, or revoked in bulk without storing them.

Two strategies implement the same capability set:

- ``CounterCAA``: only the last ``delta`` issued sessions are valid.
- ``TimeoutCAA``: sessions are valid for ``duration`` seconds after issue,
  and never if issued before the anchor.

Usage:
    from compandauth.caa import CounterCAA

    caa = CounterCAA(user.caa)          # load stored value
    token = caa.issue()                 # embed in the session / JWT
    user.caa = caa.to_int()             # persist

    CounterCAA(user.caa).is_valid(session.caa, delta=5)
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from compandauth.caa.state import INT64_MAX, CAAState, in_int64_range, magnitude

__all__ = [
    "CAA",
    "CAAState",
    "CounterCAA",
    "INT64_MAX",
    "SessionPolicy",
    "Strategy",
    "ThreadSafeCAA",
    "TimeoutCAA",
    "get_caa",
    "get_caa_from_settings",
    "in_int64_range",
    "magnitude",
]


@runtime_checkable
class CAA(Protocol):
    """Capability set shared by every CAA strategy.

    Implementations never raise for in-range input: a session that cannot
    be accepted (locked, unissued, out of window, out of range) is simply
    reported invalid.
    """

    @property
    def state(self) -> CAAState:
        """Current state snapshot."""
        ...

    def to_int(self) -> int:
        """Signed integer to persist alongside the entity."""
        ...

    def lock(self) -> None:
        """Refuse every session until unlocked. Idempotent."""
        ...

    def unlock(self) -> None:
        """Accept sessions again. Idempotent."""
        ...

    def is_locked(self) -> bool:
        ...

    def is_valid(self, token: int, window: int) -> bool:
        """Check a session token against the current state.

        Args:
            token: Value returned by ``issue()`` and stored in the session.
            window: Number of recent sessions (counter) or seconds (timeout).
        """
        ...

    def issue(self) -> int:
        """Mint a token for a new session and advance the state."""
        ...

    def revoke(self, n: int) -> None:
        """Invalidate previously issued sessions. No-op if never issued."""
        ...

    def has_issued(self) -> bool:
        ...


from compandauth.caa.counter import CounterCAA  # noqa: E402
from compandauth.caa.timeout import TimeoutCAA  # noqa: E402
from compandauth.caa.threadsafe import ThreadSafeCAA  # noqa: E402
from compandauth.caa.factory import Strategy, get_caa, get_caa_from_settings  # noqa: E402
from compandauth.caa.policy import SessionPolicy  # noqa: E402
