"""CAA state record and its signed 64-bit storage encoding.

Entities persist a CAA as one signed integer ``V``:

    sign(V) < 0   -> locked
    |V|           -> frontier
    V == 0        -> never issued

In memory the two facts are kept apart in ``CAAState`` and only fused
again by ``to_int()``.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from compandauth.core.exceptions import FrontierOverflowError

INT64_MAX = 2**63 - 1


def magnitude(n: int) -> int:
    """Absolute value; every numeric input is normalized through this."""
    return -n if n < 0 else n


def in_int64_range(n: int) -> bool:
    """Whether ``n`` and ``-n`` are both representable as signed 64-bit."""
    return magnitude(n) <= INT64_MAX


def check_frontier(frontier: int) -> int:
    """Return ``frontier`` or raise if it cannot be stored."""
    if not in_int64_range(frontier):
        raise FrontierOverflowError(frontier)
    return frontier


def _require_int(value, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an int, got {type(value).__name__}")
    return value


@dataclass(frozen=True)
class CAAState:
    """Immutable snapshot of a CAA.

    Attributes:
        frontier: Non-negative issuance count (counter) or anchor
            timestamp in Unix seconds (timeout). Zero means unissued.
        locked: Whether validation is currently refused. Always False
            while unissued, since the signed encoding has no negative zero.
    """

    frontier: int = 0
    locked: bool = False

    def __post_init__(self):
        _require_int(self.frontier, "frontier")
        if self.frontier < 0:
            raise ValueError("frontier must be non-negative; use locked for the sign")
        check_frontier(self.frontier)
        object.__setattr__(self, "locked", bool(self.locked) and self.frontier != 0)

    @classmethod
    def unissued(cls) -> "CAAState":
        return cls()

    @classmethod
    def from_int(cls, value: int) -> "CAAState":
        """Decode a stored signed integer."""
        _require_int(value, "value")
        return cls(frontier=check_frontier(magnitude(value)), locked=value < 0)

    def to_int(self) -> int:
        """Encode as the signed integer to store alongside the entity."""
        return -self.frontier if self.locked else self.frontier

    @property
    def has_issued(self) -> bool:
        return self.frontier != 0

    def with_lock(self) -> "CAAState":
        return replace(self, locked=True)

    def without_lock(self) -> "CAAState":
        return replace(self, locked=False)

    def with_frontier(self, frontier: int) -> "CAAState":
        """Move the frontier, keeping the lock flag."""
        return replace(self, frontier=check_frontier(frontier))

    def __int__(self) -> int:
        return self.to_int()
