"""Lock bookkeeping and persistence shared by the CAA strategies."""

from __future__ import annotations

from compandauth.caa.state import CAAState
from compandauth.core.logging import get_logger

logger = get_logger(__name__)


class BaseCAA:
    """Holds one entity's ``CAAState`` and implements the strategy-agnostic
    half of the capability set. Subclasses supply ``is_valid``, ``issue``
    and ``revoke``.
    """

    strategy = "base"

    def __init__(self, value: int = 0):
        """Load from a stored signed integer (0 for a new entity)."""
        self._state = CAAState.from_int(value)

    @property
    def state(self) -> CAAState:
        return self._state

    def load(self, value: int) -> None:
        """Replace the current state with a stored signed integer."""
        self._state = CAAState.from_int(value)

    def to_int(self) -> int:
        return self._state.to_int()

    def lock(self) -> None:
        if self._state.locked or not self._state.has_issued:
            return
        self._state = self._state.with_lock()
        logger.debug("CAA locked", data={"strategy": self.strategy, "frontier": self._state.frontier})

    def unlock(self) -> None:
        if not self._state.locked:
            return
        self._state = self._state.without_lock()
        logger.debug("CAA unlocked", data={"strategy": self.strategy, "frontier": self._state.frontier})

    def is_locked(self) -> bool:
        return self._state.locked

    def has_issued(self) -> bool:
        return self._state.has_issued

    def __int__(self) -> int:
        return self.to_int()

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._state == other._state

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.to_int()})"
