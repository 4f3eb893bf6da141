"""Bind a CAA to its window so callers don't repeat it on every check."""

from __future__ import annotations

from datetime import timedelta
from typing import Optional, Union

from compandauth.caa import CAA
from compandauth.caa.factory import get_caa_from_settings
from compandauth.caa.state import magnitude
from compandauth.caa.timeout import TimeoutCAA
from compandauth.config.settings import Settings
from compandauth.core.logging import get_logger
from compandauth.core.time import Clock, to_seconds

logger = get_logger(__name__)


def _timeout_of(caa: CAA) -> Optional[TimeoutCAA]:
    inner = getattr(caa, "wrapped", caa)
    return inner if isinstance(inner, TimeoutCAA) else None


class SessionPolicy:
    """An entity's CAA together with the window its sessions live in.

    For a counter CAA ``window`` is how many recent sessions stay valid;
    for a timeout CAA it is the session lifetime as seconds or a
    ``timedelta``.
    """

    def __init__(self, caa: CAA, window: Union[int, timedelta]):
        self.caa = caa
        self.window = magnitude(to_seconds(window))

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        value: int = 0,
        clock: Optional[Clock] = None,
    ) -> "SessionPolicy":
        return cls(get_caa_from_settings(settings, value=value, clock=clock), settings.caa_window)

    @property
    def is_timeout(self) -> bool:
        return _timeout_of(self.caa) is not None

    def issue(self) -> int:
        return self.caa.issue()

    def is_valid(self, token: int) -> bool:
        return self.caa.is_valid(token, self.window)

    def revoke(self, n: int) -> None:
        self.caa.revoke(n)

    def revoke_all(self) -> None:
        """Invalidate every session issued so far.

        Counter CAAs skip the frontier a full window ahead; timeout CAAs
        re-anchor to the current second.
        """
        timeout = _timeout_of(self.caa)
        if timeout is None:
            self.caa.revoke(self.window)
        else:
            self.caa.revoke(timeout.now())
        logger.info("Revoked all sessions", data={"caa": self.caa.to_int()})

    def lock(self) -> None:
        self.caa.lock()

    def unlock(self) -> None:
        self.caa.unlock()

    def is_locked(self) -> bool:
        return self.caa.is_locked()

    def has_issued(self) -> bool:
        return self.caa.has_issued()

    def to_int(self) -> int:
        return self.caa.to_int()

    def __repr__(self) -> str:
        return f"SessionPolicy({self.caa!r}, window={self.window})"
