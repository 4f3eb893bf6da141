"""Factory functions for CAA strategies.

Usage:
    from compandauth.caa.factory import get_caa, get_caa_from_settings

    caa = get_caa("timeout", value=user.caa, thread_safe=True)
    caa = get_caa_from_settings(get_settings(), value=user.caa)
"""

from __future__ import annotations

from enum import Enum
from typing import Optional, Union

from compandauth.caa import CAA
from compandauth.caa.counter import CounterCAA
from compandauth.caa.threadsafe import ThreadSafeCAA
from compandauth.caa.timeout import TimeoutCAA
from compandauth.config.settings import Settings
from compandauth.core.exceptions import UnknownStrategyError
from compandauth.core.time import Clock


class Strategy(str, Enum):
    COUNTER = "counter"
    TIMEOUT = "timeout"


def _resolve_strategy(strategy: Union[str, Strategy]) -> Strategy:
    if isinstance(strategy, Strategy):
        return strategy
    try:
        return Strategy((strategy or "").strip().lower())
    except ValueError:
        raise UnknownStrategyError(str(strategy), tuple(s.value for s in Strategy)) from None


def get_caa(
    strategy: Union[str, Strategy] = Strategy.COUNTER,
    *,
    value: int = 0,
    clock: Optional[Clock] = None,
    thread_safe: bool = False,
) -> CAA:
    """Build a CAA for one entity.

    Args:
        strategy: "counter" or "timeout".
        value: Stored signed integer for the entity (0 for a new entity).
        clock: Time source for the timeout strategy.
        thread_safe: Wrap the CAA in a reader/writer lock.

    Returns:
        CAA implementation

    Raises:
        UnknownStrategyError: If the strategy name is not recognised.
        ValueError: If a clock is given for the counter strategy.
    """
    resolved = _resolve_strategy(strategy)

    if resolved is Strategy.COUNTER:
        if clock is not None:
            raise ValueError("The counter strategy does not use a clock")
        caa: CAA = CounterCAA(value)
    else:
        caa = TimeoutCAA(value, clock=clock)

    if thread_safe:
        return ThreadSafeCAA(caa)
    return caa


def get_caa_from_settings(
    settings: Settings,
    value: int = 0,
    clock: Optional[Clock] = None,
) -> CAA:
    """Build a CAA using the configured strategy and locking.

    ``clock`` is ignored when the configured strategy is counter.
    """
    strategy = _resolve_strategy(settings.caa_strategy)
    return get_caa(
        strategy,
        value=value,
        clock=clock if strategy is Strategy.TIMEOUT else None,
        thread_safe=settings.caa_thread_safe,
    )
