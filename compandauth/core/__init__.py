"""Core module with logging, clocks, and exceptions."""

from compandauth.core.exceptions import (
    CompandauthError,
    FrontierOverflowError,
    UnknownStrategyError,
)
from compandauth.core.logging import (
    bind_entity,
    get_logger,
    setup_logging,
    setup_logging_from_settings,
)
from compandauth.core.time import (
    Clock,
    FrozenClock,
    SystemClock,
    system_clock,
    to_seconds,
    to_unix,
    utcnow,
)

__all__ = [
    "Clock",
    "CompandauthError",
    "FrozenClock",
    "FrontierOverflowError",
    "SystemClock",
    "UnknownStrategyError",
    "bind_entity",
    "get_logger",
    "setup_logging",
    "setup_logging_from_settings",
    "system_clock",
    "to_seconds",
    "to_unix",
    "utcnow",
]
