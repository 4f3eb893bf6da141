"""compandauth

Compare-and-authenticate: validate and revoke any number of distributed
sessions from one signed integer stored on the owning entity.
"""

from compandauth.caa import (
    CAA,
    INT64_MAX,
    CAAState,
    CounterCAA,
    SessionPolicy,
    Strategy,
    ThreadSafeCAA,
    TimeoutCAA,
    get_caa,
    get_caa_from_settings,
)
from compandauth.config import Settings, get_settings
from compandauth.core import (
    CompandauthError,
    FrozenClock,
    FrontierOverflowError,
    SystemClock,
    UnknownStrategyError,
    to_seconds,
)

__all__ = [
    "CAA",
    "CAAState",
    "CompandauthError",
    "CounterCAA",
    "FrozenClock",
    "FrontierOverflowError",
    "INT64_MAX",
    "SessionPolicy",
    "Settings",
    "Strategy",
    "SystemClock",
    "ThreadSafeCAA",
    "TimeoutCAA",
    "UnknownStrategyError",
    "get_caa",
    "get_caa_from_settings",
    "get_settings",
    "to_seconds",
]

__version__ = "1.0.0"
