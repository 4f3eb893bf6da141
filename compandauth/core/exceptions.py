"""Exceptions raised by compandauth.

CAA operations are total over in-range input: bad tokens or locked state
simply validate as ``False``. These exceptions only cover programmer and
configuration faults.
"""

from typing import Optional


class CompandauthError(Exception):
    """Base exception for compandauth."""

    def __init__(
        self,
        message: str,
        code: str = "E5000",
        details: Optional[dict] = None,
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(message)


class UnknownStrategyError(CompandauthError, ValueError):
    """Requested CAA strategy does not exist."""

    def __init__(self, strategy: str, supported: tuple = ()):
        super().__init__(
            f"Unknown CAA strategy: {strategy}. Use one of: {', '.join(supported)}",
            code="E4001",
            details={"strategy": strategy, "supported": list(supported)},
        )


class FrontierOverflowError(CompandauthError, OverflowError):
    """A CAA value would no longer fit in a signed 64-bit integer."""

    def __init__(self, value: int):
        super().__init__(
            f"CAA frontier {value} does not fit in a signed 64-bit integer",
            code="E4002",
            details={"value": value},
        )
