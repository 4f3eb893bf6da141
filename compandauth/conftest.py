"""Pytest configuration and fixtures for compandauth tests."""

import os
from datetime import datetime, timezone

import pytest


def pytest_configure(config):
    """Configure test environment before any tests run.

    Settings are read from the environment, so ENVIRONMENT=test must be in
    place before anything calls get_settings().
    """
    config.addinivalue_line("markers", "security: Security-related tests (required gate)")
    config.addinivalue_line("markers", "slow: Slow-running tests (excluded from fast)")

    os.environ.setdefault("ENVIRONMENT", "test")


@pytest.fixture
def start():
    """A fixed instant used as 'now' in timeout tests."""
    return datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def clock(start):
    """Clock frozen at ``start``; reset after the test."""
    from compandauth.core.time import FrozenClock

    frozen = FrozenClock(start)
    yield frozen
    frozen.reset()


@pytest.fixture
def settings_env(monkeypatch):
    """Set env vars for Settings and clear the cached instance around the test."""
    from compandauth.config import get_settings

    def _apply(**env):
        for key, value in env.items():
            monkeypatch.setenv(key.upper(), str(value))
        get_settings.cache_clear()
        return get_settings()

    get_settings.cache_clear()
    yield _apply
    get_settings.cache_clear()
