"""Pytest configuration and fixtures for TerangaBuild tests.

Every test runs with backend settings removed from the environment, so the
facade starts in fixture mode unless a test builds its own backend.
"""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from terangabuild.backends.fixtures import FixtureBackend
from terangabuild.config import reset_config
from terangabuild.core.cache import QueryCache
from terangabuild.services import DatabaseService

FIXED_NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)

ISOLATED_ENV = (
    "TERANGA_BACKEND_URL",
    "TERANGA_BACKEND_KEY",
    "CACHE_TTL_SECONDS",
    "SCHEDULE_TOLERANCE_PCT",
    "SEARCH_MIN_QUERY_LENGTH",
    "SEARCH_MAX_RESULTS",
    "SEARCH_DEBOUNCE_SECONDS",
    "INVITATION_TTL_DAYS",
    "LOG_LEVEL",
    "LOG_FORMAT",
)


class FakeClock:
    """Manually advanced monotonic clock for cache expiry tests."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch):
    for name in ISOLATED_ENV:
        monkeypatch.delenv(name, raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def cache_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fixture_backend() -> FixtureBackend:
    return FixtureBackend()


@pytest.fixture
def service(fixture_backend: FixtureBackend, cache_clock: FakeClock) -> DatabaseService:
    """Fixture-mode facade with a controllable cache clock and fixed timestamps."""
    return DatabaseService(
        fixture_backend,
        cache=QueryCache(ttl_seconds=30, clock=cache_clock),
        clock=lambda: FIXED_NOW,
    )


@pytest.fixture
def fixed_now() -> datetime:
    """Timestamp stamped on every record written through ``service``."""
    return FIXED_NOW
