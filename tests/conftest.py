"""Root-level pytest fixtures for all tests.

Provides shared fixtures for rate calculation tests:
- A fresh rate cache with a controllable clock
- Isolation of the process-wide cache and SHIPRATE_ env vars
"""

import os

import pytest

from shiprate.services.rate_cache import RateCache, reset_rate_cache


# ============================================================================
# Pytest Markers
# ============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests that take a long time to run"
    )


# ============================================================================
# Isolation
# ============================================================================


@pytest.fixture(autouse=True)
def _isolate_process_state(monkeypatch):
    """Drop the process-wide cache and SHIPRATE_ overrides around each test."""
    for key in list(os.environ):
        if key.startswith("SHIPRATE_"):
            monkeypatch.delenv(key, raising=False)
    reset_rate_cache()
    yield
    reset_rate_cache()


# ============================================================================
# Cache Fixtures
# ============================================================================


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock) -> RateCache:
    """Rate cache with a 60 second TTL on the fake clock."""
    return RateCache(ttl_seconds=60, clock=clock)
