"""
Shared test fixtures and utilities.

This module provides common test infrastructure used across all test modules.
"""

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from api.dependencies import ServiceContainer, reset_container, set_container
from modules.auth.passwords import PasswordHasher
from shared.config import Settings

# Test JWT secret (only for testing)
TEST_JWT_SECRET = "test-secret-key-for-testing-only"

# 2025-01-15 12:00:00 UTC, mid-way through a quota day
START_TIME = datetime(2025, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


class FrozenClock:
    """Manually advanced clock for expiry and quota-window tests."""

    def __init__(self, start: datetime = START_TIME):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock()


@pytest.fixture
def test_settings() -> Settings:
    """Settings with cheap hashing and no background sweeper."""
    return Settings(
        _env_file=None,
        jwt_secret=TEST_JWT_SECRET,
        argon2_time_cost=1,
        argon2_memory_cost=8,
        argon2_parallelism=1,
        session_sweep_interval_seconds=0,
        storage_backend="memory",
    )


@pytest.fixture
def hasher() -> PasswordHasher:
    return PasswordHasher(time_cost=1, memory_cost=8, parallelism=1)


@pytest.fixture
def container(test_settings: Settings, clock: FrozenClock):
    """A fresh in-memory container installed as the app's container."""
    container = ServiceContainer(settings=test_settings, clock=clock)
    set_container(container)
    yield container
    reset_container()


@pytest.fixture
def client(container: ServiceContainer):
    """TestClient bound to the fresh container."""
    from api import app

    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def test_user_email() -> str:
    """Provide a consistent test user email."""
    return "alice@example.com"


@pytest.fixture
def test_user_password() -> str:
    return "Pass1234!"
