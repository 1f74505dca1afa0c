"""
Main pytest configuration for all backend tests.

Shared fixtures: a controllable clock, both cache tiers rooted in a
temporary directory, a mocked registration backend and test settings.
"""

import os
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

import pytest

# Set test environment variables before importing app modules
os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_LEVEL"] = "DEBUG"
os.environ["PREVIEW_MODE"] = "false"

from rnba_admin.core.config import Settings
from rnba_admin.infrastructure.backend.interface import RegistrationBackend
from rnba_admin.infrastructure.storage.file_store import FileCacheStore
from rnba_admin.infrastructure.storage.session_cache import SessionCache
from rnba_admin.services.cache.cache_manager import CacheManager


class FakeClock:
    """Clock that only moves when told to."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def clock():
    """Clock frozen at midday of the event day."""
    return FakeClock(datetime(2024, 10, 14, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def cache_root(tmp_path):
    return tmp_path / "cache"


@pytest.fixture
def file_store(cache_root):
    return FileCacheStore(cache_root)


@pytest.fixture
def session_cache(clock):
    return SessionCache(max_entries=64, clock=clock)


@pytest.fixture
def cache_manager(file_store, session_cache, clock):
    return CacheManager(file_store, session_cache, clock=clock)


@pytest.fixture
def backend():
    """Registration backend mock with async methods."""
    return AsyncMock(spec=RegistrationBackend)


@pytest.fixture
def settings(cache_root):
    """Settings isolated from the developer's environment and .env file."""
    return Settings(
        _env_file=None,
        ENVIRONMENT="test",
        CACHE_DIR=str(cache_root),
        SUPABASE_URL="https://unit-test.supabase.co",
        SUPABASE_KEY="unit-test-key",
    )
