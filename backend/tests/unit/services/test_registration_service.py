"""
Unit tests for Registration Service.
"""

import pytest
import pytest_asyncio
from datetime import datetime, timezone

from rnba_admin.domain.cache.value_objects import CacheKey, DataSource
from rnba_admin.domain.registration.models import (
    DashboardStats,
    RegistrationData,
    RegistrationSummary,
    VisitorData,
)
from rnba_admin.infrastructure.backend.exceptions import (
    RemoteConnectionException,
    RemoteDecodeException,
)
from rnba_admin.services.data.dashboard_service import DashboardService
from rnba_admin.services.data.exceptions import (
    InvalidDataException,
    RegistrationCreationFailedException,
)
from rnba_admin.services.data.registration_service import RegistrationService
from rnba_admin.services.data.visitor_data_service import VisitorDataService

REGISTRATIONS = [
    RegistrationSummary(
        registration_id=2,
        name="Jane Smith",
        created_at=datetime(2024, 10, 14, 11, 0, tzinfo=timezone.utc),
    ),
    RegistrationSummary(
        registration_id=1,
        name="John Doe",
        created_at=datetime(2024, 10, 14, 9, 0, tzinfo=timezone.utc),
    ),
]


@pytest.fixture
def dashboard(cache_manager, backend, clock):
    return DashboardService(cache_manager, backend, clock=clock)


@pytest.fixture
def visitor_data(cache_manager, backend, dashboard):
    return VisitorDataService(cache_manager, backend, dashboard)


@pytest.fixture
def registrations(cache_manager, backend, dashboard, visitor_data):
    return RegistrationService(cache_manager, backend, dashboard, visitor_data)


@pytest_asyncio.fixture
async def primed(backend, registrations, visitor_data, dashboard):
    """Registration list, visitor list and dashboard stats all cached."""
    backend.fetch_registrations.return_value = list(REGISTRATIONS)
    backend.fetch_visitor_data.return_value = [VisitorData(visitorid=1)]
    backend.fetch_dashboard_stats.return_value = DashboardStats()
    await registrations.fetch_registrations_for_event(2024)
    await visitor_data.fetch_visitor_data(2)
    await dashboard.fetch_dashboard_stats()


class TestRegistrationReads:
    @pytest.mark.asyncio
    async def test_fetch_for_default_event(self, registrations, backend):
        backend.fetch_registrations.return_value = list(REGISTRATIONS)

        result = await registrations.fetch_registrations_for_event_result()

        assert result.source == DataSource.REMOTE
        assert [r.name for r in result.value] == ["Jane Smith", "John Doe"]
        backend.fetch_registrations.assert_awaited_once_with(2024)

    @pytest.mark.asyncio
    async def test_cached_per_event(self, registrations, backend, cache_manager):
        backend.fetch_registrations.return_value = list(REGISTRATIONS)

        await registrations.fetch_registrations_for_event(2024)
        await registrations.fetch_registrations_for_event(2024)
        await registrations.fetch_registrations_for_event(2025)

        assert backend.fetch_registrations.await_count == 2
        assert await cache_manager.exists(CacheKey.registrations_for_event(2025))

    @pytest.mark.asyncio
    async def test_fresh_for_thirty_minutes(self, registrations, backend, clock):
        backend.fetch_registrations.return_value = list(REGISTRATIONS)
        await registrations.fetch_registrations_for_event(2024)

        clock.advance(1799)
        await registrations.fetch_registrations_for_event(2024)
        assert backend.fetch_registrations.await_count == 1

        clock.advance(2)
        await registrations.fetch_registrations_for_event(2024)
        assert backend.fetch_registrations.await_count == 2

    @pytest.mark.asyncio
    async def test_stale_fallback(self, registrations, backend, clock):
        backend.fetch_registrations.return_value = list(REGISTRATIONS)
        await registrations.fetch_registrations_for_event(2024)
        clock.advance(3600)
        backend.fetch_registrations.side_effect = RemoteConnectionException("read")

        assert await registrations.fetch_registrations_for_event(2024) == REGISTRATIONS

    @pytest.mark.asyncio
    async def test_invalid_event(self, registrations):
        with pytest.raises(InvalidDataException):
            await registrations.fetch_registrations_for_event(-5)


class TestRegistrationMutations:
    @pytest.mark.asyncio
    async def test_create_invalidates_list_and_dashboard(
        self, primed, registrations, backend, cache_manager
    ):
        backend.create_registration.return_value = 42
        data = RegistrationData(name="New Person")

        assert await registrations.create_registration(data) == 42

        backend.create_registration.assert_awaited_once_with(data, 2024)
        assert not await cache_manager.exists(CacheKey.registrations_for_event(2024))
        assert not await cache_manager.exists(CacheKey.dashboard_stats())
        assert await cache_manager.exists(CacheKey.visitor_data(2))

    @pytest.mark.asyncio
    async def test_create_failure_wrapped(
        self, primed, registrations, backend, cache_manager
    ):
        cause = RemoteDecodeException("create_contact")
        backend.create_registration.side_effect = cause

        with pytest.raises(RegistrationCreationFailedException) as exc_info:
            await registrations.create_registration(RegistrationData(name="X"))

        assert exc_info.value.__cause__ is cause
        assert exc_info.value.error_code == "REGISTRATION_CREATION_FAILED"
        assert await cache_manager.exists(CacheKey.registrations_for_event(2024))
        assert await cache_manager.exists(CacheKey.dashboard_stats())

    @pytest.mark.asyncio
    async def test_delete_invalidates_visitors_too(
        self, primed, registrations, backend, cache_manager
    ):
        await registrations.delete_registration(2, event_id=2024)

        backend.delete_registration.assert_awaited_once_with(2)
        assert not await cache_manager.exists(CacheKey.registrations_for_event(2024))
        assert not await cache_manager.exists(CacheKey.visitor_data(2))
        assert not await cache_manager.exists(CacheKey.dashboard_stats())

    @pytest.mark.asyncio
    async def test_invalidate_cache(self, primed, registrations, cache_manager):
        await registrations.invalidate_cache(2024)

        assert not await cache_manager.exists(CacheKey.registrations_for_event(2024))
        assert await cache_manager.exists(CacheKey.dashboard_stats())

    @pytest.mark.asyncio
    async def test_preview_mode(self, cache_manager, backend, dashboard, visitor_data):
        service = RegistrationService(
            cache_manager, backend, dashboard, visitor_data, preview_mode=True
        )

        names = [r.name for r in await service.fetch_registrations_for_event()]
        registration_id = await service.create_registration(RegistrationData(name="X"))
        await service.delete_registration(registration_id)

        assert names == ["Jane Smith", "John Doe"]
        assert 1 <= registration_id <= 1000
        backend.create_registration.assert_not_awaited()
        backend.delete_registration.assert_not_awaited()
