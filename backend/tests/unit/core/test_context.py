"""
Unit tests for application wiring.
"""

import pytest
from unittest.mock import AsyncMock

from rnba_admin.core.context import AppContext
from rnba_admin.domain.cache.value_objects import CacheKey, DataSource
from rnba_admin.domain.registration.models import DashboardStats
from rnba_admin.infrastructure.backend.supabase_backend import SupabaseBackend
from rnba_admin.services.cache.cache_manager import CacheManager


class TestAppContext:
    """Test AppContext construction and lifecycle."""

    def test_wires_services_to_one_cache(self, settings, backend, clock):
        context = AppContext.create(
            settings, backend=backend, clock=clock, setup_logging=False
        )

        assert isinstance(context.cache, CacheManager)
        assert context.dashboard.cache is context.cache
        assert context.registrations.cache is context.cache
        assert context.visitor_data.cache is context.cache
        assert context.reference_data.cache is context.cache
        assert context.registrations.dashboard is context.dashboard
        assert context.registrations.visitor_data is context.visitor_data
        assert context.visitor_data.dashboard is context.dashboard

    def test_ttls_from_settings(self, settings, backend):
        settings = settings.model_copy(update={"DASHBOARD_CACHE_TTL_SECONDS": 60})

        context = AppContext.create(settings, backend=backend, setup_logging=False)

        assert context.dashboard.ttl.seconds == 60
        assert context.registrations.ttl.seconds == 1800
        assert context.registrations.default_event_id == 2024

    @pytest.mark.asyncio
    async def test_default_backend_is_supabase(self, settings):
        async with AppContext.create(settings, setup_logging=False) as context:
            assert isinstance(context.backend, SupabaseBackend)

    @pytest.mark.asyncio
    async def test_closes_backend_on_exit(self, settings, backend):
        async with AppContext.create(settings, backend=backend, setup_logging=False):
            pass

        backend.aclose.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_cache_shared_across_services(self, settings, backend, clock):
        backend.fetch_dashboard_stats.return_value = DashboardStats()
        backend.update_visitor_completion = AsyncMock()
        context = AppContext.create(
            settings, backend=backend, clock=clock, setup_logging=False
        )

        await context.dashboard.fetch_dashboard_stats()
        await context.visitor_data.update_visitor_completion(1, 7, True)

        assert not await context.cache.exists(CacheKey.dashboard_stats())

    @pytest.mark.asyncio
    async def test_clear_all_data(self, settings, backend, clock):
        backend.fetch_dashboard_stats.return_value = DashboardStats()
        context = AppContext.create(
            settings, backend=backend, clock=clock, setup_logging=False
        )
        await context.dashboard.fetch_dashboard_stats()

        removed = await context.clear_all_data()

        assert removed == 2
        result = await context.dashboard.fetch_dashboard_stats_result()
        assert result.source == DataSource.REMOTE

    @pytest.mark.asyncio
    async def test_preview_mode(self, settings, backend):
        settings = settings.model_copy(update={"PREVIEW_MODE": True})
        context = AppContext.create(settings, backend=backend, setup_logging=False)

        result = await context.dashboard.fetch_dashboard_stats_result()

        assert result.source == DataSource.PREVIEW
        backend.fetch_dashboard_stats.assert_not_awaited()

    def test_configures_logging(self, settings, backend):
        import structlog

        AppContext.create(settings, backend=backend)

        assert structlog.is_configured()
        structlog.reset_defaults()
