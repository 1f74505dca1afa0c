"""
Dashboard Service

Today's registration and visitor counts for the overview screen.
"""

from datetime import datetime, timezone, tzinfo
from typing import Callable

import structlog

from ...constants import get_current_timestamp
from ...domain.cache.entities import FetchResult
from ...domain.cache.value_objects import TTL, CacheKey
from ...domain.registration.models import DashboardStats
from ...infrastructure.backend.interface import RegistrationBackend
from ..cache.cache_manager import CacheManager
from .base import CachedDataService
from .preview_data import PREVIEW_DASHBOARD_STATS

logger = structlog.get_logger(__name__)


class DashboardService(CachedDataService):
    """Serves ``DashboardStats`` under the ``dashboard_stats`` key."""

    service_name = "dashboard"

    def __init__(
        self,
        cache: CacheManager,
        backend: RegistrationBackend,
        ttl: TTL = TTL.dashboard_stats(),
        preview_mode: bool = False,
        event_timezone: tzinfo = timezone.utc,
        clock: Callable[[], datetime] = get_current_timestamp,
    ):
        super().__init__(cache, backend, ttl, preview_mode)
        self.event_timezone = event_timezone
        self._clock = clock

    def start_of_today(self) -> datetime:
        """Midnight of the current day in the event timezone."""
        now = self._clock().astimezone(self.event_timezone)
        return now.replace(hour=0, minute=0, second=0, microsecond=0)

    async def fetch_dashboard_stats(self) -> DashboardStats:
        result = await self.fetch_dashboard_stats_result()
        return result.value

    async def fetch_dashboard_stats_result(self) -> FetchResult[DashboardStats]:
        return await self._fetch_with_cache(
            CacheKey.dashboard_stats(),
            DashboardStats,
            lambda: self.backend.fetch_dashboard_stats(self.start_of_today()),
            lambda: PREVIEW_DASHBOARD_STATS,
        )

    async def invalidate(self) -> None:
        """Drop cached stats so the next read refetches."""
        if self.preview_mode:
            return
        await self._invalidate([CacheKey.dashboard_stats()])
        logger.debug("Dashboard stats invalidated")
