"""
Application Context

Builds the cache tiers, the backend client and the data services once
and hands them to the UI layer. Used as an async context manager so the
backend connection pool is released on exit.
"""

from datetime import datetime
from typing import Callable, Optional

import structlog

from ..constants import APP_NAME, APP_VERSION, get_current_timestamp
from ..domain.cache.value_objects import TTL
from ..infrastructure.backend.interface import RegistrationBackend
from ..infrastructure.backend.supabase_backend import SupabaseBackend
from ..infrastructure.storage.file_store import FileCacheStore
from ..infrastructure.storage.session_cache import SessionCache
from ..services.cache.cache_manager import CacheManager
from ..services.data.dashboard_service import DashboardService
from ..services.data.reference_data_service import ReferenceDataService
from ..services.data.registration_service import RegistrationService
from ..services.data.visitor_data_service import VisitorDataService
from .config import Settings, get_settings
from .logging import configure_logging

logger = structlog.get_logger(__name__)


class AppContext:
    """Explicitly wired services sharing one cache manager."""

    def __init__(
        self,
        settings: Settings,
        cache: CacheManager,
        backend: RegistrationBackend,
        dashboard: DashboardService,
        registrations: RegistrationService,
        visitor_data: VisitorDataService,
        reference_data: ReferenceDataService,
    ):
        self.settings = settings
        self.cache = cache
        self.backend = backend
        self.dashboard = dashboard
        self.registrations = registrations
        self.visitor_data = visitor_data
        self.reference_data = reference_data

    @classmethod
    def create(
        cls,
        settings: Optional[Settings] = None,
        backend: Optional[RegistrationBackend] = None,
        clock: Callable[[], datetime] = get_current_timestamp,
        setup_logging: bool = True,
    ) -> "AppContext":
        """
        Wire the application from settings.

        Args:
            settings: Settings to use, defaults to ``get_settings()``
            backend: Backend override, defaults to Supabase from settings
            clock: Time source shared by every component
            setup_logging: Configure logging from settings first
        """
        settings = settings or get_settings()
        if setup_logging:
            configure_logging(settings)

        if not settings.PREVIEW_MODE and not settings.is_configured:
            logger.warning("Backend credentials are placeholders, requests will fail")

        store = FileCacheStore(settings.cache_dir)
        session = SessionCache(settings.SESSION_CACHE_MAX_ENTRIES, clock=clock)
        cache = CacheManager(store, session, clock=clock)
        backend = backend or SupabaseBackend.from_settings(settings)
        preview_mode = settings.PREVIEW_MODE

        dashboard = DashboardService(
            cache,
            backend,
            ttl=TTL.of_seconds(settings.DASHBOARD_CACHE_TTL_SECONDS),
            preview_mode=preview_mode,
            event_timezone=settings.event_timezone,
            clock=clock,
        )
        visitor_data = VisitorDataService(
            cache,
            backend,
            dashboard,
            ttl=TTL.of_seconds(settings.VISITOR_DATA_CACHE_TTL_SECONDS),
            preview_mode=preview_mode,
        )
        registrations = RegistrationService(
            cache,
            backend,
            dashboard,
            visitor_data,
            ttl=TTL.of_seconds(settings.REGISTRATIONS_CACHE_TTL_SECONDS),
            preview_mode=preview_mode,
            default_event_id=settings.DEFAULT_EVENT_ID,
        )
        reference_data = ReferenceDataService(
            cache,
            backend,
            ttl=TTL.of_seconds(settings.REFERENCE_DATA_CACHE_TTL_SECONDS),
            preview_mode=preview_mode,
        )

        logger.info(
            f"{APP_NAME} services ready",
            version=APP_VERSION,
            environment=settings.ENVIRONMENT,
            preview_mode=preview_mode,
            cache_dir=str(settings.cache_dir),
        )
        return cls(
            settings=settings,
            cache=cache,
            backend=backend,
            dashboard=dashboard,
            registrations=registrations,
            visitor_data=visitor_data,
            reference_data=reference_data,
        )

    async def clear_all_data(self) -> int:
        """Drop every cached value in both tiers."""
        removed = await self.cache.clear_all()
        logger.info("All cached data cleared", removed_files=removed)
        return removed

    async def aclose(self) -> None:
        await self.backend.aclose()

    async def __aenter__(self) -> "AppContext":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()
