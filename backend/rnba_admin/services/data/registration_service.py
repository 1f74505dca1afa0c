"""
Registration Service

Registration lists per event and creation or deletion of registrations.
"""

from typing import List, Optional

import structlog

from ...constants import DEFAULT_EVENT_ID
from ...domain.cache.entities import FetchResult
from ...domain.cache.value_objects import TTL, CacheKey
from ...domain.registration.models import RegistrationData, RegistrationSummary
from ...infrastructure.backend.exceptions import RemoteBackendException
from ...infrastructure.backend.interface import RegistrationBackend
from ..cache.cache_manager import CacheManager
from .base import CachedDataService
from .dashboard_service import DashboardService
from .exceptions import InvalidDataException, RegistrationCreationFailedException
from .preview_data import preview_registration_id, preview_registrations
from .visitor_data_service import VisitorDataService

logger = structlog.get_logger(__name__)


class RegistrationService(CachedDataService):
    """
    Serves registration lists under ``registrations_event_<id>``.

    Creating or deleting a registration invalidates the event's list and
    the dashboard stats; deletion also drops the registration's visitors.
    """

    service_name = "registrations"

    def __init__(
        self,
        cache: CacheManager,
        backend: RegistrationBackend,
        dashboard: DashboardService,
        visitor_data: VisitorDataService,
        ttl: TTL = TTL.registrations(),
        preview_mode: bool = False,
        default_event_id: int = DEFAULT_EVENT_ID,
    ):
        super().__init__(cache, backend, ttl, preview_mode)
        self.dashboard = dashboard
        self.visitor_data = visitor_data
        self.default_event_id = default_event_id

    async def fetch_registrations_for_event(
        self, event_id: Optional[int] = None
    ) -> List[RegistrationSummary]:
        result = await self.fetch_registrations_for_event_result(event_id)
        return result.value

    async def fetch_registrations_for_event_result(
        self, event_id: Optional[int] = None
    ) -> FetchResult[List[RegistrationSummary]]:
        """Registrations of an event, newest first."""
        event_id = self._event_id(event_id)
        return await self._fetch_with_cache(
            self._key(event_id),
            List[RegistrationSummary],
            lambda: self.backend.fetch_registrations(event_id),
            lambda: preview_registrations(event_id),
        )

    async def create_registration(
        self, data: RegistrationData, event_id: Optional[int] = None
    ) -> int:
        """
        Create a registration with its contact, visitors and payment.

        Returns:
            New registration id

        Raises:
            RegistrationCreationFailedException: If any backend step fails
        """
        event_id = self._event_id(event_id)
        key = self._key(event_id)

        if self.preview_mode:
            return preview_registration_id()

        try:
            registration_id = await self.backend.create_registration(data, event_id)
        except RemoteBackendException as e:
            logger.error(
                "Registration creation failed",
                name=data.name,
                event_id=event_id,
                error_code=e.error_code,
            )
            raise RegistrationCreationFailedException(data.name, e) from e

        await self._invalidate([key])
        await self.dashboard.invalidate()
        return registration_id

    async def delete_registration(
        self, registration_id: int, event_id: Optional[int] = None
    ) -> None:
        event_id = self._event_id(event_id)
        key = self._key(event_id)

        if self.preview_mode:
            return

        await self.backend.delete_registration(registration_id)
        logger.info(
            "Registration deleted", registration_id=registration_id, event_id=event_id
        )
        await self._invalidate([key])
        await self.visitor_data.invalidate_cache(registration_id)
        await self.dashboard.invalidate()

    async def invalidate_cache(self, event_id: Optional[int] = None) -> None:
        if self.preview_mode:
            return
        await self._invalidate([self._key(self._event_id(event_id))])

    def _event_id(self, event_id: Optional[int]) -> int:
        return self.default_event_id if event_id is None else event_id

    def _key(self, event_id: int) -> CacheKey:
        try:
            return CacheKey.registrations_for_event(event_id)
        except ValueError as e:
            raise InvalidDataException(str(e), field="event_id") from e
