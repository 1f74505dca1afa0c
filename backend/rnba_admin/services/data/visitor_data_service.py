"""
Visitor Data Service

Visitors of a single registration, as shown on the check-in screen,
and the mutations made from it.
"""

from typing import List

import structlog

from ...domain.cache.entities import FetchResult
from ...domain.cache.value_objects import TTL, CacheKey
from ...domain.registration.models import PersonData, VisitorData
from ...infrastructure.backend.interface import RegistrationBackend
from ..cache.cache_manager import CacheManager
from .base import CachedDataService
from .dashboard_service import DashboardService
from .exceptions import InvalidDataException
from .preview_data import preview_visitor_data, preview_visitor_id

logger = structlog.get_logger(__name__)


class VisitorDataService(CachedDataService):
    """
    Serves visitor lists under ``visitor_data_reg_<id>``.

    Every mutation invalidates the registration's visitor list and the
    dashboard stats once the backend confirms it.
    """

    service_name = "visitor_data"

    def __init__(
        self,
        cache: CacheManager,
        backend: RegistrationBackend,
        dashboard: DashboardService,
        ttl: TTL = TTL.visitor_data(),
        preview_mode: bool = False,
    ):
        super().__init__(cache, backend, ttl, preview_mode)
        self.dashboard = dashboard

    async def fetch_visitor_data(self, registration_id: int) -> List[VisitorData]:
        result = await self.fetch_visitor_data_result(registration_id)
        return result.value

    async def fetch_visitor_data_result(
        self, registration_id: int
    ) -> FetchResult[List[VisitorData]]:
        key = self._key(registration_id)
        return await self._fetch_with_cache(
            key,
            List[VisitorData],
            lambda: self.backend.fetch_visitor_data(registration_id),
            lambda: preview_visitor_data(registration_id),
        )

    async def update_visitor_completion(
        self, visitor_id: int, registration_id: int, completed: bool
    ) -> None:
        """Mark a visitor as checked in or not."""
        key = self._key(registration_id)
        if self.preview_mode:
            return

        await self.backend.update_visitor_completion(visitor_id, completed)
        logger.info(
            "Visitor completion updated",
            visitor_id=visitor_id,
            registration_id=registration_id,
            completed=completed,
        )
        await self._after_mutation(key)

    async def delete_visitor(self, visitor_id: int, registration_id: int) -> None:
        key = self._key(registration_id)
        if self.preview_mode:
            return

        await self.backend.delete_visitor(visitor_id)
        logger.info(
            "Visitor deleted", visitor_id=visitor_id, registration_id=registration_id
        )
        await self._after_mutation(key)

    async def add_visitor(self, registration_id: int, person: PersonData) -> int:
        """
        Add a visitor to an existing registration.

        Returns:
            New visitor id
        """
        key = self._key(registration_id)
        if self.preview_mode:
            return preview_visitor_id()

        visitor_id = await self.backend.add_visitor(registration_id, person)
        logger.info(
            "Visitor added", visitor_id=visitor_id, registration_id=registration_id
        )
        await self._after_mutation(key)
        return visitor_id

    async def invalidate_cache(self, registration_id: int) -> None:
        if self.preview_mode:
            return
        await self._invalidate([self._key(registration_id)])

    async def _after_mutation(self, key: CacheKey) -> None:
        await self._invalidate([key])
        await self.dashboard.invalidate()

    def _key(self, registration_id: int) -> CacheKey:
        try:
            return CacheKey.visitor_data(registration_id)
        except ValueError as e:
            raise InvalidDataException(str(e), field="registration_id") from e
