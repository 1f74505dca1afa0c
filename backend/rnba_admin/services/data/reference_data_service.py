"""
Reference Data Service

Visit type and food type lookup tables used to build registration forms.
"""

from typing import List

from ...domain.cache.entities import FetchResult
from ...domain.cache.value_objects import TTL, CacheKey
from ...domain.registration.models import FoodTypeModel, VisitTypeModel
from ...infrastructure.backend.interface import RegistrationBackend
from ..cache.cache_manager import CacheManager
from .base import CachedDataService
from .preview_data import PREVIEW_FOOD_TYPES, PREVIEW_VISIT_TYPES


class ReferenceDataService(CachedDataService):
    """Serves lookup tables under ``visit_types`` and ``food_types``."""

    service_name = "reference_data"

    def __init__(
        self,
        cache: CacheManager,
        backend: RegistrationBackend,
        ttl: TTL = TTL.reference_data(),
        preview_mode: bool = False,
    ):
        super().__init__(cache, backend, ttl, preview_mode)

    async def fetch_visit_types(self) -> List[VisitTypeModel]:
        result = await self.fetch_visit_types_result()
        return result.value

    async def fetch_visit_types_result(self) -> FetchResult[List[VisitTypeModel]]:
        return await self._fetch_with_cache(
            CacheKey.visit_types(),
            List[VisitTypeModel],
            self.backend.fetch_visit_types,
            lambda: list(PREVIEW_VISIT_TYPES),
        )

    async def fetch_food_types(self) -> List[FoodTypeModel]:
        result = await self.fetch_food_types_result()
        return result.value

    async def fetch_food_types_result(self) -> FetchResult[List[FoodTypeModel]]:
        return await self._fetch_with_cache(
            CacheKey.food_types(),
            List[FoodTypeModel],
            self.backend.fetch_food_types,
            lambda: list(PREVIEW_FOOD_TYPES),
        )

    async def invalidate_cache(self) -> None:
        if self.preview_mode:
            return
        await self._invalidate([CacheKey.visit_types(), CacheKey.food_types()])
