"""
Unit tests for Reference Data Service.
"""

import pytest

from rnba_admin.domain.cache.value_objects import CacheKey, DataSource
from rnba_admin.domain.registration.models import FoodTypeModel, VisitTypeModel
from rnba_admin.services.data.reference_data_service import ReferenceDataService


@pytest.fixture
def reference_data(cache_manager, backend):
    return ReferenceDataService(cache_manager, backend)


class TestReferenceDataService:
    @pytest.mark.asyncio
    async def test_lookup_tables_cached_for_a_day(
        self, reference_data, backend, clock
    ):
        backend.fetch_visit_types.return_value = [
            VisitTypeModel(visit_id=1, name="General Visit")
        ]
        backend.fetch_food_types.return_value = [
            FoodTypeModel(food_type_id=1, name="Vegetarian")
        ]

        await reference_data.fetch_visit_types()
        await reference_data.fetch_food_types()
        clock.advance(23 * 3600)
        visit_types = await reference_data.fetch_visit_types_result()
        food_types = await reference_data.fetch_food_types_result()

        assert visit_types.source == DataSource.CACHE
        assert food_types.value[0].name == "Vegetarian"
        backend.fetch_visit_types.assert_awaited_once()
        backend.fetch_food_types.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_invalidate_cache(self, reference_data, backend, cache_manager):
        backend.fetch_visit_types.return_value = []
        backend.fetch_food_types.return_value = []
        await reference_data.fetch_visit_types()
        await reference_data.fetch_food_types()

        await reference_data.invalidate_cache()

        assert not await cache_manager.exists(CacheKey.visit_types())
        assert not await cache_manager.exists(CacheKey.food_types())

    @pytest.mark.asyncio
    async def test_preview_mode(self, cache_manager, backend):
        service = ReferenceDataService(cache_manager, backend, preview_mode=True)

        visit_types = await service.fetch_visit_types()
        food_types = await service.fetch_food_types()

        assert [v.name for v in visit_types] == ["General Visit", "Food Visit"]
        assert [f.name for f in food_types] == ["Vegetarian", "Non-Vegetarian"]
        backend.fetch_visit_types.assert_not_awaited()
