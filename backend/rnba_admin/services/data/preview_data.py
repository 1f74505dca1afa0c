"""
Preview Data

Fixed demo records served while the app runs in preview mode.
"""

import random
from datetime import datetime, timezone
from typing import List

from ...domain.registration.models import (
    DashboardStats,
    FoodTypeModel,
    RegistrationSummary,
    VisitorData,
    VisitTypeModel,
)

PREVIEW_DASHBOARD_STATS = DashboardStats(
    total_registrations_today=45,
    registrations_left_to_visit=12,
    total_visitors_today=128,
    visitors_left_to_visit=23,
    non_veg_visitors=76,
    non_veg_left_to_eat=15,
    veg_visitors=52,
    veg_left_to_eat=8,
    spot_registration_veg=18,
    spot_registration_non_veg=27,
    system_status="Online",
)

PREVIEW_REGISTRATIONS = [
    RegistrationSummary(
        registration_id=2,
        name="Jane Smith",
        created_at=datetime(2024, 10, 14, 11, 30, tzinfo=timezone.utc),
    ),
    RegistrationSummary(
        registration_id=1,
        name="John Doe",
        created_at=datetime(2024, 10, 14, 9, 0, tzinfo=timezone.utc),
    ),
]

PREVIEW_VISITOR_DATA = {
    1: [
        VisitorData(
            visitorid=1,
            food_preference="Vegetarian",
            visit_type="General Visit",
            completed=True,
        ),
        VisitorData(
            visitorid=2,
            food_preference="Non-Vegetarian",
            visit_type="Food Visit",
            completed=False,
        ),
    ],
    2: [
        VisitorData(
            visitorid=3,
            food_preference="Vegetarian",
            visit_type="General Visit",
            completed=False,
        ),
        VisitorData(
            visitorid=4, food_preference=None, visit_type="General Visit", completed=True
        ),
        VisitorData(
            visitorid=5,
            food_preference="Non-Vegetarian",
            visit_type="Food Visit",
            completed=True,
        ),
    ],
    3: [
        VisitorData(
            visitorid=6,
            food_preference="Vegetarian",
            visit_type="Food Visit",
            completed=False,
        ),
    ],
}

PREVIEW_VISIT_TYPES = [
    VisitTypeModel(visit_id=1, name="General Visit", with_food=False),
    VisitTypeModel(visit_id=2, name="Food Visit", with_food=True),
]

PREVIEW_FOOD_TYPES = [
    FoodTypeModel(food_type_id=1, name="Vegetarian"),
    FoodTypeModel(food_type_id=2, name="Non-Vegetarian"),
]


def preview_visitor_data(registration_id: int) -> List[VisitorData]:
    return list(PREVIEW_VISITOR_DATA.get(registration_id, []))


def preview_registrations(event_id: int) -> List[RegistrationSummary]:
    return list(PREVIEW_REGISTRATIONS)


def preview_registration_id() -> int:
    return random.randint(1, 1000)


def preview_visitor_id() -> int:
    return random.randint(1, 1000)
