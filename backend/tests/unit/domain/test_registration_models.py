"""
Unit tests for Registration Domain Models.
"""

import pytest
from datetime import datetime, timezone
from decimal import Decimal

from pydantic import ValidationError

from rnba_admin.domain.registration.models import (
    ContactDetails,
    DashboardStats,
    FoodPreference,
    PaymentType,
    PersonData,
    RegistrationData,
    RegistrationSummary,
    Visitor,
    VisitorData,
    VisitType,
)

CREATED = datetime(2024, 10, 14, 9, 0, tzinfo=timezone.utc)


def make_visitor(visitor_id, registration_id, food_type_id=None, completed=False):
    return Visitor(
        visitor_id=visitor_id,
        created_at=CREATED,
        registration_id=registration_id,
        visit_id=1,
        food_type_id=food_type_id,
        completed=completed,
    )


class TestEnums:
    def test_display_names(self):
        assert VisitType.FOOD_VISIT.display_name == "Food Visit"
        assert FoodPreference.NON_VEGETARIAN.display_name == "Non-Vegetarian"
        assert PaymentType.CARD.display_name == "Card"

    def test_food_type_ids(self):
        """No preference is stored as a null food type."""
        assert FoodPreference.NONE.food_type_id is None
        assert FoodPreference.VEGETARIAN.food_type_id == 1
        assert FoodPreference.NON_VEGETARIAN.food_type_id == 2


class TestRecords:
    def test_backend_column_names_accepted(self):
        summary = RegistrationSummary.model_validate(
            {"RegistrationID": 7, "Name": "John Doe", "created_at": "2024-10-14T09:00:00Z"}
        )

        assert summary.registration_id == 7
        assert summary.name == "John Doe"
        assert summary.created_at == CREATED

    def test_visitor_row(self):
        visitor = Visitor.model_validate(
            {
                "VisitorID": 3,
                "created_at": "2024-10-14T09:00:00Z",
                "RegistrationID": 7,
                "VisitID": 2,
                "FoodTypeID": None,
                "Completed": True,
            }
        )

        assert visitor.food_type_id is None
        assert visitor.completed

    def test_visitor_data_display(self):
        data = VisitorData(visitorid=4, completed=False)

        assert data.display_name == "Visitor #4"
        assert data.completion_status == "Pending"


class TestDashboardStats:
    """Test aggregation of today's registrations and visitors."""

    def test_from_records(self):
        visitors = [
            make_visitor(1, 10, food_type_id=1, completed=True),
            make_visitor(2, 10, food_type_id=2, completed=False),
            make_visitor(3, 11, food_type_id=1, completed=False),
            make_visitor(4, 12, food_type_id=None, completed=True),
            # registration from an earlier day
            make_visitor(5, 3, food_type_id=2, completed=True),
        ]

        stats = DashboardStats.from_records([10, 11, 12], visitors)

        assert stats.total_registrations_today == 3
        assert stats.registrations_left_to_visit == 2
        assert stats.total_visitors_today == 5
        assert stats.visitors_left_to_visit == 2
        assert stats.veg_visitors == 2
        assert stats.veg_left_to_eat == 1
        assert stats.non_veg_visitors == 2
        assert stats.non_veg_left_to_eat == 1
        assert stats.spot_registration_veg == 2
        assert stats.spot_registration_non_veg == 1
        assert stats.system_status == "Online"

    def test_camel_case_names_accepted(self):
        stats = DashboardStats.model_validate({"totalRegistrationsToday": 5})

        assert stats.total_registrations_today == 5

    def test_unknown_fields_rejected(self):
        with pytest.raises(ValidationError):
            DashboardStats.model_validate({"RegistrationID": 7, "Name": "x"})

    def test_empty_day(self):
        stats = DashboardStats.from_records([], [])

        assert stats.total_registrations_today == 0
        assert stats.visitors_left_to_visit == 0


class TestRegistrationData:
    """Test registration payload validation and row building."""

    def test_defaults(self):
        data = RegistrationData(name="  Jane Smith ")

        assert data.name == "Jane Smith"
        assert data.number_of_persons == 1
        assert not data.has_payment

    @pytest.mark.parametrize("name", ["", "   "])
    def test_blank_name_rejected(self, name):
        with pytest.raises(ValidationError):
            RegistrationData(name=name)

    def test_persons_required(self):
        with pytest.raises(ValidationError):
            RegistrationData(name="Jane", persons=[])

    def test_negative_payment_rejected(self):
        with pytest.raises(ValidationError):
            RegistrationData(name="Jane", payment_amount=Decimal("-1"))

    def test_rows(self):
        data = RegistrationData(
            name="Jane",
            persons=[
                PersonData(
                    visit_type=VisitType.FOOD_VISIT,
                    food_preference=FoodPreference.VEGETARIAN,
                )
            ],
            contact_details=ContactDetails(phone="123", email="jane@example.com"),
            payment_type=PaymentType.ONLINE,
            payment_amount=Decimal("25.50"),
            payment_remarks="paid at desk",
        )

        assert data.to_registration_row(contact_id=5, event_id=2024) == {
            "Name": "Jane",
            "Contact": 5,
            "Event": 2024,
        }
        assert data.persons[0].to_visitor_row(42) == {
            "RegistrationID": 42,
            "VisitID": 2,
            "FoodTypeID": 1,
            "Completed": False,
        }
        assert data.to_payment_row(42) == {
            "PaymentTypeID": 3,
            "RegistrationID": 42,
            "Amount": "25.50",
            "Remarks": "paid at desk",
        }

    def test_empty_mobile_is_null(self):
        row = ContactDetails(phone="123").to_row()

        assert row["Mobile"] is None
        assert row["Telephone"] == "123"
