"""
Registration Domain Models

Records mirroring the remote registration tables and the payloads sent
to create them. Column names of the backend are accepted as aliases.
"""

from datetime import datetime
from decimal import Decimal
from enum import IntEnum
from typing import Any, Dict, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from ...constants import (
    FOOD_TYPE_NON_VEGETARIAN,
    FOOD_TYPE_VEGETARIAN,
    SYSTEM_STATUS_ONLINE,
)


class VisitType(IntEnum):
    """Visit type lookup values."""

    GENERAL_VISIT = 1
    FOOD_VISIT = 2

    @property
    def display_name(self) -> str:
        return {
            VisitType.GENERAL_VISIT: "General Visit",
            VisitType.FOOD_VISIT: "Food Visit",
        }[self]


class FoodPreference(IntEnum):
    """Food preference of a visitor; NONE is stored as a null food type."""

    NONE = 0
    VEGETARIAN = FOOD_TYPE_VEGETARIAN
    NON_VEGETARIAN = FOOD_TYPE_NON_VEGETARIAN

    @property
    def food_type_id(self) -> Optional[int]:
        return None if self is FoodPreference.NONE else int(self)

    @property
    def display_name(self) -> str:
        return {
            FoodPreference.NONE: "No Preference",
            FoodPreference.VEGETARIAN: "Vegetarian",
            FoodPreference.NON_VEGETARIAN: "Non-Vegetarian",
        }[self]


class PaymentType(IntEnum):
    """Payment type lookup values."""

    CASH = 1
    CARD = 2
    ONLINE = 3

    @property
    def display_name(self) -> str:
        return self.name.capitalize()


class _Record(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class RegistrationSummary(_Record):
    """Registration row as shown in the registration list."""

    registration_id: int = Field(..., alias="RegistrationID")
    name: str = Field(..., alias="Name")
    created_at: datetime = Field(..., alias="created_at")


class Registration(_Record):
    """Registration table row."""

    registration_id: int = Field(..., alias="RegistrationID")
    created_at: datetime = Field(..., alias="created_at")
    name: str = Field(..., alias="Name")
    contact_id: int = Field(..., alias="Contact")
    event_id: int = Field(..., alias="Event")


class Visitor(_Record):
    """Visitors table row."""

    visitor_id: int = Field(..., alias="VisitorID")
    created_at: datetime = Field(..., alias="created_at")
    registration_id: int = Field(..., alias="RegistrationID")
    visit_id: int = Field(..., alias="VisitID")
    food_type_id: Optional[int] = Field(None, alias="FoodTypeID")
    completed: bool = Field(False, alias="Completed")


class VisitorData(_Record):
    """Visitor row returned by the ``getvisitordata`` RPC function."""

    visitorid: int
    food_preference: Optional[str] = None
    visit_type: Optional[str] = None
    completed: bool = False

    @property
    def display_name(self) -> str:
        return f"Visitor #{self.visitorid}"

    @property
    def completion_status(self) -> str:
        return "Completed" if self.completed else "Pending"


class VisitTypeModel(_Record):
    """VisitType lookup row."""

    visit_id: int = Field(..., alias="VisitID")
    name: str = Field(..., alias="Name")
    with_food: bool = Field(False, alias="WithFood")


class FoodTypeModel(_Record):
    """FoodType lookup row."""

    food_type_id: int = Field(..., alias="FoodTypeID")
    name: str = Field(..., alias="Name")


class DashboardStats(_Record):
    """
    Aggregate counts shown on the overview screen.

    Accepts snake_case or camelCase names; unknown fields are rejected so
    a payload of another record type never reads as an empty dashboard.
    """

    model_config = ConfigDict(alias_generator=to_camel, extra="forbid")

    total_registrations_today: int = 0
    registrations_left_to_visit: int = 0
    total_visitors_today: int = 0
    visitors_left_to_visit: int = 0
    non_veg_visitors: int = 0
    non_veg_left_to_eat: int = 0
    veg_visitors: int = 0
    veg_left_to_eat: int = 0
    spot_registration_veg: int = 0
    spot_registration_non_veg: int = 0
    system_status: str = SYSTEM_STATUS_ONLINE

    @classmethod
    def from_records(
        cls,
        registration_ids: Iterable[int],
        visitors: Iterable[Visitor],
        system_status: str = SYSTEM_STATUS_ONLINE,
    ) -> "DashboardStats":
        """
        Aggregate today's registrations and visitors.

        A registration is left to visit while at least one of its visitors
        is not completed. Spot registrations are those created today.
        """
        todays_registrations = set(registration_ids)
        visitors = list(visitors)
        pending = [v for v in visitors if not v.completed]
        veg = [v for v in visitors if v.food_type_id == FOOD_TYPE_VEGETARIAN]
        non_veg = [v for v in visitors if v.food_type_id == FOOD_TYPE_NON_VEGETARIAN]

        return cls(
            total_registrations_today=len(todays_registrations),
            registrations_left_to_visit=len({v.registration_id for v in pending}),
            total_visitors_today=len(visitors),
            visitors_left_to_visit=len(pending),
            non_veg_visitors=len(non_veg),
            non_veg_left_to_eat=sum(1 for v in non_veg if not v.completed),
            veg_visitors=len(veg),
            veg_left_to_eat=sum(1 for v in veg if not v.completed),
            spot_registration_veg=sum(
                1 for v in veg if v.registration_id in todays_registrations
            ),
            spot_registration_non_veg=sum(
                1 for v in non_veg if v.registration_id in todays_registrations
            ),
            system_status=system_status,
        )


class ContactDetails(BaseModel):
    """Contact information captured with a registration."""

    phone: str = ""
    email: str = ""
    mobile: str = ""
    address: str = ""

    def to_row(self) -> Dict[str, Any]:
        return {
            "Telephone": self.phone,
            "Mobile": self.mobile or None,
            "Email": self.email,
            "Address": self.address,
        }


class PersonData(BaseModel):
    """One person attending under a registration."""

    visit_type: VisitType = VisitType.GENERAL_VISIT
    food_preference: FoodPreference = FoodPreference.NONE

    def to_visitor_row(self, registration_id: int) -> Dict[str, Any]:
        return {
            "RegistrationID": registration_id,
            "VisitID": int(self.visit_type),
            "FoodTypeID": self.food_preference.food_type_id,
            "Completed": False,
        }


class RegistrationData(BaseModel):
    """Payload for creating a registration with its visitors and payment."""

    name: str = Field(..., min_length=1)
    persons: List[PersonData] = Field(default_factory=lambda: [PersonData()])
    contact_details: ContactDetails = Field(default_factory=ContactDetails)
    payment_type: PaymentType = PaymentType.CASH
    payment_amount: Decimal = Field(default=Decimal("0"), ge=0)
    payment_remarks: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        """Reject blank names."""
        if not v.strip():
            raise ValueError("Registration name cannot be blank")
        return v.strip()

    @field_validator("persons")
    @classmethod
    def validate_persons(cls, v):
        """At least one person must attend."""
        if not v:
            raise ValueError("Registration needs at least one person")
        return v

    @property
    def number_of_persons(self) -> int:
        return len(self.persons)

    @property
    def has_payment(self) -> bool:
        return self.payment_amount > 0

    def to_registration_row(self, contact_id: int, event_id: int) -> Dict[str, Any]:
        return {"Name": self.name, "Contact": contact_id, "Event": event_id}

    def to_payment_row(self, registration_id: int) -> Dict[str, Any]:
        return {
            "PaymentTypeID": int(self.payment_type),
            "RegistrationID": registration_id,
            "Amount": str(self.payment_amount),
            "Remarks": self.payment_remarks,
        }
