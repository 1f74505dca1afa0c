"""
Registration Domain Module

Records for registrations, visitors, lookups and dashboard statistics.
"""

from .models import (
    ContactDetails,
    DashboardStats,
    FoodPreference,
    FoodTypeModel,
    PaymentType,
    PersonData,
    Registration,
    RegistrationData,
    RegistrationSummary,
    Visitor,
    VisitorData,
    VisitType,
    VisitTypeModel,
)

__all__ = [
    "ContactDetails",
    "DashboardStats",
    "FoodPreference",
    "FoodTypeModel",
    "PaymentType",
    "PersonData",
    "Registration",
    "RegistrationData",
    "RegistrationSummary",
    "Visitor",
    "VisitorData",
    "VisitType",
    "VisitTypeModel",
]
