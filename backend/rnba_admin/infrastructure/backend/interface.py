"""
Registration Backend Interface

Abstract contract for the hosted database holding registrations,
visitors and payments. Data services depend on this interface only.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List

from ...domain.registration.models import (
    DashboardStats,
    FoodTypeModel,
    PersonData,
    RegistrationData,
    RegistrationSummary,
    VisitorData,
    VisitTypeModel,
)


class RegistrationBackend(ABC):
    """
    Remote registration database.

    Implementations raise ``RemoteBackendException`` subclasses on any
    failure to produce a result.
    """

    @abstractmethod
    async def fetch_dashboard_stats(self, since: datetime) -> DashboardStats:
        """Aggregate registrations and visitors created at or after ``since``."""
        pass

    @abstractmethod
    async def fetch_registrations(self, event_id: int) -> List[RegistrationSummary]:
        """Registrations of an event, newest first."""
        pass

    @abstractmethod
    async def create_registration(self, data: RegistrationData, event_id: int) -> int:
        """
        Create contact, registration, visitors and payment.

        Returns:
            New registration id
        """
        pass

    @abstractmethod
    async def delete_registration(self, registration_id: int) -> None:
        """Delete a registration together with its visitors."""
        pass

    @abstractmethod
    async def fetch_visitor_data(self, registration_id: int) -> List[VisitorData]:
        """Visitors of a registration with resolved type names."""
        pass

    @abstractmethod
    async def update_visitor_completion(self, visitor_id: int, completed: bool) -> None:
        pass

    @abstractmethod
    async def delete_visitor(self, visitor_id: int) -> None:
        pass

    @abstractmethod
    async def add_visitor(self, registration_id: int, person: PersonData) -> int:
        """
        Add a visitor to an existing registration.

        Returns:
            New visitor id
        """
        pass

    @abstractmethod
    async def fetch_visit_types(self) -> List[VisitTypeModel]:
        pass

    @abstractmethod
    async def fetch_food_types(self) -> List[FoodTypeModel]:
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check backend reachability. Never raises."""
        pass

    @abstractmethod
    async def aclose(self) -> None:
        """Release network resources."""
        pass
