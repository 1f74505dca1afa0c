"""Domain data services reading the registration backend through the cache."""

from .base import CachedDataService
from .dashboard_service import DashboardService
from .exceptions import (
    DataServiceException,
    InvalidDataException,
    RegistrationCreationFailedException,
)
from .reference_data_service import ReferenceDataService
from .registration_service import RegistrationService
from .visitor_data_service import VisitorDataService

__all__ = [
    "CachedDataService",
    "DashboardService",
    "RegistrationService",
    "VisitorDataService",
    "ReferenceDataService",
    "DataServiceException",
    "InvalidDataException",
    "RegistrationCreationFailedException",
]
