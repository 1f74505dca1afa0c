"""
Data Service Exceptions

Errors raised by data services for problems that are not plain backend
failures.
"""

from typing import Any, Dict, Optional


class DataServiceException(Exception):
    """Base exception for data service errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


class RegistrationCreationFailedException(DataServiceException):
    """Raised when any step of creating a registration fails."""

    def __init__(self, name: str, original_error: Optional[Exception] = None):
        details = {"name": name}
        if original_error:
            details["original_error"] = str(original_error)
            details["original_error_type"] = type(original_error).__name__

        super().__init__(
            message="Failed to create registration",
            error_code="REGISTRATION_CREATION_FAILED",
            details=details,
        )
        if original_error:
            self.__cause__ = original_error


class InvalidDataException(DataServiceException):
    """Raised when caller-supplied data is rejected before reaching the backend."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(
            message=message,
            error_code="INVALID_DATA",
            details={"field": field} if field else {},
        )
