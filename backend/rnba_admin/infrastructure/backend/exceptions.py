"""
Remote Backend Exceptions

Failures talking to the hosted registration database. Data services fall
back to stale cached values on any of these.
"""

from typing import Any, Dict, Optional


class RemoteBackendException(Exception):
    """Base exception for remote backend errors."""

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


class RemoteConnectionException(RemoteBackendException):
    """Raised when the backend cannot be reached or times out."""

    def __init__(self, operation: str, original_error: Optional[Exception] = None):
        details = {"operation": operation}
        if original_error:
            details["original_error"] = str(original_error)
            details["original_error_type"] = type(original_error).__name__

        super().__init__(
            message=f"Backend unreachable during {operation}",
            error_code="REMOTE_CONNECTION_ERROR",
            details=details,
        )
        if original_error:
            self.__cause__ = original_error


class RemoteAuthorizationException(RemoteBackendException):
    """Raised when the backend rejects the configured credentials."""

    def __init__(self, operation: str, status_code: int):
        super().__init__(
            message=f"Backend rejected credentials during {operation}",
            error_code="REMOTE_AUTHORIZATION_ERROR",
            details={"operation": operation, "status_code": status_code},
        )
        self.status_code = status_code


class RemoteResponseException(RemoteBackendException):
    """Raised when the backend answers with an error status."""

    def __init__(self, operation: str, status_code: int, body: str = ""):
        super().__init__(
            message=f"Backend returned {status_code} during {operation}",
            error_code="REMOTE_RESPONSE_ERROR",
            details={"operation": operation, "status_code": status_code, "body": body},
        )
        self.status_code = status_code


class RemoteDecodeException(RemoteBackendException):
    """Raised when a backend response does not match the expected records."""

    def __init__(self, operation: str, original_error: Optional[Exception] = None):
        details = {"operation": operation}
        if original_error:
            details["original_error"] = str(original_error)

        super().__init__(
            message=f"Unexpected backend response during {operation}",
            error_code="REMOTE_DECODE_ERROR",
            details=details,
        )
        if original_error:
            self.__cause__ = original_error
