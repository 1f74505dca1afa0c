"""
Cache Storage Exceptions

Domain-specific exceptions for persisted cache operations.
Read paths of the cache manager treat these as misses; write paths
propagate them.
"""

from typing import Any, Dict, Optional


class CacheStoreException(Exception):
    """Base exception for cache storage errors.

    All persisted store operations should raise this or its subclasses.
    """

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


class CacheNotFoundException(CacheStoreException):
    """Raised when no persisted record exists for a name."""

    def __init__(self, name: str):
        super().__init__(
            message=f"Cache record not found: {name}",
            error_code="CACHE_NOT_FOUND",
            details={"name": name},
        )


class CacheDecodeException(CacheStoreException):
    """Raised when a persisted record cannot be parsed into the expected shape."""

    def __init__(self, name: str, original_error: Optional[Exception] = None):
        details = {"name": name}
        if original_error:
            details["original_error"] = str(original_error)
            details["original_error_type"] = type(original_error).__name__

        super().__init__(
            message=f"Cache record is corrupt or incompatible: {name}",
            error_code="CACHE_DECODE_ERROR",
            details=details,
        )
        if original_error:
            self.__cause__ = original_error


class CacheWriteException(CacheStoreException):
    """Raised when serializing or writing a record fails (disk full, permissions)."""

    def __init__(
        self,
        name: str,
        operation: str = "save",
        original_error: Optional[Exception] = None,
    ):
        details = {"name": name, "operation": operation}
        if original_error:
            details["original_error"] = str(original_error)
            details["original_error_type"] = type(original_error).__name__

        super().__init__(
            message=f"Cache {operation} failed for {name}",
            error_code="CACHE_WRITE_ERROR",
            details=details,
        )
        if original_error:
            self.__cause__ = original_error


class InvalidCacheNameException(CacheStoreException):
    """Raised when a record name would escape the storage root."""

    def __init__(self, name: str):
        super().__init__(
            message=f"Invalid cache record name: {name!r}",
            error_code="CACHE_INVALID_NAME",
            details={"name": name},
        )
