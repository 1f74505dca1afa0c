"""
Cache Domain Entities

Core domain entities for the local cache.
Encapsulates freshness rules shared by the in-memory and persisted tiers.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, Field

from .value_objects import TTL, DataSource

T = TypeVar("T")


@dataclass
class CacheEntry(Generic[T]):
    """
    In-memory cache entry.

    ``expires_at`` of ``None`` means no expiry is tracked for the entry.
    ``schema`` records the payload type the entry was written under.
    """

    value: T
    stored_at: datetime
    expires_at: Optional[datetime] = None
    schema: Any = None

    @classmethod
    def create(
        cls,
        value: T,
        now: datetime,
        ttl: Optional[TTL] = None,
        schema: Any = None,
    ) -> "CacheEntry[T]":
        """Create new cache entry, optionally expiring after ``ttl``."""
        expires_at = now + ttl.as_timedelta() if ttl else None
        return cls(value=value, stored_at=now, expires_at=expires_at, schema=schema)

    def is_expired(self, now: datetime) -> bool:
        """Check if the recorded expiry has passed."""
        return self.expires_at is not None and now >= self.expires_at

    def is_fresh(self, now: datetime, max_age: Optional[TTL] = None) -> bool:
        """
        Check if the entry may be served by a freshness-bound read.

        An entry without recorded expiry is only fresh when a ``max_age``
        bound is given and the entry is younger than it.
        """
        if self.expires_at is None and max_age is None:
            return False
        if self.is_expired(now):
            return False
        if max_age is not None and now - self.stored_at > max_age.as_timedelta():
            return False
        return True

    def matches_schema(self, schema: Any) -> bool:
        """Check if the entry was written under ``schema``."""
        return self.schema is None or schema is None or self.schema == schema


class ExpiryRecord(BaseModel):
    """Persisted sidecar holding the absolute expiry of a cached value."""

    key: str = Field(..., description="Cache key the expiry belongs to")
    stored_at: datetime = Field(..., description="When the value was written")
    expires_at: datetime = Field(..., description="Absolute expiry instant")

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at

    def age(self, now: datetime) -> timedelta:
        return now - self.stored_at


@dataclass(frozen=True)
class FetchResult(Generic[T]):
    """
    Value returned by a data service tagged with its provenance.

    Lets callers tell fresh data from a stale fallback served because the
    backend could not be reached.
    """

    value: T
    source: DataSource
    error: Optional[Exception] = None

    @property
    def is_stale(self) -> bool:
        return self.source == DataSource.STALE_CACHE

    @property
    def from_cache(self) -> bool:
        return self.source in (DataSource.CACHE, DataSource.STALE_CACHE)
