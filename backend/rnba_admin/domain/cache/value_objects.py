"""
Cache Value Objects

Immutable value objects for the local cache domain.
Provides type safety for cache keys, freshness windows and data provenance.
"""

import re
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum

from ...constants import EXPIRY_SIDECAR_SUFFIX


class DataSource(str, Enum):
    """Where a value returned by a data service came from."""

    REMOTE = "remote"
    CACHE = "cache"
    STALE_CACHE = "stale_cache"
    PREVIEW = "preview"


def _validate_identifier(identifier: int, name: str) -> int:
    if isinstance(identifier, bool) or not isinstance(identifier, int):
        raise ValueError(f"Invalid {name} format")
    if identifier < 0:
        raise ValueError(f"Invalid {name} format")
    return identifier


@dataclass(frozen=True)
class CacheKey:
    """
    Immutable cache key value object.

    Keys double as persisted file names, so only lowercase letters, digits
    and underscores are allowed. Distinct resources map to distinct keys.
    """

    value: str

    KEY_PATTERN = re.compile(r"^[a-z][a-z0-9_]*$")

    DASHBOARD_STATS = "dashboard_stats"
    REGISTRATIONS_PREFIX = "registrations_event_"
    VISITOR_DATA_PREFIX = "visitor_data_reg_"
    VISIT_TYPES = "visit_types"
    FOOD_TYPES = "food_types"

    def __post_init__(self) -> None:
        """Validate cache key format."""
        if not self.value:
            raise ValueError("Cache key cannot be empty")

        if len(self.value) > 200:
            raise ValueError("Cache key too long (max 200 characters)")

        if any(char.isspace() for char in self.value):
            raise ValueError("Cache key cannot contain whitespace")

        if not self.KEY_PATTERN.match(self.value):
            raise ValueError(f"Invalid cache key format: {self.value}")

    @classmethod
    def dashboard_stats(cls) -> "CacheKey":
        """Create dashboard statistics cache key."""
        return cls(cls.DASHBOARD_STATS)

    @classmethod
    def registrations_for_event(cls, event_id: int) -> "CacheKey":
        """Create per-event registration list cache key."""
        event_id = _validate_identifier(event_id, "event ID")
        return cls(f"{cls.REGISTRATIONS_PREFIX}{event_id}")

    @classmethod
    def visitor_data(cls, registration_id: int) -> "CacheKey":
        """Create per-registration visitor list cache key."""
        registration_id = _validate_identifier(registration_id, "registration ID")
        return cls(f"{cls.VISITOR_DATA_PREFIX}{registration_id}")

    @classmethod
    def visit_types(cls) -> "CacheKey":
        """Create visit type lookup cache key."""
        return cls(cls.VISIT_TYPES)

    @classmethod
    def food_types(cls) -> "CacheKey":
        """Create food type lookup cache key."""
        return cls(cls.FOOD_TYPES)

    @property
    def expiry_name(self) -> str:
        """Storage name of the expiry sidecar; never a valid key itself."""
        return f"{self.value}{EXPIRY_SIDECAR_SUFFIX}"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class TTL:
    """
    Time To Live value object for cache freshness windows.

    Provides type-safe TTL configuration with validation.
    """

    seconds: int

    def __post_init__(self) -> None:
        """Validate TTL value."""
        if self.seconds <= 0:
            raise ValueError("TTL must be positive")
        if self.seconds > 86400 * 365:  # Max 1 year
            raise ValueError("TTL too large (max 1 year)")

    @classmethod
    def of_seconds(cls, seconds: int) -> "TTL":
        """Create TTL from seconds."""
        return cls(seconds)

    @classmethod
    def minutes(cls, minutes: int) -> "TTL":
        """Create TTL from minutes."""
        return cls(minutes * 60)

    @classmethod
    def hours(cls, hours: int) -> "TTL":
        """Create TTL from hours."""
        return cls(hours * 3600)

    # Common TTL presets
    @classmethod
    def dashboard_stats(cls) -> "TTL":
        """Dashboard statistics TTL (5 minutes)."""
        return cls.minutes(5)

    @classmethod
    def registrations(cls) -> "TTL":
        """Registration list TTL (30 minutes)."""
        return cls.minutes(30)

    @classmethod
    def visitor_data(cls) -> "TTL":
        """Visitor list TTL (5 minutes)."""
        return cls.minutes(5)

    @classmethod
    def reference_data(cls) -> "TTL":
        """Lookup table TTL (24 hours)."""
        return cls.hours(24)

    def as_timedelta(self) -> timedelta:
        return timedelta(seconds=self.seconds)

    def __str__(self) -> str:
        return f"{self.seconds}s"
