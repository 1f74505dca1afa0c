"""
RNBA Admin Global Constants

Centralized location for all system-wide constants used across the application.
"""

from datetime import datetime, timezone

# Application Constants
APP_NAME = "RNBA Admin"
APP_VERSION = "1.0.0"

# Event registrations are filed under when no event is given
DEFAULT_EVENT_ID = 2024

# Persisted cache files
CACHE_FILE_SUFFIX = ".json"
EXPIRY_SIDECAR_SUFFIX = ".expiry"

# Dashboard food type identifiers (FoodType table)
FOOD_TYPE_VEGETARIAN = 1
FOOD_TYPE_NON_VEGETARIAN = 2

SYSTEM_STATUS_ONLINE = "Online"


# Timestamp Functions
def get_current_timestamp() -> datetime:
    """Get current timestamp with UTC timezone.

    Returns:
        datetime: Current UTC timestamp

    Note: Use this function instead of a constant to get real-time timestamps.
    """
    return datetime.now(timezone.utc)
