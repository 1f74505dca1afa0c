"""
Cache Domain Module

Value objects, entities and repository interfaces for the two-tier
local cache.
"""

from .entities import CacheEntry, ExpiryRecord, FetchResult
from .repository_interfaces import PersistentStore, SessionStore
from .value_objects import TTL, CacheKey, DataSource

__all__ = [
    "CacheEntry",
    "ExpiryRecord",
    "FetchResult",
    "PersistentStore",
    "SessionStore",
    "TTL",
    "CacheKey",
    "DataSource",
]
