"""
Cache Storage Infrastructure

Persisted (JSON file) and in-memory (bounded LRU) cache tiers.
"""

from .exceptions import (
    CacheDecodeException,
    CacheNotFoundException,
    CacheStoreException,
    CacheWriteException,
    InvalidCacheNameException,
)
from .file_store import FileCacheStore
from .session_cache import SessionCache

__all__ = [
    "CacheDecodeException",
    "CacheNotFoundException",
    "CacheStoreException",
    "CacheWriteException",
    "InvalidCacheNameException",
    "FileCacheStore",
    "SessionCache",
]
