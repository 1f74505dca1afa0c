"""
Session Cache

In-memory cache tier living for the lifetime of the process.
Bounded LRU map so the first-look tier cannot grow without limit;
least-recently-used entries are evicted once the bound is reached.
"""

import logging
import threading
from collections import OrderedDict
from datetime import datetime
from typing import Any, Callable, Dict, Optional

from ...constants import get_current_timestamp
from ...domain.cache.entities import CacheEntry
from ...domain.cache.repository_interfaces import SessionStore
from ...domain.cache.value_objects import TTL

logger = logging.getLogger(__name__)


class SessionCache(SessionStore):
    """
    Thread-safe bounded LRU session store.

    Values are stored by reference. Operations never block on I/O.
    """

    def __init__(
        self,
        max_entries: int = 256,
        clock: Callable[[], datetime] = get_current_timestamp,
    ):
        if max_entries <= 0:
            raise ValueError("max_entries must be positive")
        self.max_entries = max_entries
        self._clock = clock
        self._entries: "OrderedDict[str, CacheEntry]" = OrderedDict()
        self._lock = threading.Lock()
        self._evictions = 0

    def set(self, key: str, value: Any, schema: Any = None) -> None:
        self.set_entry(key, CacheEntry.create(value, self._clock(), schema=schema))

    def set_with_expiry(
        self, key: str, value: Any, ttl: TTL, schema: Any = None
    ) -> None:
        self.set_entry(
            key, CacheEntry.create(value, self._clock(), ttl=ttl, schema=schema)
        )

    def set_entry(self, key: str, entry: CacheEntry) -> None:
        with self._lock:
            self._entries[key] = entry
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_entries:
                evicted_key, _ = self._entries.popitem(last=False)
                self._evictions += 1
                logger.debug(
                    f"Evicted {evicted_key} from session cache",
                    extra={"cache_key": evicted_key, "max_entries": self.max_entries},
                )

    def get(self, key: str) -> Optional[Any]:
        entry = self.get_entry(key)
        return entry.value if entry is not None else None

    def get_entry(self, key: str) -> Optional[CacheEntry]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None:
                self._entries.move_to_end(key)
            return entry

    def get_if_fresh(self, key: str, max_age: Optional[TTL] = None) -> Optional[Any]:
        """Return the value only while fresh; an expired entry is evicted."""
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None

            if entry.is_expired(now):
                del self._entries[key]
                logger.debug(
                    f"Session cache entry {key} expired",
                    extra={"cache_key": key},
                )
                return None

            if not entry.is_fresh(now, max_age):
                return None

            self._entries.move_to_end(key)
            return entry.value

    def remove(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def get_stats(self) -> Dict[str, int]:
        with self._lock:
            return {
                "entries": len(self._entries),
                "max_entries": self.max_entries,
                "evictions": self._evictions,
            }

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
