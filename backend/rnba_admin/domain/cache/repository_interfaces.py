"""
Cache Repository Interfaces

Abstract storage contracts for the two cache tiers.
The cache manager composes one implementation of each.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from .entities import CacheEntry
from .value_objects import TTL


class PersistentStore(ABC):
    """
    Abstract durable record store.

    Records are addressed by name inside a private storage root and
    survive process restarts. Implementations serialize records using the
    given schema.
    """

    @abstractmethod
    async def save(self, name: str, record: Any, schema: Any) -> None:
        """Serialize and atomically write ``record``; raises CacheWriteException."""
        pass

    @abstractmethod
    async def load(self, name: str, schema: Any) -> Any:
        """Read and validate a record; raises CacheNotFoundException or CacheDecodeException."""
        pass

    @abstractmethod
    async def exists(self, name: str) -> bool:
        """Check if a record exists. Never raises."""
        pass

    @abstractmethod
    async def delete(self, name: str) -> None:
        """Delete a record. Deleting an absent record succeeds."""
        pass

    @abstractmethod
    async def clear_all(self) -> int:
        """Delete every managed record. Returns the number removed."""
        pass


class SessionStore(ABC):
    """
    Abstract process-lifetime memory store.

    Operations are synchronous. Entries may disappear at any time, so a
    miss never proves the data does not exist.
    """

    @abstractmethod
    def set(self, key: str, value: Any, schema: Any = None) -> None:
        """Store value without expiry."""
        pass

    @abstractmethod
    def set_with_expiry(
        self, key: str, value: Any, ttl: TTL, schema: Any = None
    ) -> None:
        """Store value expiring after ``ttl``."""
        pass

    @abstractmethod
    def set_entry(self, key: str, entry: CacheEntry) -> None:
        """Store a prepared entry."""
        pass

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        """Get value ignoring expiry."""
        pass

    @abstractmethod
    def get_entry(self, key: str) -> Optional[CacheEntry]:
        """Get the raw entry ignoring expiry."""
        pass

    @abstractmethod
    def get_if_fresh(self, key: str, max_age: Optional[TTL] = None) -> Optional[Any]:
        """Get value only while fresh; evicts the entry once expired."""
        pass

    @abstractmethod
    def remove(self, key: str) -> None:
        pass

    @abstractmethod
    def clear(self) -> None:
        pass

    @abstractmethod
    def __contains__(self, key: str) -> bool:
        pass

    @abstractmethod
    def __len__(self) -> int:
        pass
