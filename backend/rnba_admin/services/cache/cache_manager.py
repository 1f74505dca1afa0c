"""
Cache Manager Service

Single entry point for cached data. Composes the in-memory session tier
and the persisted file tier behind one get/set/invalidate contract and
owns the tiering, expiry and fallback policy.
"""

import asyncio
import itertools
import logging
import threading
from datetime import datetime
from typing import Any, Callable, Dict, Optional

from opentelemetry import trace

from ...constants import get_current_timestamp
from ...domain.cache.entities import CacheEntry, ExpiryRecord
from ...domain.cache.repository_interfaces import PersistentStore, SessionStore
from ...domain.cache.value_objects import TTL, CacheKey
from ...infrastructure.storage.exceptions import (
    CacheDecodeException,
    CacheNotFoundException,
    CacheStoreException,
)
from ...monitoring.cache_metrics import (
    record_invalidation,
    record_lookup,
    record_write,
)

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

_EXPIRED = object()


class CacheManager:
    """
    Two-tier cache with time-based expiry and stale retention.

    Reads never raise: storage failures are reported as misses.
    Writes go to the session tier first and then to disk; a failed disk
    write raises while the session tier keeps the value.

    Every write may carry a token from ``reserve_write_token``. A write
    whose token is older than the last accepted write, invalidation or
    reset for the key is rejected, so a slow superseded fetch cannot
    overwrite newer data.
    """

    def __init__(
        self,
        store: PersistentStore,
        session: SessionStore,
        clock: Callable[[], datetime] = get_current_timestamp,
    ):
        self.store = store
        self.session = session
        self._clock = clock
        self._tokens = itertools.count(1)
        self._latest_tokens: Dict[str, int] = {}
        self._token_floor = 0
        self._token_lock = threading.Lock()
        self._key_locks: Dict[str, asyncio.Lock] = {}

    # Write ordering

    def reserve_write_token(self) -> int:
        """Reserve a token marking the start of a fetch."""
        with self._token_lock:
            return next(self._tokens)

    def _accept_token(self, key: CacheKey, token: Optional[int]) -> bool:
        with self._token_lock:
            if token is None:
                token = next(self._tokens)
            latest = max(self._latest_tokens.get(key.value, 0), self._token_floor)
            if token < latest:
                return False
            self._latest_tokens[key.value] = token
            return True

    def _supersede_pending_writes(self, key: CacheKey) -> None:
        with self._token_lock:
            self._latest_tokens[key.value] = next(self._tokens)

    def _lock_for(self, key: CacheKey) -> asyncio.Lock:
        lock = self._key_locks.get(key.value)
        if lock is None:
            lock = self._key_locks[key.value] = asyncio.Lock()
        return lock

    # Read path

    async def get(
        self, key: CacheKey, schema: Any, max_age: Optional[TTL] = None
    ) -> Optional[Any]:
        """
        Get cached value.

        Args:
            key: Cache key
            schema: Payload type the value was written under
            max_age: Freshness bound; ``None`` accepts stale values

        Returns:
            Cached value, or None on miss or when stale under ``max_age``
        """
        with tracer.start_as_current_span("cache_manager.get") as span:
            span.set_attribute("cache.key", key.value)
            span.set_attribute("cache.bounded", max_age is not None)

            self._drop_mismatched_session_entry(key, schema)

            if max_age is not None:
                value = self.session.get_if_fresh(key.value, max_age)
                if value is not None:
                    record_lookup("session", True)
                    span.set_attribute("cache.hit", "session")
                    logger.debug(f"Session cache hit for {key}")
                    return value
                record_lookup("session", False)

                # A tracked entry still held in memory is older than max_age.
                # Untracked entries fall through to disk, which has no age.
                entry = self.session.get_entry(key.value)
                if entry is not None and entry.expires_at is not None:
                    span.set_attribute("cache.hit", "stale")
                    return None

                expiry = await self._load_expiry(key)
                if expiry is _EXPIRED or (
                    expiry is not None and not self._is_fresh(expiry, max_age)
                ):
                    span.set_attribute("cache.hit", "stale")
                    logger.debug(
                        f"Cached value for {key} is stale",
                        extra={"cache_key": key.value, "max_age": max_age.seconds},
                    )
                    return None
            else:
                expiry = None
                value = self.session.get(key.value)
                if value is not None:
                    record_lookup("session", True)
                    span.set_attribute("cache.hit", "session")
                    return value
                record_lookup("session", False)

            value = await self._load_persisted(key, schema, expiry)
            span.set_attribute("cache.hit", "disk" if value is not None else "miss")
            return value

    def _drop_mismatched_session_entry(self, key: CacheKey, schema: Any) -> None:
        entry = self.session.get_entry(key.value)
        if entry is not None and not entry.matches_schema(schema):
            logger.warning(
                f"Session entry for {key} has a different payload type",
                extra={"cache_key": key.value},
            )
            self.session.remove(key.value)

    def _is_fresh(self, expiry: ExpiryRecord, max_age: TTL) -> bool:
        now = self._clock()
        return not expiry.is_expired(now) and expiry.age(now) <= max_age.as_timedelta()

    async def _load_expiry(self, key: CacheKey) -> Any:
        try:
            return await self.store.load(key.expiry_name, ExpiryRecord)
        except CacheNotFoundException:
            return None
        except CacheStoreException as e:
            logger.warning(
                f"Unreadable expiry record for {key}, treating value as stale: {e}",
                extra={"cache_key": key.value},
            )
            return _EXPIRED

    async def _load_persisted(
        self, key: CacheKey, schema: Any, expiry: Optional[ExpiryRecord]
    ) -> Optional[Any]:
        try:
            value = await self.store.load(key.value, schema)
        except CacheNotFoundException:
            record_lookup("disk", False)
            logger.debug(f"No cached data for {key}")
            return None
        except CacheDecodeException as e:
            record_lookup("disk", False)
            logger.warning(
                f"Discarding corrupt cache file for {key}: {e}",
                extra={"cache_key": key.value},
            )
            await self._delete_quietly(key.value)
            await self._delete_quietly(key.expiry_name)
            return None
        except CacheStoreException as e:
            record_lookup("disk", False)
            logger.warning(
                f"Cache read failed for {key}: {e}", extra={"cache_key": key.value}
            )
            return None

        record_lookup("disk", True)

        if expiry is None:
            try:
                expiry = await self.store.load(key.expiry_name, ExpiryRecord)
            except CacheStoreException:
                expiry = None

        if expiry is not None:
            self.session.set_entry(
                key.value,
                CacheEntry(
                    value=value,
                    stored_at=expiry.stored_at,
                    expires_at=expiry.expires_at,
                    schema=schema,
                ),
            )
        else:
            self.session.set(key.value, value, schema=schema)

        logger.debug(f"Disk cache hit for {key}", extra={"cache_key": key.value})
        return value

    # Write path

    async def set(
        self,
        key: CacheKey,
        value: Any,
        schema: Any,
        expires_in: Optional[TTL] = None,
        write_token: Optional[int] = None,
    ) -> bool:
        """
        Write value through both tiers.

        With ``expires_in`` the session copy expires, the disk copy is kept
        as a fallback and an expiry sidecar is persisted next to it.

        Returns:
            True if written, False if rejected as superseded

        Raises:
            CacheStoreException: If the persisted write fails
        """
        if value is None:
            raise ValueError("Cannot cache None")

        with tracer.start_as_current_span("cache_manager.set") as span:
            span.set_attribute("cache.key", key.value)
            span.set_attribute("cache.ttl", expires_in.seconds if expires_in else 0)

            async with self._lock_for(key):
                if not self._accept_token(key, write_token):
                    record_write("rejected")
                    span.set_attribute("cache.write_rejected", True)
                    logger.info(
                        f"Rejected superseded cache write for {key}",
                        extra={"cache_key": key.value, "write_token": write_token},
                    )
                    return False

                now = self._clock()
                entry = CacheEntry.create(value, now, ttl=expires_in, schema=schema)
                self.session.set_entry(key.value, entry)

                try:
                    await self.store.save(key.value, value, schema)
                    if expires_in is not None:
                        expiry = ExpiryRecord(
                            key=key.value, stored_at=now, expires_at=entry.expires_at
                        )
                        await self.store.save(key.expiry_name, expiry, ExpiryRecord)
                    else:
                        await self.store.delete(key.expiry_name)
                except CacheStoreException as e:
                    record_write("failed")
                    span.set_status(trace.Status(trace.StatusCode.ERROR, str(e)))
                    logger.error(
                        f"Failed to persist cache entry {key}: {e}",
                        extra={"cache_key": key.value},
                    )
                    raise

            record_write("accepted")
            logger.debug(
                f"Cached {key}",
                extra={
                    "cache_key": key.value,
                    "ttl": expires_in.seconds if expires_in else None,
                },
            )
            return True

    async def invalidate(self, key: CacheKey) -> None:
        """Remove key from both tiers. Never raises."""
        with tracer.start_as_current_span("cache_manager.invalidate") as span:
            span.set_attribute("cache.key", key.value)

            async with self._lock_for(key):
                self._supersede_pending_writes(key)
                self.session.remove(key.value)
                await self._delete_quietly(key.value)
                await self._delete_quietly(key.expiry_name)

            record_invalidation()
            logger.info(f"Invalidated {key}", extra={"cache_key": key.value})

    async def _delete_quietly(self, name: str) -> None:
        try:
            await self.store.delete(name)
        except CacheStoreException as e:
            logger.warning(
                f"Failed to delete cache file {name}: {e}", extra={"cache_name": name}
            )

    async def exists(self, key: CacheKey) -> bool:
        """Check if data exists in either tier."""
        return key.value in self.session or await self.store.exists(key.value)

    async def clear_all(self) -> int:
        """
        Empty the session tier and delete every persisted file.

        Returns:
            Number of persisted files removed
        """
        with tracer.start_as_current_span("cache_manager.clear_all") as span:
            with self._token_lock:
                self._token_floor = next(self._tokens)
            self.session.clear()
            removed = await self.store.clear_all()
            span.set_attribute("cache.removed", removed)
            logger.info("Cleared all cached data", extra={"removed_files": removed})
            return removed
