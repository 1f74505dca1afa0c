"""
Cached Data Service Base

Shared fetch-with-cache and invalidate-on-mutation flow for the
services that read the remote registration backend through the cache.
"""

from typing import Any, Awaitable, Callable, Iterable, TypeVar

import structlog
from opentelemetry import trace

from ...domain.cache.entities import FetchResult
from ...domain.cache.value_objects import TTL, CacheKey, DataSource
from ...infrastructure.backend.exceptions import RemoteBackendException
from ...infrastructure.backend.interface import RegistrationBackend
from ...infrastructure.storage.exceptions import CacheStoreException
from ...monitoring.cache_metrics import record_stale_fallback
from ..cache.cache_manager import CacheManager

logger = structlog.get_logger(__name__)
tracer = trace.get_tracer(__name__)

T = TypeVar("T")


class CachedDataService:
    """
    Base class for services owning one cache key family.

    Each service is the only writer of its keys. Reads try a fresh cached
    value, then the backend, then any cached value regardless of age.
    """

    service_name = "data"

    def __init__(
        self,
        cache: CacheManager,
        backend: RegistrationBackend,
        ttl: TTL,
        preview_mode: bool = False,
    ):
        self.cache = cache
        self.backend = backend
        self.ttl = ttl
        self.preview_mode = preview_mode

    async def _fetch_with_cache(
        self,
        key: CacheKey,
        schema: Any,
        fetch: Callable[[], Awaitable[T]],
        preview: Callable[[], T],
    ) -> FetchResult[T]:
        """
        Read through the cache.

        Args:
            key: Cache key owned by this service
            schema: Payload type stored under ``key``
            fetch: Backend call producing a fresh value
            preview: Demo value used in preview mode

        Returns:
            Value tagged with where it came from

        Raises:
            RemoteBackendException: If the fetch fails and nothing is cached
        """
        with tracer.start_as_current_span(f"{self.service_name}.fetch") as span:
            span.set_attribute("cache.key", key.value)
            try:
                result = await self._read_through(key, schema, fetch, preview)
            except Exception as e:
                span.set_status(trace.Status(trace.StatusCode.ERROR, str(e)))
                raise
            span.set_attribute("data.source", result.source.value)
            return result

    async def _read_through(
        self,
        key: CacheKey,
        schema: Any,
        fetch: Callable[[], Awaitable[T]],
        preview: Callable[[], T],
    ) -> FetchResult[T]:
        if self.preview_mode:
            return FetchResult(preview(), DataSource.PREVIEW)

        cached = await self.cache.get(key, schema, max_age=self.ttl)
        if cached is not None:
            logger.debug("Using cached data", service=self.service_name, key=str(key))
            return FetchResult(cached, DataSource.CACHE)

        write_token = self.cache.reserve_write_token()
        logger.info("Fetching fresh data", service=self.service_name, key=str(key))

        try:
            value = await fetch()
        except RemoteBackendException as e:
            stale = await self.cache.get(key, schema)
            if stale is None:
                logger.error(
                    "Backend fetch failed with nothing cached",
                    service=self.service_name,
                    key=str(key),
                    error=str(e),
                )
                raise

            record_stale_fallback(self.service_name)
            logger.warning(
                "Using expired cache as fallback due to backend error",
                service=self.service_name,
                key=str(key),
                error_code=e.error_code,
            )
            return FetchResult(stale, DataSource.STALE_CACHE, error=e)

        try:
            await self.cache.set(
                key, value, schema, expires_in=self.ttl, write_token=write_token
            )
        except CacheStoreException as e:
            logger.warning(
                "Fetched data kept in memory only, persisting failed",
                service=self.service_name,
                key=str(key),
                error=str(e),
            )

        return FetchResult(value, DataSource.REMOTE)

    async def _invalidate(self, keys: Iterable[CacheKey]) -> None:
        """Invalidate every given key after a successful mutation."""
        with tracer.start_as_current_span(f"{self.service_name}.invalidate"):
            for key in keys:
                await self.cache.invalidate(key)
