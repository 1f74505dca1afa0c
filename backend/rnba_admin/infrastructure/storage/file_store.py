"""
JSON File Cache Store

Persisted cache tier: one JSON file per record name inside an
application-private storage root. Blocking file I/O runs in a worker
thread so callers on the event loop are never blocked.
"""

import asyncio
import logging
import os
import re
import tempfile
from functools import lru_cache
from pathlib import Path
from typing import Any, Union

from opentelemetry import trace
from pydantic import TypeAdapter

from ...constants import CACHE_FILE_SUFFIX
from ...domain.cache.repository_interfaces import PersistentStore
from .exceptions import (
    CacheDecodeException,
    CacheNotFoundException,
    CacheWriteException,
    InvalidCacheNameException,
)

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

NAME_PATTERN = re.compile(r"^[a-z0-9][a-z0-9_.]*$")


@lru_cache(maxsize=128)
def get_type_adapter(schema: Any) -> TypeAdapter:
    """Get cached pydantic adapter for a payload schema."""
    return TypeAdapter(schema)


class FileCacheStore(PersistentStore):
    """File-backed implementation of the persistent cache store."""

    def __init__(self, root: Union[str, Path]):
        self.root = Path(root)

    def _path_for(self, name: str) -> Path:
        if not NAME_PATTERN.match(name) or ".." in name:
            raise InvalidCacheNameException(name)
        return self.root / f"{name}{CACHE_FILE_SUFFIX}"

    async def save(self, name: str, record: Any, schema: Any) -> None:
        """Serialize and atomically write record to ``<root>/<name>.json``."""
        with tracer.start_as_current_span("file_store.save") as span:
            span.set_attribute("cache.name", name)
            path = self._path_for(name)

            try:
                payload = get_type_adapter(schema).dump_json(record)
            except ValueError as e:
                span.set_status(trace.Status(trace.StatusCode.ERROR, str(e)))
                raise CacheWriteException(name, "serialize", e) from e

            try:
                await asyncio.to_thread(self._write_atomic, path, payload)
            except OSError as e:
                logger.error(
                    f"Failed to write cache file {path.name}: {e}",
                    extra={"cache_name": name},
                )
                span.set_status(trace.Status(trace.StatusCode.ERROR, str(e)))
                raise CacheWriteException(name, "save", e) from e

            span.set_attribute("cache.size_bytes", len(payload))
            logger.debug(
                f"Saved {path.name}",
                extra={"cache_name": name, "size_bytes": len(payload)},
            )

    def _write_atomic(self, path: Path, payload: bytes) -> None:
        self.root.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self.root, prefix=f".{path.stem}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "wb") as tmp_file:
                tmp_file.write(payload)
                tmp_file.flush()
                os.fsync(tmp_file.fileno())
            os.replace(tmp_name, path)
        except BaseException:
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass
            raise

    async def load(self, name: str, schema: Any) -> Any:
        """Read and validate ``<root>/<name>.json`` against ``schema``."""
        with tracer.start_as_current_span("file_store.load") as span:
            span.set_attribute("cache.name", name)
            path = self._path_for(name)

            try:
                payload = await asyncio.to_thread(path.read_bytes)
            except FileNotFoundError as e:
                span.set_attribute("cache.hit", False)
                raise CacheNotFoundException(name) from e
            except OSError as e:
                span.set_status(trace.Status(trace.StatusCode.ERROR, str(e)))
                raise CacheDecodeException(name, e) from e

            try:
                record = get_type_adapter(schema).validate_json(payload)
            except ValueError as e:
                logger.warning(
                    f"Corrupt cache file {path.name}: {e}",
                    extra={"cache_name": name},
                )
                span.set_status(trace.Status(trace.StatusCode.ERROR, str(e)))
                raise CacheDecodeException(name, e) from e

            span.set_attribute("cache.hit", True)
            logger.debug(f"Loaded {path.name}", extra={"cache_name": name})
            return record

    async def exists(self, name: str) -> bool:
        try:
            path = self._path_for(name)
            return await asyncio.to_thread(path.is_file)
        except (InvalidCacheNameException, OSError):
            return False

    async def delete(self, name: str) -> None:
        path = self._path_for(name)
        try:
            await asyncio.to_thread(path.unlink, missing_ok=True)
        except OSError as e:
            raise CacheWriteException(name, "delete", e) from e
        logger.debug(f"Deleted {path.name}", extra={"cache_name": name})

    async def clear_all(self) -> int:
        """Delete every ``*.json`` file in the storage root."""
        with tracer.start_as_current_span("file_store.clear_all") as span:
            try:
                removed = await asyncio.to_thread(self._remove_all)
            except OSError as e:
                span.set_status(trace.Status(trace.StatusCode.ERROR, str(e)))
                raise CacheWriteException(str(self.root), "clear_all", e) from e

            span.set_attribute("cache.removed", removed)
            logger.info(
                f"Cleared {removed} cache files",
                extra={"cache_root": str(self.root), "count": removed},
            )
            return removed

    def _remove_all(self) -> int:
        if not self.root.is_dir():
            return 0
        removed = 0
        for path in self.root.glob(f"*{CACHE_FILE_SUFFIX}"):
            path.unlink(missing_ok=True)
            removed += 1
        return removed
