"""Tag-aware response cache.

List endpoints cache their serialized pages here. Every entry carries a tag
(``booksCache``, ``authorsCache``) so a write can drop all pages of a
resource at once. The cache is an accelerator only: when a backend fails the
value is computed directly and the failure is logged.
"""

import asyncio
import logging
import threading
import time
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from library_api.core.config import get_settings
from library_api.core.exceptions import CacheUnavailableError
from library_api.core.tracing import get_tracer

logger = logging.getLogger(__name__)

tracer = get_tracer(__name__)

BOOKS_TAG = "booksCache"
AUTHORS_TAG = "authorsCache"

Clock = Callable[[], float]


@dataclass(frozen=True)
class CacheEntry:
    """A cached value together with its tag and expiry."""

    value: str
    tag: str
    generation: int
    expires_at: float


class CacheBackend(ABC):
    """Storage for cache entries."""

    @abstractmethod
    def get(self, key: str) -> CacheEntry | None:
        """Return the live entry for ``key`` or None."""

    @abstractmethod
    def set(self, key: str, entry: CacheEntry) -> None:
        """Store ``entry`` under ``key``."""

    @abstractmethod
    def delete_tag(self, tag: str) -> int:
        """Remove every entry carrying ``tag`` and return how many were removed."""


class MemoryCacheBackend(CacheBackend):
    """In-process backend keeping entries in a dict with a tag index.

    Expired entries are dropped when read, and every ``sweep_interval``
    seconds a write or tag deletion also drops all other expired entries,
    so keys that are never read again do not pile up.
    """

    def __init__(self, clock: Clock = time.monotonic, sweep_interval: float = 60.0) -> None:
        self._clock = clock
        self._sweep_interval = sweep_interval
        self._next_sweep = clock() + sweep_interval
        self._entries: dict[str, CacheEntry] = {}
        self._keys_by_tag: dict[str, set[str]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> CacheEntry | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if entry.expires_at <= self._clock():
                self._remove(key)
                return None
            return entry

    def set(self, key: str, entry: CacheEntry) -> None:
        with self._lock:
            self._sweep_expired()
            self._remove(key)
            self._entries[key] = entry
            self._keys_by_tag.setdefault(entry.tag, set()).add(key)

    def delete_tag(self, tag: str) -> int:
        with self._lock:
            keys = self._keys_by_tag.pop(tag, set())
            for key in keys:
                self._entries.pop(key, None)
            self._sweep_expired()
            return len(keys)

    def __len__(self) -> int:
        return len(self._entries)

    def _sweep_expired(self) -> None:
        now = self._clock()
        if now < self._next_sweep:
            return
        self._next_sweep = now + self._sweep_interval
        expired = [key for key, entry in self._entries.items() if entry.expires_at <= now]
        for key in expired:
            self._remove(key)
        if expired:
            logger.debug(f"Swept {len(expired)} expired cache entries")

    def _remove(self, key: str) -> None:
        entry = self._entries.pop(key, None)
        if entry is not None:
            keys = self._keys_by_tag.get(entry.tag)
            if keys is not None:
                keys.discard(key)
                if not keys:
                    del self._keys_by_tag[entry.tag]


class NullCacheBackend(CacheBackend):
    """Backend that stores nothing, used when caching is disabled."""

    def get(self, key: str) -> CacheEntry | None:
        return None

    def set(self, key: str, entry: CacheEntry) -> None:
        pass

    def delete_tag(self, tag: str) -> int:
        return 0


class TagAwareCache:
    """Get-or-compute cache with tag invalidation on top of a backend.

    Each tag has a generation counter that ``invalidate_tags`` bumps. Entries
    remember the generation they were computed under and are ignored once it
    is stale, and a computation that overlapped an invalidation does not store
    its result. After ``invalidate_tags`` returns, the next lookup for that tag
    is therefore a miss even if the backend failed to delete anything.
    """

    def __init__(self, backend: CacheBackend, clock: Clock = time.monotonic) -> None:
        self.backend = backend
        self._clock = clock
        self._generations: dict[str, int] = {}
        self._locks: dict[str, asyncio.Lock] = {}
        self._waiters: dict[str, int] = {}

    async def get_or_compute(
        self,
        key: str,
        tag: str,
        ttl_seconds: int,
        compute: Callable[[], Awaitable[str]],
    ) -> str:
        """Return the cached value for ``key``, computing and storing it on a miss."""
        with tracer.start_as_current_span("cache.get_or_compute") as span:
            span.set_attribute("cache.key", key)
            span.set_attribute("cache.tag", tag)

            value = self._read(key, tag)
            if value is not None:
                span.set_attribute("cache.hit", True)
                logger.debug(f"Cache hit for {key}")
                return value

            # Concurrent misses for one key wait here and re-read instead of recomputing
            lock = self._locks.setdefault(key, asyncio.Lock())
            self._waiters[key] = self._waiters.get(key, 0) + 1
            try:
                async with lock:
                    value = self._read(key, tag)
                    if value is not None:
                        span.set_attribute("cache.hit", True)
                        return value

                    span.set_attribute("cache.hit", False)
                    logger.debug(f"Cache miss for {key}")
                    generation = self._generations.get(tag, 0)
                    value = await compute()

                    if self._generations.get(tag, 0) == generation:
                        self._write(key, tag, generation, ttl_seconds, value)
                    else:
                        logger.debug(f"Tag {tag} invalidated while computing {key}, not storing")
            finally:
                self._release(key)

            return value

    def invalidate_tags(self, *tags: str) -> None:
        """Drop every entry carrying any of ``tags``."""
        with tracer.start_as_current_span("cache.invalidate_tags") as span:
            span.set_attribute("cache.tags", list(tags))
            for tag in tags:
                self._generations[tag] = self._generations.get(tag, 0) + 1
                try:
                    removed = self.backend.delete_tag(tag)
                except Exception as e:
                    logger.warning(f"Cache unavailable while invalidating {tag}: {e}")
                    continue
                logger.debug(f"Invalidated {removed} cache entries tagged {tag}")

    def _release(self, key: str) -> None:
        # Last caller out drops the lock
        remaining = self._waiters[key] - 1
        if remaining:
            self._waiters[key] = remaining
        else:
            del self._waiters[key]
            del self._locks[key]

    def _read(self, key: str, tag: str) -> str | None:
        try:
            entry = self.backend.get(key)
        except Exception as e:
            logger.warning(f"Cache unavailable while reading {key}: {e}")
            return None
        if entry is None or entry.generation != self._generations.get(tag, 0):
            return None
        return entry.value

    def _write(self, key: str, tag: str, generation: int, ttl_seconds: int, value: str) -> None:
        entry = CacheEntry(
            value=value,
            tag=tag,
            generation=generation,
            expires_at=self._clock() + ttl_seconds,
        )
        try:
            self.backend.set(key, entry)
        except Exception as e:
            logger.warning(f"Cache unavailable while writing {key}: {e}")


def build_cache() -> TagAwareCache:
    """Build the cache configured by the application settings."""
    settings = get_settings()
    if not settings.cache_enabled:
        logger.info("Response cache is disabled")
        return TagAwareCache(NullCacheBackend())
    return TagAwareCache(MemoryCacheBackend())


# Lazy initialization so tests can swap settings before first use
_cache: TagAwareCache | None = None


def _get_cache() -> TagAwareCache:
    """Get or create the process-wide cache instance."""
    global _cache
    if _cache is None:
        _cache = build_cache()
    return _cache


async def get_cache() -> TagAwareCache:
    """Dependency that provides the response cache."""
    return _get_cache()


__all__ = [
    "AUTHORS_TAG",
    "BOOKS_TAG",
    "CacheBackend",
    "CacheEntry",
    "CacheUnavailableError",
    "MemoryCacheBackend",
    "NullCacheBackend",
    "TagAwareCache",
    "build_cache",
    "get_cache",
]
