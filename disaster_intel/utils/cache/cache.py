"""
Expiring key/value cache for disaster-intel.

Every resolution service routes its reads and writes through a shared
:class:`CacheStore`. All methods fail soft: a storage outage turns into a
cache miss (reads) or a ``False`` return (writes), never an exception.
Expiry is fixed at write time (``expires_at = now + ttl``); expired entries
are deleted lazily when read, or in bulk by :meth:`CacheStore.cleanup`.
"""

import asyncio
from collections.abc import Awaitable, Callable
from datetime import datetime, timedelta, timezone
from typing import Any, TypeVar

from disaster_intel.models.cache import CacheEntry
from disaster_intel.utils.cache.backends import CacheBackend
from disaster_intel.utils.logging.logger import (
    get_component_logger,
    log_cache_hit,
    log_cache_miss,
)

logger = get_component_logger("cache")

T = TypeVar("T")

DEFAULT_TTL_HOURS = 1.0
KEY_DELIMITER = ":"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class CacheStore:
    """Fail-soft expiring cache over a pluggable storage backend."""

    def __init__(
        self,
        backend: CacheBackend,
        default_ttl_hours: float = DEFAULT_TTL_HOURS,
        coalesce_requests: bool = False,
        clock: Callable[[], datetime] = utc_now,
    ):
        """
        Initialize a cache store.

        Args:
            backend: Storage for cache rows
            default_ttl_hours: TTL applied when ``set`` is called without one
            coalesce_requests: Let concurrent lookups of one key share a single producer call
            clock: Source of the current time (timezone-aware)
        """
        self.backend = backend
        self.default_ttl_hours = default_ttl_hours
        self.coalesce_requests = coalesce_requests
        self._clock = clock
        self._in_flight: dict[str, asyncio.Future] = {}

    def now(self) -> datetime:
        return self._clock()

    async def get(self, key: str) -> Any | None:
        """
        Get a value from the cache.

        Args:
            key: The cache key

        Returns:
            The cached value, or None on a miss (absent, expired or store unreachable)
        """
        try:
            entry = await self.backend.fetch(key)
        except Exception as e:
            logger.error(f"Cache get error: {str(e)}", extra={"cache_key": key})
            log_cache_miss(logger, key)
            return None

        if entry is None:
            log_cache_miss(logger, key)
            return None

        if entry.is_expired(self.now()):
            await self.delete(key)
            log_cache_miss(logger, key)
            return None

        log_cache_hit(logger, key)
        return entry.value

    async def set(self, key: str, value: Any, ttl_hours: float | None = None) -> bool:
        """
        Set a value in the cache, overwriting any entry with the same key.

        Args:
            key: The cache key
            value: JSON-serializable value to store
            ttl_hours: Time-to-live in hours (None for the default TTL)

        Returns:
            bool: True if successful, False otherwise
        """
        ttl = ttl_hours if ttl_hours is not None else self.default_ttl_hours
        expires_at = self.now() + timedelta(hours=ttl)

        try:
            await self.backend.upsert(CacheEntry(key=key, value=value, expires_at=expires_at))
        except Exception as e:
            logger.error(f"Cache set error: {str(e)}", extra={"cache_key": key})
            return False

        logger.debug(
            "Cache set successfully",
            extra={"cache_key": key, "expires_at": expires_at.isoformat()},
        )
        return True

    async def delete(self, key: str) -> bool:
        """Delete a value from the cache."""
        try:
            await self.backend.remove(key)
        except Exception as e:
            logger.error(f"Cache delete error: {str(e)}", extra={"cache_key": key})
            return False
        return True

    async def clear(self) -> bool:
        """Delete every entry in the cache."""
        try:
            await self.backend.remove_all()
        except Exception as e:
            logger.error(f"Cache clear error: {str(e)}")
            return False
        logger.info("Cache cleared successfully")
        return True

    async def cleanup(self) -> bool:
        """Delete all entries that have already expired.

        Safe to run repeatedly and alongside normal traffic.
        """
        try:
            await self.backend.remove_expired(self.now())
        except Exception as e:
            logger.error(f"Cache cleanup error: {str(e)}")
            return False
        logger.info("Cache cleanup completed")
        return True

    @staticmethod
    def generate_key(prefix: str, *parts: Any) -> str:
        """Build a namespaced cache key, e.g. ``geocoding:Paris``."""
        return f"{prefix}{KEY_DELIMITER}{KEY_DELIMITER.join(str(p) for p in parts)}"

    async def coalesce(self, key: str, producer: Callable[[], Awaitable[T]]) -> T:
        """
        Run ``producer`` for ``key``, sharing one run between concurrent callers.

        With coalescing disabled every caller runs its own producer. The
        in-flight marker is dropped once the producer finishes, so results are
        never held here beyond the call that computed them.
        """
        if not self.coalesce_requests:
            return await producer()

        pending = self._in_flight.get(key)
        if pending is not None:
            logger.debug("Joining in-flight lookup", extra={"cache_key": key})
            return await asyncio.shield(pending)

        task = asyncio.ensure_future(producer())
        self._in_flight[key] = task
        try:
            return await asyncio.shield(task)
        finally:
            if task.done() and self._in_flight.get(key) is task:
                del self._in_flight[key]
            elif not task.done():
                task.add_done_callback(lambda t: self._release(key, t))

    def _release(self, key: str, task: asyncio.Future) -> None:
        if self._in_flight.get(key) is task:
            del self._in_flight[key]


async def run_periodic_cleanup(
    cache: CacheStore,
    interval_seconds: float,
    stop_event: asyncio.Event | None = None,
) -> int:
    """
    Sweep expired entries every ``interval_seconds`` until ``stop_event`` is set.

    Returns:
        int: Number of sweeps performed
    """
    stop_event = stop_event or asyncio.Event()
    sweeps = 0
    logger.info(f"Starting cache sweeper with interval {interval_seconds}s")
    while not stop_event.is_set():
        await cache.cleanup()
        sweeps += 1
        try:
            await asyncio.wait_for(stop_event.wait(), timeout=interval_seconds)
        except asyncio.TimeoutError:
            continue
    logger.info(f"Cache sweeper stopped after {sweeps} sweeps")
    return sweeps
