"""
Storage backends for the cache store.

A backend only moves rows in and out of storage; expiry decisions belong to
:class:`disaster_intel.utils.cache.cache.CacheStore`. Backends raise
:class:`CacheUnavailableError` for any storage failure.
"""

import copy
from abc import ABC, abstractmethod
from datetime import datetime

from supabase import AsyncClient, acreate_client

from disaster_intel.models.cache import CacheEntry
from disaster_intel.utils.exceptions import CacheUnavailableError
from disaster_intel.utils.logging.logger import get_component_logger

logger = get_component_logger("cache")


class CacheBackend(ABC):
    """Row storage for cache entries."""

    name = "backend"

    @abstractmethod
    async def fetch(self, key: str) -> CacheEntry | None:
        """Return the stored entry for ``key`` or None if absent."""

    @abstractmethod
    async def upsert(self, entry: CacheEntry) -> None:
        """Insert or overwrite the entry with the same key."""

    @abstractmethod
    async def remove(self, key: str) -> None:
        """Delete one entry; deleting an absent key is not an error."""

    @abstractmethod
    async def remove_all(self) -> None:
        """Delete every entry."""

    @abstractmethod
    async def remove_expired(self, now: datetime) -> None:
        """Delete entries whose ``expires_at`` is before ``now``."""


class InMemoryCacheBackend(CacheBackend):
    """Process-local table, used when no durable store is configured."""

    name = "memory"

    def __init__(self):
        self._rows: dict[str, CacheEntry] = {}

    async def fetch(self, key: str) -> CacheEntry | None:
        entry = self._rows.get(key)
        return copy.deepcopy(entry) if entry is not None else None

    async def upsert(self, entry: CacheEntry) -> None:
        self._rows[entry.key] = copy.deepcopy(entry)

    async def remove(self, key: str) -> None:
        self._rows.pop(key, None)

    async def remove_all(self) -> None:
        self._rows.clear()

    async def remove_expired(self, now: datetime) -> None:
        for key in [k for k, row in self._rows.items() if row.expires_at < now]:
            self._rows.pop(key, None)

    def __len__(self) -> int:
        return len(self._rows)

    def __contains__(self, key: str) -> bool:
        return key in self._rows


class SupabaseCacheBackend(CacheBackend):
    """Cache rows in a Supabase table ``{key text pk, value jsonb, expires_at timestamptz}``."""

    name = "supabase"

    def __init__(
        self,
        url: str | None = None,
        key: str | None = None,
        table: str = "cache",
        client: AsyncClient | None = None,
    ):
        """
        Initialize the backend.

        Args:
            url: Supabase project URL
            key: Supabase API key
            table: Name of the cache table
            client: Pre-built async client; when given, url and key are ignored
        """
        if client is None and not (url and key):
            raise ValueError("Supabase url and key are required without an explicit client")
        self.url = url
        self.key = key
        self.table = table
        self._client = client

    async def _get_client(self) -> AsyncClient:
        if self._client is None:
            try:
                self._client = await acreate_client(self.url, self.key)
            except Exception as e:
                raise CacheUnavailableError(
                    f"Could not create Supabase client: {str(e)}", operation="connect"
                ) from e
            logger.info("Supabase cache client initialized successfully")
        return self._client

    async def fetch(self, key: str) -> CacheEntry | None:
        client = await self._get_client()
        try:
            response = await (
                client.table(self.table)
                .select("key, value, expires_at")
                .eq("key", key)
                .limit(1)
                .execute()
            )
        except Exception as e:
            raise CacheUnavailableError(str(e), operation="get") from e

        rows = response.data or []
        if not rows:
            return None
        return CacheEntry.model_validate(rows[0])

    async def upsert(self, entry: CacheEntry) -> None:
        client = await self._get_client()
        try:
            await (
                client.table(self.table)
                .upsert(entry.model_dump(mode="json"), on_conflict="key")
                .execute()
            )
        except Exception as e:
            raise CacheUnavailableError(str(e), operation="set") from e

    async def remove(self, key: str) -> None:
        client = await self._get_client()
        try:
            await client.table(self.table).delete().eq("key", key).execute()
        except Exception as e:
            raise CacheUnavailableError(str(e), operation="delete") from e

    async def remove_all(self) -> None:
        client = await self._get_client()
        try:
            # PostgREST refuses an unfiltered delete
            await client.table(self.table).delete().neq("key", "").execute()
        except Exception as e:
            raise CacheUnavailableError(str(e), operation="clear") from e

    async def remove_expired(self, now: datetime) -> None:
        client = await self._get_client()
        try:
            await (
                client.table(self.table)
                .delete()
                .lt("expires_at", now.isoformat())
                .execute()
            )
        except Exception as e:
            raise CacheUnavailableError(str(e), operation="cleanup") from e

    async def ensure_table(self) -> bool:
        """Ask the database to create the cache table if it does not exist.

        Returns:
            bool: True if the setup RPC succeeded; failures are logged only.
        """
        try:
            client = await self._get_client()
            await client.rpc("create_cache_table_if_not_exists").execute()
        except Exception as e:
            logger.warning(f"Cache table setup: {str(e)}")
            return False
        logger.info("Cache table setup completed")
        return True
