"""
Service factory for building the resolution services.

This module provides a centralized place for service creation, ensuring that
configuration and the shared cache store are injected explicitly instead of
living in module-level singletons.
"""

from dataclasses import dataclass

import httpx

from disaster_intel.config import Settings
from disaster_intel.providers.gemini import GeminiClient
from disaster_intel.providers.images import ImageFetcher
from disaster_intel.providers.nominatim import NominatimClient
from disaster_intel.providers.twitter import TwitterClient
from disaster_intel.services.location_resolver import LocationResolver
from disaster_intel.services.media_verifier import MediaVerifier
from disaster_intel.services.social_feed import SocialFeedAggregator
from disaster_intel.utils.cache.backends import (
    CacheBackend,
    InMemoryCacheBackend,
    SupabaseCacheBackend,
)
from disaster_intel.utils.cache.cache import CacheStore
from disaster_intel.utils.logging.logger import get_component_logger, warn_once

logger = get_component_logger("factory")


@dataclass
class Services:
    """The resolution services sharing one cache store."""
    cache: CacheStore
    locations: LocationResolver
    media: MediaVerifier
    social: SocialFeedAggregator


class ServiceFactory:
    """
    Factory for creating service instances with explicit dependency injection.

    Tests substitute providers by passing an ``httpx`` transport or a
    prepared cache backend.
    """

    @staticmethod
    def create_cache_backend(settings: Settings) -> CacheBackend:
        """Supabase when configured, otherwise a process-local table."""
        if settings.supabase.configured:
            return SupabaseCacheBackend(
                url=settings.supabase.url,
                key=settings.supabase.key,
                table=settings.supabase.cache_table,
            )
        warn_once(
            logger,
            "SUPABASE_URL",
            "Supabase configuration not found. Cache entries will not survive restarts.",
        )
        return InMemoryCacheBackend()

    @staticmethod
    def create_cache(settings: Settings, backend: CacheBackend | None = None) -> CacheStore:
        return CacheStore(
            backend or ServiceFactory.create_cache_backend(settings),
            default_ttl_hours=settings.cache.ttl_hours,
            coalesce_requests=settings.cache.coalesce_requests,
        )

    @staticmethod
    def create_location_resolver(
        settings: Settings,
        cache: CacheStore,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> LocationResolver:
        return LocationResolver(
            cache,
            GeminiClient.from_config(settings.gemini, transport=transport),
            NominatimClient.from_config(settings.geocoding, transport=transport),
        )

    @staticmethod
    def create_media_verifier(
        settings: Settings,
        cache: CacheStore,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> MediaVerifier:
        return MediaVerifier(
            cache,
            GeminiClient.from_config(settings.gemini, transport=transport),
            ImageFetcher(timeout=settings.gemini.request_timeout, transport=transport),
        )

    @staticmethod
    def create_social_feed(
        settings: Settings,
        cache: CacheStore,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> SocialFeedAggregator:
        return SocialFeedAggregator(
            cache,
            TwitterClient.from_config(settings.social, transport=transport),
            max_results=settings.social.max_results,
        )

    @classmethod
    def create_all(
        cls,
        settings: Settings,
        backend: CacheBackend | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> Services:
        """Build every service around a single shared cache store."""
        cache = cls.create_cache(settings, backend)
        return Services(
            cache=cache,
            locations=cls.create_location_resolver(settings, cache, transport),
            media=cls.create_media_verifier(settings, cache, transport),
            social=cls.create_social_feed(settings, cache, transport),
        )
