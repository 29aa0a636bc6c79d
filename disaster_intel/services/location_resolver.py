"""
Location resolution for disaster reports.

Turns a free-text description into a place name (Gemini, with a regex
fallback) and a place name into coordinates (Nominatim). Both steps are
cache-first and never raise: every failure ends in a sentinel or an
unresolved :class:`GeocodeResult`.
"""

import hashlib
import re

from disaster_intel.models.geo import UNKNOWN_LOCATION, GeocodeResult, ResolvedLocation
from disaster_intel.providers.gemini import GeminiClient
from disaster_intel.providers.nominatim import NominatimClient
from disaster_intel.utils.cache.cache import CacheStore
from disaster_intel.utils.exceptions import DisasterIntelError
from disaster_intel.utils.geo import calculate_distance, create_point
from disaster_intel.utils.logging.logger import get_component_logger, warn_once

logger = get_component_logger("location_resolver")

LOCATION_PROMPT = """Extract the location name from the following disaster description. Return only the location name in a simple format like "City, State" or "City, Country". If no specific location is mentioned, return "Unknown location".

Description: {description}

Location:"""

_PLACE = r"([A-Z][a-z]+(?:\s+[A-Z][a-z]+)*)"

# Tried in order; the first capture group of the first matching pattern wins.
LOCATION_PATTERNS = [
    re.compile(r"\b(?i:in|at|near|around)\s+" + _PLACE),
    re.compile(_PLACE + r",\s*([A-Z]{2})\b"),
    re.compile(_PLACE + r",\s*([A-Z][a-z]+)"),
]


def fallback_location_extraction(description: str) -> str:
    """Best-effort place name from capitalised phrases, or the sentinel."""
    for pattern in LOCATION_PATTERNS:
        match = pattern.search(description or "")
        if match:
            return match.group(1)
    return UNKNOWN_LOCATION


class LocationResolver:
    """Extracts and geocodes locations mentioned in disaster reports."""

    def __init__(
        self,
        cache: CacheStore,
        gemini: GeminiClient,
        geocoder: NominatimClient,
    ):
        self.cache = cache
        self.gemini = gemini
        self.geocoder = geocoder

        if not self.gemini.configured:
            warn_once(
                logger,
                "GEMINI_API_KEY:location",
                "Gemini API key not found. Location extraction will use pattern matching.",
            )

    def _location_key(self, description: str) -> str:
        digest = hashlib.md5(description.encode("utf-8")).hexdigest()
        return self.cache.generate_key("gemini", "location", digest)

    async def extract_location(self, description: str) -> str:
        """
        Extract a human-readable location from a disaster description.

        Args:
            description: Free-text report

        Returns:
            str: A place name, or "Unknown location" if none could be found
        """
        description = description or ""
        cache_key = self._location_key(description)
        cached = await self.cache.get(cache_key)
        if cached:
            return cached

        return await self.cache.coalesce(
            cache_key, lambda: self._extract_and_cache(cache_key, description)
        )

    async def _extract_and_cache(self, cache_key: str, description: str) -> str:
        location = None
        if self.gemini.configured:
            try:
                location = await self.gemini.generate_text(
                    LOCATION_PROMPT.format(description=description),
                    operation="location_extraction",
                )
            except DisasterIntelError as e:
                logger.error(f"Gemini location extraction error: {e.message}")
            else:
                location = location.strip().strip('"').strip() or UNKNOWN_LOCATION
        else:
            logger.debug("Gemini API key not available for location extraction")

        if location is None:
            location = fallback_location_extraction(description)
            logger.debug(f"Fallback location extraction produced: {location}")

        await self.cache.set(cache_key, location)
        return location

    async def geocode(self, location_name: str) -> GeocodeResult:
        """
        Convert a place name into coordinates.

        Args:
            location_name: Place name, typically from ``extract_location``

        Returns:
            GeocodeResult: Resolved coordinates, or null coordinates when unresolved
        """
        if not location_name or location_name == UNKNOWN_LOCATION:
            return GeocodeResult.unresolved(UNKNOWN_LOCATION)

        cache_key = self.cache.generate_key("geocoding", location_name)
        cached = await self.cache.get(cache_key)
        if cached:
            try:
                return GeocodeResult.model_validate(cached)
            except ValueError:
                logger.warning(f"Discarding malformed geocoding cache entry {cache_key}")

        return await self.cache.coalesce(
            cache_key, lambda: self._geocode_and_cache(cache_key, location_name)
        )

    async def _geocode_and_cache(self, cache_key: str, location_name: str) -> GeocodeResult:
        try:
            candidates = await self.geocoder.search(location_name, limit=1)
        except DisasterIntelError as e:
            logger.error(f"Geocoding error: {e.message}")
            return GeocodeResult.unresolved(location_name)

        if not candidates:
            return GeocodeResult.unresolved(location_name)

        first = candidates[0]
        try:
            result = GeocodeResult(
                lat=float(first["lat"]),
                lng=float(first["lon"]),
                formatted_address=first.get("display_name") or location_name,
                provider=self.geocoder.provider_name,
            )
        except (KeyError, TypeError, ValueError) as e:
            logger.error(f"Geocoding returned an unusable candidate: {str(e)}")
            return GeocodeResult.unresolved(location_name)

        await self.cache.set(cache_key, result.model_dump(mode="json"))
        return result

    async def resolve(
        self, description: str | None = None, location_name: str | None = None
    ) -> ResolvedLocation:
        """
        Resolve a location from an explicit name or, failing that, a description.

        Raises:
            ValueError: If neither a name nor a description is given
        """
        name = location_name
        if not name and description:
            name = await self.extract_location(description)
        if not name:
            raise ValueError("No location or description provided")
        return ResolvedLocation(location_name=name, geocoding=await self.geocode(name))

    @staticmethod
    def create_point(lat: float | None, lng: float | None) -> str | None:
        return create_point(lat, lng)

    @staticmethod
    def calculate_distance(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
        return calculate_distance(lat1, lng1, lat2, lng2)
