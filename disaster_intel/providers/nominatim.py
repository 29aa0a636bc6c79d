"""Client for the OpenStreetMap Nominatim search API."""

from typing import Any

import httpx

from disaster_intel.providers.base import HttpProvider
from disaster_intel.utils.exceptions import UpstreamError


class NominatimClient(HttpProvider):
    """Free-text place search returning ranked candidates."""

    service_name = "OpenStreetMap"
    provider_name = "openstreetmap"

    def __init__(
        self,
        base_url: str = "https://nominatim.openstreetmap.org/search",
        user_agent: str = "DisasterResponsePlatform/1.0",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(timeout=timeout, transport=transport)
        self.base_url = base_url
        self.user_agent = user_agent

    @classmethod
    def from_config(cls, config, transport: httpx.AsyncBaseTransport | None = None) -> "NominatimClient":
        return cls(
            base_url=config.base_url,
            user_agent=config.user_agent,
            timeout=config.request_timeout,
            transport=transport,
        )

    async def search(self, query: str, limit: int = 1) -> list[dict[str, Any]]:
        """
        Look up a place name.

        Returns:
            Candidates with at least ``lat``, ``lon`` and ``display_name``; empty if none
        """
        response = await self._send(
            "geocoding",
            "GET",
            self.base_url,
            params={"q": query, "format": "json", "limit": limit},
            headers={"User-Agent": self.user_agent},
        )
        candidates = self._json(response, "geocoding")
        if not isinstance(candidates, list):
            self.record("geocoding", "error")
            raise UpstreamError(
                "Nominatim returned an unexpected payload",
                service_name=self.service_name,
                operation="geocoding",
            )

        if not candidates:
            self.record("geocoding", "no_results")
            return []

        self.record("geocoding", "success")
        return candidates
