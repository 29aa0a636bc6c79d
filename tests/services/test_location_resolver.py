"""Tests for location extraction and geocoding."""

import hashlib

import httpx
import pytest

from conftest import gemini_reply, request_json
from disaster_intel.models.geo import UNKNOWN_LOCATION, GeocodeResult
from disaster_intel.providers.gemini import GeminiClient
from disaster_intel.providers.nominatim import NominatimClient
from disaster_intel.services.location_resolver import (
    LocationResolver,
    fallback_location_extraction,
)

GEMINI_HOST = "generativelanguage.googleapis.com"
NOMINATIM_HOST = "nominatim.openstreetmap.org"

HOUSTON = [{"lat": "29.7604", "lon": "-95.3698", "display_name": "Houston, Harris County, Texas"}]


def location_key(description: str) -> str:
    return "gemini:location:" + hashlib.md5(description.encode("utf-8")).hexdigest()


def build_resolver(cache, transport, api_key="test-key") -> LocationResolver:
    return LocationResolver(
        cache,
        GeminiClient(api_key=api_key, transport=transport),
        NominatimClient(transport=transport),
    )


@pytest.mark.parametrize(
    "description, expected",
    [
        ("Flooding reported in Lower Manhattan this morning", "Lower Manhattan"),
        ("Fire near Central Park, smoke visible", "Central Park"),
        ("In Tokyo buildings are shaking", "Tokyo"),
        ("Houston, TX streets under water", "Houston"),
        ("Wildfire spreading: Athens, Greece on alert", "Athens"),
        ("water levels rising everywhere", UNKNOWN_LOCATION),
        ("", UNKNOWN_LOCATION),
    ],
)
def test_fallback_location_extraction(description, expected):
    assert fallback_location_extraction(description) == expected


class TestExtractLocation:
    @pytest.mark.asyncio
    async def test_uses_provider_answer(self, cache, backend, make_transport):
        transport = make_transport(lambda request: gemini_reply('"Houston, TX"'))
        resolver = build_resolver(cache, transport)
        description = "Water is rising fast near the bayou downtown"

        assert await resolver.extract_location(description) == "Houston, TX"
        assert location_key(description) in backend
        prompt = request_json(transport.requests[0])["contents"][0]["parts"][0]["text"]
        assert description in prompt

    @pytest.mark.asyncio
    async def test_second_call_is_served_from_cache(self, cache, make_transport):
        transport = make_transport(lambda request: gemini_reply("Houston, TX"))
        resolver = build_resolver(cache, transport)

        first = await resolver.extract_location("Storm damage in Houston")
        second = await resolver.extract_location("Storm damage in Houston")

        assert first == second == "Houston, TX"
        assert len(transport.requests) == 1

    @pytest.mark.asyncio
    async def test_without_key_uses_pattern_fallback(self, cache, backend, make_transport):
        transport = make_transport(lambda request: gemini_reply("unused"))
        resolver = build_resolver(cache, transport, api_key=None)
        description = "Flooding reported in Lower Manhattan"

        assert await resolver.extract_location(description) == "Lower Manhattan"
        assert transport.requests == []
        assert await cache.get(location_key(description)) == "Lower Manhattan"

    @pytest.mark.asyncio
    async def test_provider_error_falls_back_and_caches(self, cache, make_transport):
        transport = make_transport(lambda request: httpx.Response(503, text="unavailable"))
        resolver = build_resolver(cache, transport)
        description = "Bridge collapse near Portland"

        assert await resolver.extract_location(description) == "Portland"
        assert await resolver.extract_location(description) == "Portland"
        assert len(transport.requests) == 1

    @pytest.mark.asyncio
    async def test_provider_timeout_falls_back(self, cache, make_transport):
        def handler(request):
            raise httpx.ConnectTimeout("timed out", request=request)

        resolver = build_resolver(cache, make_transport(handler))

        assert await resolver.extract_location("Earthquake felt in Lima") == "Lima"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", [None, 42, {"name": "Houston"}])
    async def test_non_text_answer_falls_back(self, cache, make_transport, text):
        transport = make_transport(
            lambda request: httpx.Response(
                200, json={"candidates": [{"content": {"parts": [{"text": text}]}}]}
            )
        )
        resolver = build_resolver(cache, transport)

        assert await resolver.extract_location("Flooding in Houston") == "Houston"

    @pytest.mark.asyncio
    async def test_nothing_found_returns_sentinel(self, cache, make_transport):
        resolver = build_resolver(cache, make_transport(lambda r: gemini_reply("")), api_key=None)

        assert await resolver.extract_location("it is raining a lot") == UNKNOWN_LOCATION


class TestGeocode:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("name", ["", UNKNOWN_LOCATION])
    async def test_sentinel_short_circuits(self, cache, backend, make_transport, name):
        transport = make_transport(lambda request: httpx.Response(200, json=HOUSTON))
        resolver = build_resolver(cache, transport)

        result = await resolver.geocode(name)

        assert result == GeocodeResult(lat=None, lng=None, formatted_address=UNKNOWN_LOCATION)
        assert transport.requests == []
        assert len(backend) == 0

    @pytest.mark.asyncio
    async def test_success_is_cached(self, cache, backend, make_transport):
        transport = make_transport(lambda request: httpx.Response(200, json=HOUSTON))
        resolver = build_resolver(cache, transport)

        result = await resolver.geocode("Houston, TX")

        assert result.lat == pytest.approx(29.7604)
        assert result.lng == pytest.approx(-95.3698)
        assert result.formatted_address == "Houston, Harris County, Texas"
        assert result.provider == "openstreetmap"
        assert "geocoding:Houston, TX" in backend

        again = await resolver.geocode("Houston, TX")
        assert again == result
        assert len(transport.requests_to(NOMINATIM_HOST)) == 1

    @pytest.mark.asyncio
    async def test_no_results_is_not_cached(self, cache, backend, make_transport):
        transport = make_transport(lambda request: httpx.Response(200, json=[]))
        resolver = build_resolver(cache, transport)

        result = await resolver.geocode("Atlantis")
        await resolver.geocode("Atlantis")

        assert result == GeocodeResult.unresolved("Atlantis")
        assert not result.resolved
        assert len(backend) == 0
        assert len(transport.requests) == 2

    @pytest.mark.asyncio
    async def test_provider_error_degrades(self, cache, backend, make_transport):
        transport = make_transport(lambda request: httpx.Response(429, text="slow down"))
        resolver = build_resolver(cache, transport)

        result = await resolver.geocode("Houston, TX")

        assert result.lat is None and result.lng is None
        assert result.formatted_address == "Houston, TX"
        assert len(backend) == 0

    @pytest.mark.asyncio
    async def test_expired_entry_triggers_new_lookup(self, cache, clock, make_transport):
        transport = make_transport(lambda request: httpx.Response(200, json=HOUSTON))
        resolver = build_resolver(cache, transport)

        await resolver.geocode("Houston, TX")
        clock.advance(hours=1)
        await resolver.geocode("Houston, TX")

        assert len(transport.requests) == 2


class TestResolve:
    @pytest.mark.asyncio
    async def test_explicit_name_skips_extraction(self, cache, make_transport):
        transport = make_transport(lambda request: httpx.Response(200, json=HOUSTON))
        resolver = build_resolver(cache, transport)

        resolved = await resolver.resolve(description="ignored", location_name="Houston, TX")

        assert resolved.location_name == "Houston, TX"
        assert resolved.geocoding.resolved
        assert transport.requests_to(GEMINI_HOST) == []

    @pytest.mark.asyncio
    async def test_description_is_extracted_then_geocoded(self, cache, make_transport):
        def handler(request):
            if request.url.host == GEMINI_HOST:
                return gemini_reply("Houston, TX")
            return httpx.Response(200, json=HOUSTON)

        resolver = build_resolver(cache, make_transport(handler))

        resolved = await resolver.resolve(description="Flooding across the city")

        assert resolved.location_name == "Houston, TX"
        assert resolved.geocoding.formatted_address == "Houston, Harris County, Texas"

    @pytest.mark.asyncio
    async def test_requires_input(self, cache, make_transport):
        resolver = build_resolver(cache, make_transport(lambda r: httpx.Response(200, json=[])))

        with pytest.raises(ValueError):
            await resolver.resolve()


def test_static_helpers():
    assert LocationResolver.create_point(1.5, 2.5) == "POINT(2.5 1.5)"
    assert LocationResolver.calculate_distance(0, 0, 0, 1) == pytest.approx(111.19, rel=0.01)
