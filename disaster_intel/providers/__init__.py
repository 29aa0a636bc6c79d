"""Clients for the external providers behind the resolution services."""

from disaster_intel.providers.base import HttpProvider
from disaster_intel.providers.gemini import GeminiClient
from disaster_intel.providers.images import ImageFetcher
from disaster_intel.providers.nominatim import NominatimClient
from disaster_intel.providers.twitter import TwitterClient

__all__ = [
    "GeminiClient",
    "HttpProvider",
    "ImageFetcher",
    "NominatimClient",
    "TwitterClient",
]
