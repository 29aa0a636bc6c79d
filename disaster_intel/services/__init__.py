"""Resolution services: location, media verification and social feeds."""

from disaster_intel.services.factory import ServiceFactory, Services
from disaster_intel.services.location_resolver import LocationResolver
from disaster_intel.services.media_verifier import MediaVerifier
from disaster_intel.services.social_feed import SocialFeedAggregator

__all__ = [
    "LocationResolver",
    "MediaVerifier",
    "ServiceFactory",
    "Services",
    "SocialFeedAggregator",
]
