"""Data model for the resolution services."""

from disaster_intel.models.cache import CacheEntry
from disaster_intel.models.geo import UNKNOWN_LOCATION, GeocodeResult, ResolvedLocation
from disaster_intel.models.social import Author, PostSource, Priority, ReportType, SocialPost
from disaster_intel.models.verification import (
    VerificationOutcome,
    VerificationRecord,
    VerificationSource,
)

__all__ = [
    "UNKNOWN_LOCATION",
    "Author",
    "CacheEntry",
    "GeocodeResult",
    "PostSource",
    "Priority",
    "ReportType",
    "ResolvedLocation",
    "SocialPost",
    "VerificationOutcome",
    "VerificationRecord",
    "VerificationSource",
]
