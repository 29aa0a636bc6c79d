"""
Caching utilities for disaster-intel.

This module provides the expiring cache store shared by the resolution services.
"""

from disaster_intel.utils.cache.backends import (
    CacheBackend,
    InMemoryCacheBackend,
    SupabaseCacheBackend,
)
from disaster_intel.utils.cache.cache import CacheStore, run_periodic_cleanup

__all__ = [
    "CacheBackend",
    "CacheStore",
    "InMemoryCacheBackend",
    "SupabaseCacheBackend",
    "run_periodic_cleanup",
]
