"""Utility modules for disaster-intel.

This package contains the cache store, logging framework, geospatial helpers
and the exception hierarchy shared by the resolution services.
"""
