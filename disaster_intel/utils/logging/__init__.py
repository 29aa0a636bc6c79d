"""Logging utilities for disaster-intel.

This module provides logging configuration and structured event helpers.
"""

from disaster_intel.utils.logging.logger import (
    configure_from_settings,
    get_component_logger,
    get_logger,
    log_api_call,
    log_cache_hit,
    log_cache_miss,
    log_manager,
    performance_timer,
    request_context,
    set_log_level,
    warn_once,
)

__all__ = [
    "configure_from_settings",
    "get_logger",
    "get_component_logger",
    "log_api_call",
    "log_cache_hit",
    "log_cache_miss",
    "log_manager",
    "performance_timer",
    "request_context",
    "set_log_level",
    "warn_once",
]
