"""
Logging framework for disaster-intel.

This module provides a unified logging system with support for:
1. Structured JSON logging
2. Component-specific loggers
3. Context tracking across async boundaries
4. Log rotation
5. Secure logging (filtering credentials)

Provider calls and cache lookups are reported as structured events
(``action=api_call``, ``action=cache_hit``, ``action=cache_miss``) so they can
be counted downstream.
"""

import logging
import os
import re
import sys
import time
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler, TimedRotatingFileHandler
from typing import Any, Dict, Optional, Union

from pythonjsonlogger import jsonlogger

# Default log formats
DEFAULT_TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_JSON_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"

ROOT_LOGGER_NAME = "disaster_intel"

# Log levels mapping
LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL
}

# Credentials that must never reach a log sink
SENSITIVE_PATTERNS = [
    re.compile(
        r'(["\'](api[_-]?key|token|secret|password|auth|key)["\']:\s*["\']).+?(["\'])',
        re.IGNORECASE),
    re.compile(
        r'(bearer\s+)(\S+)()',
        re.IGNORECASE),
    re.compile(
        r'([?&]key=)([^&\s]+)()',
        re.IGNORECASE),
    re.compile(
        r'((gemini|google|twitter|supabase)[_-]?(api[_-]?key|token|key)[=:]\s*)(\S+)()',
        re.IGNORECASE),
]

# Context variables for tracking request context across async boundaries
request_id_var: ContextVar[str] = ContextVar('request_id', default='')
component_var: ContextVar[str] = ContextVar('component', default='')
context_data_var: ContextVar[Dict[str, Any]] = ContextVar('context_data', default={})

# Keys already reported through warn_once
_WARNED_KEYS: set[str] = set()


class SensitiveFilter(logging.Filter):
    """Filter to remove credentials from logs."""

    def filter(self, record):
        if not isinstance(record.msg, str) or not record.msg:
            return True

        for pattern in SENSITIVE_PATTERNS:
            record.msg = pattern.sub(lambda m: f"{m.group(1)}*****{m.group(m.lastindex)}",
                                     record.msg)

        return True


class ContextFilter(logging.Filter):
    """Filter that adds request context to log records."""

    def filter(self, record):
        record.request_id = request_id_var.get('')
        if not getattr(record, 'component', None):
            record.component = component_var.get('')

        for key, value in context_data_var.get({}).items():
            if not hasattr(record, key):
                setattr(record, key, value)

        return True


class LogManager:
    """
    Central manager for logging configuration and retrieval.

    Configures the root logger once and hands out named loggers that share
    its handlers and filters.
    """

    def __init__(self):
        """Initialize the LogManager."""
        self.configured = False
        self.default_config = {
            'level': os.getenv('LOG_LEVEL', 'info'),
            'json_logging': os.getenv('LOG_FORMAT', 'text').lower() == 'json',
            'log_file': os.getenv('LOG_FILE', None),
            # 10 MB
            'rotation_size': int(os.getenv('LOG_ROTATION_SIZE', '10485760')),
            'rotation_count': int(os.getenv('LOG_ROTATION_COUNT', '5')),
            'daily_rotation': os.getenv('LOG_DAILY_ROTATION', 'false').lower() == 'true',
        }

    def configure(self,
                  level: Optional[Union[str, int]] = None,
                  json_logging: Optional[bool] = None,
                  log_file: Optional[str] = None,
                  rotation_size: Optional[int] = None,
                  rotation_count: Optional[int] = None,
                  daily_rotation: Optional[bool] = None) -> None:
        """
        Configure the logging system.

        Args:
            level: Log level (debug, info, warning, error, critical)
            json_logging: Whether to use JSON-formatted logs
            log_file: Path to log file
            rotation_size: Maximum size of each log file in bytes
            rotation_count: Number of backup log files to keep
            daily_rotation: Whether to rotate logs daily
        """
        overrides = {
            'level': level,
            'json_logging': json_logging,
            'log_file': log_file,
            'rotation_size': rotation_size,
            'rotation_count': rotation_count,
            'daily_rotation': daily_rotation,
        }
        for key, value in overrides.items():
            if value is not None:
                self.default_config[key] = value

        root_logger = logging.getLogger()

        if isinstance(self.default_config['level'], str):
            level_value = LOG_LEVELS.get(self.default_config['level'].lower(), logging.INFO)
        else:
            level_value = self.default_config['level']

        root_logger.setLevel(level_value)

        # Remove handlers installed by a previous configure() call only
        for handler in list(root_logger.handlers):
            if getattr(handler, '_disaster_intel', False):
                root_logger.removeHandler(handler)

        if self.default_config['json_logging']:
            formatter = jsonlogger.JsonFormatter(DEFAULT_JSON_FORMAT)
        else:
            formatter = logging.Formatter(DEFAULT_TEXT_FORMAT)

        sensitive_filter = SensitiveFilter()
        context_filter = ContextFilter()

        console_handler = logging.StreamHandler(sys.stdout)
        handlers = [console_handler]

        if self.default_config['log_file']:
            log_dir = os.path.dirname(self.default_config['log_file'])
            if log_dir and not os.path.exists(log_dir):
                os.makedirs(log_dir)

            if self.default_config['daily_rotation']:
                file_handler = TimedRotatingFileHandler(
                    self.default_config['log_file'],
                    when='midnight',
                    backupCount=self.default_config['rotation_count']
                )
            else:
                file_handler = RotatingFileHandler(
                    self.default_config['log_file'],
                    maxBytes=self.default_config['rotation_size'],
                    backupCount=self.default_config['rotation_count']
                )
            handlers.append(file_handler)

        for handler in handlers:
            handler.setFormatter(formatter)
            handler.addFilter(sensitive_filter)
            handler.addFilter(context_filter)
            handler._disaster_intel = True
            root_logger.addHandler(handler)

        self.configured = True

    def get_logger(self, name: str = ROOT_LOGGER_NAME) -> logging.Logger:
        """
        Get a logger for the specified name.

        Library code does not force configuration; call ``configure`` (or
        ``configure_from_settings``) from the application entry point.
        """
        return logging.getLogger(name)

    def get_component_logger(self, component: str) -> logging.Logger:
        """
        Get a logger for a specific component.

        Args:
            component: Component name (e.g., 'cache', 'location_resolver')

        Returns:
            Logger named ``disaster_intel.<component>``
        """
        return self.get_logger(f"{ROOT_LOGGER_NAME}.{component}")

    def set_request_id(self, request_id: Optional[str] = None) -> str:
        """Set the current request ID, generating one when not given."""
        if request_id is None:
            request_id = str(uuid.uuid4())
        request_id_var.set(request_id)
        return request_id

    def get_request_id(self) -> str:
        """Get the current request ID."""
        return request_id_var.get('')

    def add_context(self, **kwargs) -> None:
        """Add data to the current logging context."""
        context = context_data_var.get({}).copy()
        context.update(kwargs)
        context_data_var.set(context)

    def clear_context(self) -> None:
        """Clear the current logging context."""
        context_data_var.set({})

    @contextmanager
    def request_context(self, request_id: Optional[str] = None, **kwargs):
        """
        Context manager for tracking request context.

        Args:
            request_id: Request ID (generated if not provided)
            **kwargs: Additional context data

        Yields:
            The request ID
        """
        request_token = request_id_var.set(request_id or str(uuid.uuid4()))
        context = context_data_var.get({}).copy()
        context.update(kwargs)
        context_token = context_data_var.set(context)
        try:
            yield request_id_var.get()
        finally:
            request_id_var.reset(request_token)
            context_data_var.reset(context_token)

    @contextmanager
    def performance_timer(self,
                          operation: str,
                          logger: Optional[logging.Logger] = None,
                          log_level: str = "debug",
                          **kwargs):
        """
        Context manager for timing and logging operation performance.

        Args:
            operation: Name of the operation being timed
            logger: Logger to use (uses default if not provided)
            log_level: Level to log the timing information
            **kwargs: Additional context data to include in the log
        """
        if logger is None:
            logger = self.get_logger()

        level = LOG_LEVELS.get(log_level.lower(), logging.DEBUG)
        start_time = time.perf_counter()
        try:
            yield
        finally:
            duration = time.perf_counter() - start_time
            logger.log(
                level,
                f"Performance: {operation} completed in {duration:.4f}s",
                extra={"duration": duration, "operation": operation, **kwargs},
            )


# Create global LogManager instance
log_manager = LogManager()


def configure_from_settings(settings) -> None:
    """Configure logging from a ``Settings.logging`` section."""
    cfg = settings.logging
    log_manager.configure(
        level=cfg.level.value,
        json_logging=cfg.format.lower() == "json",
        log_file=cfg.file,
        rotation_size=cfg.rotation_size,
        rotation_count=cfg.rotation_count,
        daily_rotation=cfg.daily_rotation,
    )


def get_logger(name: str = ROOT_LOGGER_NAME) -> logging.Logger:
    """Get a logger for the specified name."""
    return log_manager.get_logger(name)


def get_component_logger(component: str) -> logging.Logger:
    """Get a logger for a specific component."""
    return log_manager.get_component_logger(component)


def set_log_level(level: Union[str, int]) -> None:
    """Change the level of the package loggers without reconfiguring handlers."""
    if isinstance(level, str):
        level = LOG_LEVELS.get(level.lower(), logging.INFO)
    logging.getLogger(ROOT_LOGGER_NAME).setLevel(level)


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def log_api_call(logger: logging.Logger, service: str, operation: str, status: str) -> None:
    """Record the outcome of one call to an external provider."""
    logger.info(
        "API call made",
        extra={
            "action": "api_call",
            "service": service,
            "endpoint": operation,
            "status": status,
            "event_time": _timestamp(),
        },
    )


def log_cache_hit(logger: logging.Logger, key: str) -> None:
    logger.debug(
        "Cache hit",
        extra={"action": "cache_hit", "cache_key": key, "event_time": _timestamp()},
    )


def log_cache_miss(logger: logging.Logger, key: str) -> None:
    logger.debug(
        "Cache miss",
        extra={"action": "cache_miss", "cache_key": key, "event_time": _timestamp()},
    )


def warn_once(logger: logging.Logger, key: str, message: str) -> bool:
    """Log ``message`` at WARNING the first time ``key`` is seen in this process.

    Returns:
        True if the warning was emitted by this call.
    """
    if key in _WARNED_KEYS:
        return False
    _WARNED_KEYS.add(key)
    logger.warning(message, extra={"action": "configuration_missing", "setting": key})
    return True


# Context manager shortcuts
def request_context(request_id: Optional[str] = None, **kwargs):
    """Context manager for tracking request context."""
    return log_manager.request_context(request_id, **kwargs)


def performance_timer(operation: str, logger: Optional[logging.Logger] = None,
                      level: str = "debug", **kwargs):
    """Context manager for timing and logging operation performance."""
    return log_manager.performance_timer(operation, logger, level, **kwargs)
