"""disaster-intel exception classes.

Provider clients and cache backends raise these; the resolution services
catch them at their public boundary and turn them into degraded values.
"""

from typing import Any


class DisasterIntelError(Exception):
    """Base exception class for all disaster-intel errors."""

    def __init__(
        self,
        message: str = "An error occurred in disaster-intel",
        code: str = "DISASTER_INTEL_ERROR",
        details: dict[str, Any] | None = None,
    ):
        """Initialize the base error.

        Args:
            message: Human-readable error message
            code: Machine-readable error code
            details: Additional error context and metadata
        """
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a standardized dictionary format."""
        return {"error": {"code": self.code, "message": self.message, "details": self.details}}


class ConfigurationMissingError(DisasterIntelError):
    """Raised when a provider is used without its credential."""

    def __init__(
        self,
        message: str = "Required configuration is missing",
        setting: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        details = details or {}
        if setting:
            details["setting"] = setting

        super().__init__(message=message, code="CONFIGURATION_MISSING", details=details)


class UpstreamError(DisasterIntelError):
    """Exception raised when an external provider fails or returns nothing usable."""

    def __init__(
        self,
        message: str = "External service error",
        service_name: str | None = None,
        operation: str | None = None,
        status: str = "error",
        details: dict[str, Any] | None = None,
    ):
        """Initialize an upstream error.

        Args:
            message: Description of the upstream failure
            service_name: Name of the external service
            operation: Operation that was attempted
            status: Outcome status reported to observability (error, no_results, timeout)
            details: Additional error details
        """
        details = details or {}
        if service_name:
            details["service_name"] = service_name
        if operation:
            details["operation"] = operation
        details["status"] = status
        self.service_name = service_name
        self.operation = operation
        self.status = status

        super().__init__(message=message, code="UPSTREAM_ERROR", details=details)


class RequestTimeoutError(UpstreamError):
    """Exception raised when a provider request exceeds its timeout."""

    def __init__(
        self,
        message: str = "Request timed out",
        service_name: str | None = None,
        operation: str | None = None,
        timeout: float | None = None,
        details: dict[str, Any] | None = None,
    ):
        details = details or {}
        if timeout:
            details["timeout_seconds"] = timeout

        super().__init__(
            message=message,
            service_name=service_name,
            operation=operation,
            status="timeout",
            details=details,
        )


class ParseError(DisasterIntelError):
    """Exception raised when provider output is not in the expected shape."""

    def __init__(
        self,
        message: str = "Provider output could not be parsed",
        expected_format: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        details = details or {}
        if expected_format:
            details["expected_format"] = expected_format

        super().__init__(message=message, code="PARSE_ERROR", details=details)


class CacheUnavailableError(DisasterIntelError):
    """Exception raised when the cache store cannot be read or written."""

    def __init__(
        self,
        message: str = "Cache store unavailable",
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        details = details or {}
        if operation:
            details["operation"] = operation

        super().__init__(message=message, code="CACHE_UNAVAILABLE", details=details)
