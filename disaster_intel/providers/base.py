"""Shared HTTP plumbing for external provider clients."""

from typing import Any

import httpx

from disaster_intel.utils.exceptions import RequestTimeoutError, UpstreamError
from disaster_intel.utils.logging.logger import get_component_logger, log_api_call

logger = get_component_logger("providers")


class HttpProvider:
    """Base class for clients that talk to one external service over HTTP.

    Every failure surfaces as :class:`UpstreamError` (or its timeout
    subclass) after the outcome has been logged with the service name,
    operation and status.
    """

    service_name = "provider"

    def __init__(self, timeout: float = 30.0, transport: httpx.AsyncBaseTransport | None = None):
        """
        Args:
            timeout: Bound on each outbound request, in seconds
            transport: Optional httpx transport (tests pass ``httpx.MockTransport``)
        """
        self.timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    def record(self, operation: str, status: str) -> None:
        log_api_call(logger, self.service_name, operation, status)

    async def _send(self, operation: str, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            async with self._client() as client:
                response = await client.request(method, url, **kwargs)
                response.raise_for_status()
        except httpx.TimeoutException as e:
            logger.error(f"{self.service_name} {operation} timed out after {self.timeout}s")
            self.record(operation, "timeout")
            raise RequestTimeoutError(
                f"{self.service_name} request timed out",
                service_name=self.service_name,
                operation=operation,
                timeout=self.timeout,
            ) from e
        except httpx.HTTPStatusError as e:
            logger.error(
                f"{self.service_name} API error: {e.response.status_code}",
                extra={"service": self.service_name, "endpoint": operation},
            )
            self.record(operation, "error")
            raise UpstreamError(
                f"{self.service_name} returned status code {e.response.status_code}",
                service_name=self.service_name,
                operation=operation,
                details={"status_code": e.response.status_code},
            ) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error(f"{self.service_name} {operation} error: {str(e)}")
            self.record(operation, "error")
            raise UpstreamError(
                f"{self.service_name} request failed: {str(e)}",
                service_name=self.service_name,
                operation=operation,
            ) from e
        return response

    def _json(self, response: httpx.Response, operation: str) -> Any:
        try:
            return response.json()
        except ValueError as e:
            self.record(operation, "error")
            raise UpstreamError(
                f"{self.service_name} returned a non-JSON body",
                service_name=self.service_name,
                operation=operation,
            ) from e
