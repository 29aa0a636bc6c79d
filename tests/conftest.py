import json
from datetime import datetime, timedelta, timezone
from typing import Callable

import httpx
import pytest

from disaster_intel.utils.cache.backends import InMemoryCacheBackend
from disaster_intel.utils.cache.cache import CacheStore
from disaster_intel.utils.logging import logger as logging_module

START_TIME = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    """Manually advanced clock for expiry tests."""

    def __init__(self, start: datetime = START_TIME):
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> None:
        self.current += timedelta(**kwargs)


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it served."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.requests: list[httpx.Request] = []

        def recording_handler(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(recording_handler)

    def requests_to(self, host: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.host == host]


def gemini_reply(text: str) -> httpx.Response:
    """A generateContent response carrying ``text``."""
    return httpx.Response(
        200, json={"candidates": [{"content": {"parts": [{"text": text}]}}]}
    )


def request_json(request: httpx.Request) -> dict:
    return json.loads(request.content.decode("utf-8"))


@pytest.fixture(autouse=True)
def reset_warn_once():
    """Let every test observe one-time warnings afresh."""
    logging_module._WARNED_KEYS.clear()
    yield
    logging_module._WARNED_KEYS.clear()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def backend() -> InMemoryCacheBackend:
    return InMemoryCacheBackend()


@pytest.fixture
def cache(backend, clock) -> CacheStore:
    return CacheStore(backend, default_ttl_hours=1, clock=clock)


@pytest.fixture
def make_transport():
    """Build a RecordingTransport from a request handler."""
    return RecordingTransport
