"""Shared test fixtures and configuration."""

import json
from typing import Any, Callable, List, Optional
from unittest.mock import AsyncMock

import httpx
import pytest
import redis.asyncio as redis

from cachelink.client import CacheLinkClient


BASE_URL = "http://cachelink.test"


class RecordingService:
    """In-memory stand-in for the cachelink service.

    Records every request and answers with the queued responses
    (or the default response once the queue is empty).
    """

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self._queue: List[httpx.Response] = []
        self._default = httpx.Response(200, json={"success": True})
        self.error: Optional[Callable[[httpx.Request], Exception]] = None

    def respond(self, status_code: int = 200, json: Any = None, content: Optional[bytes] = None):
        """Queue a response."""
        if content is None and json is not None:
            self._queue.append(httpx.Response(status_code, json=json))
        else:
            self._queue.append(httpx.Response(status_code, content=content or b""))

    def fail_with(self, factory: Callable[[httpx.Request], Exception]):
        """Raise a transport-level exception for every request."""
        self.error = factory

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error(request)
        if self._queue:
            return self._queue.pop(0)
        return self._default

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_body(self) -> Any:
        return json.loads(self.last.content)


@pytest.fixture
def service():
    """Fixture for the recording cachelink service."""
    return RecordingService()


@pytest.fixture
def http_client(service):
    """httpx client routed to the recording service."""
    return httpx.AsyncClient(
        base_url=BASE_URL, transport=httpx.MockTransport(service.handler)
    )


@pytest.fixture
def client(http_client):
    """Service-only cachelink client."""
    return CacheLinkClient(BASE_URL, 2.0, http_client=http_client)


@pytest.fixture
def mock_redis():
    """Create mock Redis client."""
    mock = AsyncMock(spec=redis.Redis)
    mock.get = AsyncMock(return_value=None)
    mock.mget = AsyncMock(return_value=[])
    mock.aclose = AsyncMock()
    return mock


@pytest.fixture
def direct_client(client, mock_redis):
    """cachelink client with direct Redis reads under prefix "x:"."""
    return client.with_direct_redis(mock_redis, "x:")
