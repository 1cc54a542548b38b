"""Unit tests for HTTP session management."""

from unittest.mock import patch

import httpx
import pytest

from cachelink.exceptions import TransportError
from cachelink.utils.connection_manager import (
    HTTPSessionManager,
    RequestMetrics,
    create_redis_client,
)


class TestRequestMetrics:
    """Test request metrics."""

    def test_record_requests(self):
        metrics = RequestMetrics()

        metrics.record_request_started()
        metrics.record_request_finished(10.0)
        metrics.record_request_started()
        metrics.record_request_finished(30.0)

        assert metrics.total_requests == 2
        assert metrics.active_requests == 0
        assert metrics.get_avg_latency() == 20.0

    def test_empty_latency(self):
        metrics = RequestMetrics()

        assert metrics.get_avg_latency() == 0.0
        assert metrics.get_p95_latency() == 0.0

    def test_latency_samples_are_bounded(self):
        metrics = RequestMetrics()

        for i in range(1100):
            metrics.record_request_finished(float(i))

        assert len(metrics.latency_ms) == 1000


@pytest.mark.asyncio
class TestHTTPSessionManager:
    """Test HTTP session lifecycle."""

    async def test_lazy_initialization(self):
        manager = HTTPSessionManager({"base_url": "http://cachelink.test", "timeout": 3})

        assert (await manager.health_check())["status"] == "not_initialized"

        async with manager.session() as session:
            assert isinstance(session, httpx.AsyncClient)
            assert session.base_url == httpx.URL("http://cachelink.test/")
            assert session.timeout.read == 3

        health = await manager.health_check()
        assert health["status"] == "initialized"
        assert health["total_requests"] == 1

        await manager.close()
        assert manager._client is None

    async def test_transport_error_is_converted(self, http_client, service):
        service.fail_with(lambda request: httpx.ConnectTimeout("timeout", request=request))
        manager = HTTPSessionManager({"base_url": "http://cachelink.test"}, client=http_client)

        with pytest.raises(TransportError):
            async with manager.session() as session:
                await session.get("/a")

        assert manager.metrics.transport_errors == 1
        assert manager.metrics.active_requests == 0

    async def test_other_errors_propagate(self, http_client):
        manager = HTTPSessionManager({"base_url": "http://cachelink.test"}, client=http_client)

        with pytest.raises(KeyError):
            async with manager.session():
                raise KeyError("unrelated")

        assert manager.metrics.transport_errors == 0

    async def test_external_client_not_closed(self, http_client):
        manager = HTTPSessionManager({"base_url": "http://cachelink.test"}, client=http_client)

        await manager.close()

        assert not http_client.is_closed


def test_create_redis_client():
    """Test Redis client is built from URL with raw byte responses."""
    with patch("cachelink.utils.connection_manager.redis.from_url") as from_url:
        create_redis_client("redis://cache:6379/0")

    from_url.assert_called_once_with("redis://cache:6379/0", decode_responses=False)
