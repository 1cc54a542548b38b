"""Unit tests for cachelink request execution."""

import httpx
import pytest

from cachelink.exceptions import ErrorCode, ServiceError, TransportError
from cachelink.protocol.executor import RequestExecutor
from cachelink.protocol.requests import RequestBuilder
from cachelink.utils.connection_manager import HTTPSessionManager

BASE_URL = "http://cachelink.test"


@pytest.fixture
def executor(http_client):
    """Executor bound to the recording service."""
    manager = HTTPSessionManager({"base_url": BASE_URL}, client=http_client)
    return RequestExecutor(manager)


@pytest.fixture
def builder():
    return RequestBuilder(timeout=2.0)


@pytest.mark.asyncio
class TestBackgroundToggle:
    """Test the wait/background toggle."""

    async def test_no_wait_adds_background(self, executor, builder, service):
        """Test wait=False adds background=true."""
        await executor.execute(builder.clear_later(["a"]), wait=False)

        assert service.last.url.params.get("background") == "true"

    async def test_wait_has_no_background(self, executor, builder, service):
        """Test wait=True sends no background marker."""
        await executor.execute(builder.clear_later(["a"]), wait=True)

        assert "background" not in service.last.url.params

    async def test_background_keeps_other_params(self, executor, builder, service):
        """Test background marker is merged with existing query parameters."""
        await executor.execute(builder.get_many(["a", "b"]), wait=False)

        params = service.last.url.params
        assert params.get("k[0]") == "a"
        assert params.get("k[1]") == "b"
        assert params.get("background") == "true"


@pytest.mark.asyncio
class TestRequestEncoding:
    """Test requests sent over the wire."""

    async def test_path_and_method(self, executor, builder, service):
        """Test method and escaped path reach the service."""
        await executor.execute(builder.get("user:1"), wait=True)

        assert service.last.method == "GET"
        assert service.last.url.raw_path == b"/user%3A1"

    async def test_json_body(self, executor, builder, service):
        """Test DELETE carries a JSON body."""
        await executor.execute(builder.clear(["a"], broadcast=True), wait=True)

        assert service.last.method == "DELETE"
        assert service.last_body() == {"key": ["a"], "levels": "all", "local": False}

    async def test_timeout_is_applied(self, executor, builder, service):
        """Test every request carries the configured timeout."""
        await executor.execute(builder.trigger_clear_now(), wait=True)

        assert service.last.extensions["timeout"]["read"] == 2.0
        assert service.last.extensions["timeout"]["connect"] == 2.0

    async def test_one_latency_sample_per_request(self, executor, builder, service):
        """Test each executed request is timed once by the session."""
        await executor.execute(builder.get("a"), wait=True)
        await executor.execute(builder.clear_later(["a"]), wait=False)

        metrics = executor._session_manager.metrics
        assert metrics.total_requests == 2
        assert len(metrics.latency_ms) == 2
        assert metrics.active_requests == 0


@pytest.mark.asyncio
class TestResponses:
    """Test response handling."""

    async def test_json_result_returned_as_is(self, executor, builder, service):
        """Test JSON body is returned without codec decoding."""
        service.respond(json={"a": '{"x":1}'})

        result = await executor.execute(builder.get_many(["a"]), wait=True)

        assert result == {"a": '{"x":1}'}

    async def test_empty_body(self, executor, builder, service):
        """Test empty body yields None."""
        service.respond(content=b"")

        assert await executor.execute(builder.get("a"), wait=True) is None

    async def test_null_body(self, executor, builder, service):
        """Test JSON null yields None."""
        service.respond(content=b"null")

        assert await executor.execute(builder.get("a"), wait=True) is None

    async def test_server_error(self, executor, builder, service):
        """Test 5xx response raises ServiceError with original details."""
        service.respond(500, content=b"boom")

        with pytest.raises(ServiceError) as exc_info:
            await executor.execute(builder.get("a"), wait=True)

        error = exc_info.value
        assert error.status_code == 500
        assert error.code == ErrorCode.SERVICE_ERROR
        assert "500" in error.message
        assert error.data["body"] == "boom"
        assert isinstance(error.__cause__, httpx.HTTPStatusError)

    async def test_client_error(self, executor, builder, service):
        """Test 4xx response also raises ServiceError."""
        service.respond(400, json={"error": "bad key"})

        with pytest.raises(ServiceError) as exc_info:
            await executor.execute(builder.clear([], broadcast=True), wait=False)

        assert exc_info.value.status_code == 400

    async def test_invalid_json_body(self, executor, builder, service):
        """Test undecodable success body raises ServiceError."""
        service.respond(200, content=b"<html>")

        with pytest.raises(ServiceError, match="Invalid response body"):
            await executor.execute(builder.get("a"), wait=True)


@pytest.mark.asyncio
class TestTransportFailures:
    """Test network-level failures."""

    async def test_connect_error(self, executor, builder, service):
        """Test refused connections raise TransportError."""
        service.fail_with(lambda request: httpx.ConnectError("refused", request=request))

        with pytest.raises(TransportError) as exc_info:
            await executor.execute(builder.get("a"), wait=True)

        assert exc_info.value.code == ErrorCode.TRANSPORT_ERROR
        assert exc_info.value.data["url"] == f"{BASE_URL}/a"
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    async def test_timeout(self, executor, builder, service):
        """Test timeouts raise TransportError, not ServiceError."""
        service.fail_with(lambda request: httpx.ReadTimeout("slow", request=request))

        with pytest.raises(TransportError, match="Failed to reach cachelink service"):
            await executor.execute(builder.set("a", 1, 10), wait=False)
