"""
HTTP session and Redis connection management for the cachelink client.

This module owns the transport collaborators used by the client:

Key features:
- Lazily created httpx.AsyncClient with connection limits and a base URL
- Request metrics (totals, errors, latency samples)
- Conversion of network-level httpx failures into TransportError
- Redis client construction for the direct-read path
"""

import asyncio
import statistics
import time
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Dict, List, Optional

import httpx
import redis.asyncio as redis
import structlog

from cachelink.exceptions import TransportError

logger = structlog.get_logger(__name__)


@dataclass
class RequestMetrics:
    """Metrics for monitoring requests sent to the cachelink service."""

    total_requests: int = 0
    active_requests: int = 0
    transport_errors: int = 0
    latency_ms: List[float] = field(default_factory=list)

    def record_request_started(self) -> None:
        self.active_requests += 1
        self.total_requests += 1

    def record_request_finished(self, latency_ms: float) -> None:
        """Record a finished request."""
        self.active_requests = max(0, self.active_requests - 1)
        self.latency_ms.append(latency_ms)
        if len(self.latency_ms) > 1000:  # Keep last 1000 samples
            self.latency_ms = self.latency_ms[-1000:]

    def record_transport_error(self) -> None:
        self.transport_errors += 1

    def get_avg_latency(self) -> float:
        """Get average request latency in milliseconds."""
        if not self.latency_ms:
            return 0.0
        return statistics.mean(self.latency_ms)

    def get_p95_latency(self) -> float:
        """Get 95th percentile request latency."""
        if len(self.latency_ms) < 2:
            return self.get_avg_latency()
        return statistics.quantiles(self.latency_ms, n=20)[18]


class HTTPSessionManager:
    """Manages the HTTP client used to talk to the cachelink service."""

    def __init__(
        self,
        config: Dict[str, Any],
        client: Optional[httpx.AsyncClient] = None,
    ):
        """Initialize HTTP session manager.

        An externally supplied client is used as-is and is never closed here.
        """
        self.base_url = config["base_url"]
        self.max_connections = config.get("max_connections", 100)
        self.max_keepalive_connections = config.get("max_keepalive_connections", 20)
        self.keepalive_expiry = config.get("keepalive_expiry", 30)
        self.timeout = config.get("timeout", 5)
        self.retries = config.get("retries", 0)

        self._client: Optional[httpx.AsyncClient] = client
        self._owns_client = client is None
        self._limits = httpx.Limits(
            max_connections=self.max_connections,
            max_keepalive_connections=self.max_keepalive_connections,
            keepalive_expiry=self.keepalive_expiry,
        )
        self._lock = asyncio.Lock()
        self.metrics = RequestMetrics()

        logger.debug(
            "HTTP session manager initialized",
            base_url=self.base_url,
            max_connections=self.max_connections,
        )

    async def initialize(self) -> None:
        """Initialize the HTTP client."""
        async with self._lock:
            if self._client is not None:
                return

            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                limits=self._limits,
                timeout=httpx.Timeout(self.timeout),
                transport=httpx.AsyncHTTPTransport(retries=self.retries),
            )
            logger.info("HTTP client created successfully", base_url=self.base_url)

    @asynccontextmanager
    async def session(self) -> AsyncIterator[httpx.AsyncClient]:
        """Get HTTP session for making requests.

        Network-level failures raised inside the block surface as TransportError.
        """
        if self._client is None:
            await self.initialize()

        start_time = time.time()
        self.metrics.record_request_started()

        try:
            yield self._client

        except httpx.TransportError as e:
            self.metrics.record_transport_error()
            try:
                url = str(e.request.url)
            except RuntimeError:  # request not attached
                url = None
            logger.warning(
                "HTTP transport error", error=str(e), error_type=type(e).__name__
            )
            raise TransportError(
                f"Failed to reach cachelink service: {e}", url=url
            ) from e
        finally:
            latency_ms = (time.time() - start_time) * 1000
            self.metrics.record_request_finished(latency_ms)
            logger.debug("HTTP request finished", latency_ms=round(latency_ms, 2))

    async def health_check(self) -> Dict[str, Any]:
        """Report HTTP session metrics."""
        return {
            "status": "initialized" if self._client is not None else "not_initialized",
            "total_requests": self.metrics.total_requests,
            "active_requests": self.metrics.active_requests,
            "transport_errors": self.metrics.transport_errors,
            "avg_latency_ms": self.metrics.get_avg_latency(),
            "p95_latency_ms": self.metrics.get_p95_latency(),
        }

    async def close(self) -> None:
        """Close the HTTP client if this manager created it."""
        if self._client and self._owns_client:
            await self._client.aclose()
            self._client = None
            logger.info("HTTP client closed")


def create_redis_client(redis_url: str, **kwargs: Any) -> redis.Redis:
    """Create an async Redis client for direct reads.

    Responses are left as raw bytes so the value codec controls decoding.
    """
    client = redis.from_url(redis_url, decode_responses=False, **kwargs)
    logger.info("Redis client created", redis_url=redis_url)
    return client
