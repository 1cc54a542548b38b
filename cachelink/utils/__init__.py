from .connection_manager import HTTPSessionManager, RequestMetrics, create_redis_client
from .logging import configure_logging

__all__ = [
    "HTTPSessionManager",
    "RequestMetrics",
    "create_redis_client",
    "configure_logging",
]
