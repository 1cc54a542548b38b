"""
cachelink 클라이언트 라이브러리

원격 cachelink 서비스가 운영하고 Redis가 백엔드인 공유 연관 캐시를
읽고, 쓰고, 무효화하는 비동기 클라이언트입니다.

주요 구성요소:
    - CacheLinkClient: 공개 작업 API (get, get_many, set, clear, clear_later, trigger_clear_now)
    - RequestOptions: 호출별 옵션 (from_service, broadcast, wait)
    - ClearLevel: 삭제 수준 (ALL, NONE)
    - ValueCodec: UTF-8 전송 페이로드 코덱
    - 예외: CodecError, StoreError, TransportError, ServiceError
"""

from .cache import ValueCodec
from .client import CacheLinkClient, RequestOptions
from .config import ClientSettings, DirectStoreSettings, LoggingConfig
from .exceptions import (
    CacheLinkError,
    CodecError,
    ConfigurationError,
    ErrorCode,
    ServiceError,
    StoreError,
    TransportError,
)
from .protocol import ClearLevel

__version__ = "0.1.0"

__all__ = [
    "CacheLinkClient",
    "RequestOptions",
    "ClearLevel",
    "ValueCodec",
    "ClientSettings",
    "DirectStoreSettings",
    "LoggingConfig",
    "ErrorCode",
    "CacheLinkError",
    "CodecError",
    "StoreError",
    "TransportError",
    "ServiceError",
    "ConfigurationError",
]
