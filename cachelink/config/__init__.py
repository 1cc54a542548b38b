"""
설정 관리 모듈

cachelink 클라이언트의 설정을 중앙에서 관리합니다.

주요 구성요소:
    - ClientSettings: 메인 클라이언트 설정 클래스
    - DirectStoreSettings: Redis 직접 조회 설정
    - LoggingConfig: 로깅 설정
"""

from .settings import ClientSettings, DirectStoreSettings, LoggingConfig, DEFAULT_TIMEOUT

__all__ = [
    "ClientSettings",
    "DirectStoreSettings",
    "LoggingConfig",
    "DEFAULT_TIMEOUT",
]
