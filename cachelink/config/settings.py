"""
cachelink 클라이언트 설정 클래스

클라이언트의 모든 설정을 관리합니다.
기본값과 환경 변수 오버라이드를 지원합니다.

환경 변수:
    CACHELINK_BASE_URL: cachelink 서비스 기본 URL (필수)
    CACHELINK_TIMEOUT: 요청 타임아웃 (초, 기본값: 5)
    CACHELINK_MAX_CONNECTIONS: 최대 HTTP 연결 수
    CACHELINK_MAX_KEEPALIVE: 최대 keep-alive 연결 수
    CACHELINK_KEEPALIVE_EXPIRY: keep-alive 만료 시간 (초)
    CACHELINK_ENCODING: 호스트 텍스트 인코딩 (기본값: utf-8)
    CACHELINK_REDIS_URL: 직접 조회용 Redis URL (없으면 서비스 경로만 사용)
    CACHELINK_KEY_PREFIX: cachelink 키 접두사
    LOG_LEVEL, LOG_JSON: 로깅 설정
"""

import codecs
import os
from dataclasses import dataclass, field
from typing import Any, Optional

import structlog

logger = structlog.get_logger(__name__)

# 서비스 응답 대기 기본 타임아웃 (초)
DEFAULT_TIMEOUT = 5.0


@dataclass
class LoggingConfig:
    """
    로깅 설정

    구조화된 로깅 출력 형식과 레벨을 제어합니다.
    """

    log_level: str = "INFO"
    json_logs: bool = False

    @classmethod
    def from_env(cls) -> "LoggingConfig":
        """환경 변수에서 로깅 설정 로드"""
        return cls(
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            json_logs=os.getenv("LOG_JSON", "false").lower() == "true",
        )


@dataclass
class DirectStoreSettings:
    """
    Redis 직접 조회 설정

    이 설정이 존재하면 get/get_many가 Redis에서 직접 값을 읽습니다.
    """

    redis_url: str = "redis://localhost:6379/0"
    key_prefix: str = ""

    @classmethod
    def from_env(cls) -> Optional["DirectStoreSettings"]:
        """환경 변수에서 직접 조회 설정 로드 (CACHELINK_REDIS_URL이 없으면 None)"""
        redis_url = os.getenv("CACHELINK_REDIS_URL")
        if not redis_url:
            return None
        return cls(
            redis_url=redis_url,
            key_prefix=os.getenv("CACHELINK_KEY_PREFIX", ""),
        )


@dataclass
class ClientSettings:
    """
    cachelink 클라이언트 설정

    사용 예시:
        # 환경 변수 기반 생성
        settings = ClientSettings.from_env()

        # 직접 생성
        settings = ClientSettings(base_url="http://cachelink:3111", timeout=2.0)
    """

    base_url: str = ""
    timeout: float = DEFAULT_TIMEOUT
    max_connections: int = 100
    max_keepalive_connections: int = 20
    keepalive_expiry: float = 30.0
    encoding: str = "utf-8"
    direct_store: Optional[DirectStoreSettings] = None
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_env(cls) -> "ClientSettings":
        """
        환경 변수에서 설정 로드

        Returns:
            환경 변수 기반 ClientSettings 인스턴스
        """
        settings = cls(
            base_url=os.getenv("CACHELINK_BASE_URL", ""),
            timeout=float(os.getenv("CACHELINK_TIMEOUT", str(DEFAULT_TIMEOUT))),
            max_connections=int(os.getenv("CACHELINK_MAX_CONNECTIONS", "100")),
            max_keepalive_connections=int(os.getenv("CACHELINK_MAX_KEEPALIVE", "20")),
            keepalive_expiry=float(os.getenv("CACHELINK_KEEPALIVE_EXPIRY", "30")),
            encoding=os.getenv("CACHELINK_ENCODING", "utf-8"),
            direct_store=DirectStoreSettings.from_env(),
            logging=LoggingConfig.from_env(),
        )

        logger.info(
            "환경 변수 기반 설정 로드 완료",
            base_url=settings.base_url,
            timeout=settings.timeout,
            direct_store=settings.direct_store is not None,
        )
        return settings

    def session_config(self) -> dict[str, Any]:
        """HTTPSessionManager용 설정 딕셔너리"""
        return {
            "base_url": self.base_url,
            "timeout": self.timeout,
            "max_connections": self.max_connections,
            "max_keepalive_connections": self.max_keepalive_connections,
            "keepalive_expiry": self.keepalive_expiry,
        }

    def validate(self) -> tuple[bool, list[str]]:
        """
        설정 유효성 검증

        Returns:
            (유효 여부, 오류 메시지 목록)
        """
        errors = []

        if not self.base_url:
            errors.append("CACHELINK_BASE_URL이 설정되지 않음")
        elif not self.base_url.startswith(("http://", "https://")):
            errors.append(f"잘못된 서비스 URL: {self.base_url}")

        if self.timeout <= 0:
            errors.append(f"타임아웃은 0보다 커야 함: {self.timeout}")

        if self.max_keepalive_connections > self.max_connections:
            errors.append("max_keepalive_connections가 max_connections보다 큼")

        try:
            codecs.lookup(self.encoding)
        except LookupError:
            errors.append(f"알 수 없는 인코딩: {self.encoding}")

        if self.direct_store and not self.direct_store.redis_url:
            errors.append("직접 조회가 설정되었지만 Redis URL이 비어 있음")

        return len(errors) == 0, errors

    def to_dict(self) -> dict[str, Any]:
        """설정을 딕셔너리로 변환"""
        return {
            "base_url": self.base_url,
            "timeout": self.timeout,
            "max_connections": self.max_connections,
            "max_keepalive_connections": self.max_keepalive_connections,
            "keepalive_expiry": self.keepalive_expiry,
            "encoding": self.encoding,
            "direct_store": self.direct_store.__dict__ if self.direct_store else None,
            "logging": self.logging.__dict__,
        }
