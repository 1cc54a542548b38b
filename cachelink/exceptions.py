"""
cachelink 클라이언트 예외 및 에러 처리 모듈

이 모듈은 cachelink 클라이언트에서 발생할 수 있는 모든 예외를 정의합니다.
호출자가 복구 전략을 선택할 수 있도록 실패 원인별로 예외 타입을 구분합니다.

주요 구성요소:
    - ErrorCode: 에러 코드 열거형
    - CacheLinkError: 모든 cachelink 예외의 기본 클래스
    - CodecError: 값 직렬화/역직렬화 실패
    - StoreError: Redis 직접 조회 실패
    - TransportError: cachelink 서비스까지의 네트워크 실패
    - ServiceError: cachelink 서비스가 에러 응답을 반환한 경우
    - ConfigurationError: 잘못된 클라이언트 설정
    - create_error_context: 구조화된 로깅용 에러 컨텍스트 생성

재시도 정책:
    이 계층은 어떤 작업도 자동으로 재시도하지 않습니다.
    모든 에러는 해당 작업을 호출한 곳에서 즉시 발생합니다.
"""

from typing import Any, Dict, Optional
from enum import Enum


class ErrorCode(Enum):
    """
    cachelink 에러 코드 열거형

    로그와 직렬화된 에러 응답에서 실패 원인을 식별하는 데 사용됩니다.
    """

    CODEC_ERROR = "codec_error"  # 값 인코딩/디코딩 실패
    STORE_ERROR = "store_error"  # Redis 직접 조회 실패
    TRANSPORT_ERROR = "transport_error"  # 네트워크 수준 실패
    SERVICE_ERROR = "service_error"  # 서비스 에러 응답
    CONFIGURATION_ERROR = "configuration_error"  # 잘못된 설정


class CacheLinkError(Exception):
    """
    모든 cachelink 에러의 기본 예외 클래스

    Attributes:
        message (str): 에러 메시지
        code (ErrorCode): 에러 코드
        data (dict): 추가 에러 정보 (선택사항)
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.SERVICE_ERROR,
        data: Optional[Dict[str, Any]] = None,
    ):
        """
        Args:
            message: 에러 메시지
            code: 에러 코드 (기본값: SERVICE_ERROR)
            data: 디버깅에 유용한 추가 정보 (선택사항)
        """
        self.message = message
        self.code = code
        self.data = data or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """
        에러를 딕셔너리 형식으로 변환

        data 필드는 값이 있을 때만 포함됩니다.

        Returns:
            Dict[str, Any]: code, message, data(선택)를 담은 딕셔너리
        """
        error_dict = {"code": self.code.value, "message": self.message}
        if self.data:
            error_dict["data"] = self.data
        return error_dict


class CodecError(CacheLinkError):
    """
    값 인코딩/디코딩 실패 에러

    JSON으로 표현할 수 없는 값을 저장하려 하거나, 저장된 페이로드가
    손상되어 역직렬화할 수 없을 때 발생합니다.
    이 에러는 "값 없음"으로 처리되어서는 안 되며 항상 호출자에게 전달됩니다.
    """

    def __init__(
        self,
        message: str,
        encoding: Optional[str] = None,
        data: Optional[Dict[str, Any]] = None,
    ):
        """
        Args:
            message: 에러 메시지
            encoding: 실패 당시 호스트 인코딩 (선택사항)
            data: 추가 정보
        """
        if data is None:
            data = {}
        if encoding:
            data["encoding"] = encoding

        super().__init__(message=message, code=ErrorCode.CODEC_ERROR, data=data)


class StoreError(CacheLinkError):
    """
    Redis 직접 조회 실패 에러

    직접 조회 경로에서 Redis 호출이 실패했을 때 발생합니다.
    서비스 경로로 대체(fallback)하지 않습니다.
    """

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        data: Optional[Dict[str, Any]] = None,
    ):
        """
        Args:
            message: 에러 메시지
            operation: 실패한 Redis 명령 (예: "get", "mget")
            data: 추가 정보 (예: 키 개수, 원본 에러)
        """
        if data is None:
            data = {}
        if operation:
            data["operation"] = operation

        super().__init__(message=message, code=ErrorCode.STORE_ERROR, data=data)


class TransportError(CacheLinkError):
    """
    네트워크 수준 실패 에러

    타임아웃, 연결 거부 등 cachelink 서비스에 도달하지 못한 경우입니다.
    HTTP 세션 관리자가 httpx의 전송 예외를 이 타입으로 변환합니다.
    """

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        data: Optional[Dict[str, Any]] = None,
    ):
        if data is None:
            data = {}
        if url:
            data["url"] = url

        super().__init__(message=message, code=ErrorCode.TRANSPORT_ERROR, data=data)


class ServiceError(CacheLinkError):
    """
    cachelink 서비스 에러 응답

    서비스가 2xx 이외의 상태 코드로 응답했을 때 발생합니다.
    원본 상태 코드와 메시지가 보존되며, 원본 httpx 예외는
    `__cause__`로 연결됩니다.

    Attributes:
        status_code (int | None): HTTP 상태 코드
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        data: Optional[Dict[str, Any]] = None,
    ):
        if data is None:
            data = {}
        if status_code is not None:
            data["status_code"] = status_code

        self.status_code = status_code
        super().__init__(message=message, code=ErrorCode.SERVICE_ERROR, data=data)


class ConfigurationError(CacheLinkError):
    """잘못된 클라이언트 설정"""

    def __init__(self, message: str, errors: Optional[list[str]] = None):
        data = {"errors": errors} if errors else None
        super().__init__(
            message=message, code=ErrorCode.CONFIGURATION_ERROR, data=data
        )


def create_error_context(
    error: Exception,
    operation: Optional[str] = None,
    key: Optional[str] = None,
    path: Optional[str] = None,
) -> Dict[str, Any]:
    """
    로깅을 위한 에러 컨텍스트 생성

    구조화된 로깅에 사용할 수 있도록 에러와 관련된
    컨텍스트 정보를 수집합니다.

    Args:
        error: 발생한 예외
        operation: 실패한 작업 (예: "get", "set", "clear")
        key: 관련 캐시 키
        path: 요청 경로

    Returns:
        Dict[str, Any]: 에러 컨텍스트 딕셔너리
            - error_type: 예외 클래스 이름
            - error_message: 에러 메시지
            - operation / key / path: 제공된 경우에만 포함
            - error_code / error_data: CacheLinkError인 경우
    """
    context: Dict[str, Any] = {
        "error_type": type(error).__name__,
        "error_message": str(error),
    }

    if operation:
        context["operation"] = operation
    if key:
        context["key"] = key
    if path:
        context["path"] = path

    if isinstance(error, CacheLinkError):
        context["error_code"] = error.code.value
        context["error_data"] = error.data

    return context
