"""
cachelink 요청 실행기

빌드된 요청을 HTTP 세션을 통해 전송하고, 동기/백그라운드 토글을 적용하며,
서비스 에러 응답을 ServiceError로 변환합니다.

background 처리:
    wait=False이면 요청에 `background=true` 쿼리를 추가합니다.
    서비스는 수신 즉시 응답하고 작업은 비동기로 처리합니다.
    클라이언트는 여전히 이 응답(빠른 확인 응답)을 기다립니다.

에러 처리:
    - 2xx 이외의 응답: ServiceError (상태 코드, 메시지, 원본 예외 보존)
    - 네트워크 실패: 세션 관리자가 TransportError로 변환 (이 계층에서 변환하지 않음)
"""

import json
from typing import Any

import httpx
import structlog

from cachelink.exceptions import ServiceError, create_error_context
from cachelink.protocol.requests import CacheLinkRequest
from cachelink.utils.connection_manager import HTTPSessionManager

logger = structlog.get_logger(__name__)


class RequestExecutor:
    """
    cachelink 요청 실행기

    응답 본문은 JSON으로 파싱하여 그대로 반환합니다.
    값 페이로드의 코덱 디코딩은 상위 계층(get/get_many)에서 수행합니다.
    """

    def __init__(self, session_manager: HTTPSessionManager):
        self._session_manager = session_manager

    async def execute(self, request: CacheLinkRequest, wait: bool) -> Any:
        """
        요청 실행

        Args:
            request: 요청 설명
            wait: True이면 서비스가 작업을 완료할 때까지 대기,
                False이면 백그라운드 처리 요청

        Returns:
            Any: JSON으로 파싱된 응답 (본문이 비어 있으면 None)

        Raises:
            ServiceError: 서비스가 에러 상태 코드로 응답한 경우
            TransportError: 서비스에 도달하지 못한 경우
        """
        if not wait:
            request = request.with_background()

        async with self._session_manager.session() as session:
            http_request = session.build_request(
                request.method,
                request.path,
                params=request.params or None,
                json=request.json,
                timeout=request.timeout,
            )
            response = await session.send(http_request)

        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            error = ServiceError(
                str(e),
                status_code=response.status_code,
                data={"body": response.text[:500]} if response.content else None,
            )
            logger.warning(
                "cachelink 요청 실패",
                method=request.method,
                **create_error_context(error, path=request.path),
            )
            raise error from e

        logger.debug(
            "cachelink 요청 완료",
            method=request.method,
            path=request.path,
            status=response.status_code,
            background=not wait,
        )

        if not response.content:
            return None

        try:
            return response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ServiceError(
                f"Invalid response body from cachelink service: {e}",
                status_code=response.status_code,
            ) from e
