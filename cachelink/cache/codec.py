"""
캐시 값 코덱

애플리케이션 값을 전송 가능한 바이트로 변환하고 다시 복원합니다.
cachelink 서비스와 Redis에 저장되는 페이로드는 항상 UTF-8이어야 하므로,
호스트 인코딩이 UTF-8이 아닌 경우 직렬화 후 명시적으로 재인코딩합니다.

직렬화 형식:
    - JSON (ensure_ascii=False, 공백 없는 구분자)
    - 스칼라, 리스트, 문자열 키 딕셔너리의 임의 중첩 지원

인코딩 정책:
    - 호스트 인코딩은 생성자 인자로 주입됩니다
    - 인코딩/디코딩 시점에 전역 상태(locale 등)를 읽지 않습니다
"""

import codecs
import json
from typing import Any

import structlog

from cachelink.exceptions import CodecError

logger = structlog.get_logger(__name__)

# 전송 구간의 고정 인코딩
CANONICAL_ENCODING = "utf-8"


class ValueCodec:
    """
    JSON 기반 값 코덱

    Attributes:
        encoding (str): 호스트 측 텍스트 인코딩 (정규화된 codec 이름)

    사용 예시:
        ```python
        codec = ValueCodec()
        payload = codec.encode({"name": "a"})  # b'{"name":"a"}'
        codec.decode(payload)  # {"name": "a"}
        ```
    """

    def __init__(self, encoding: str = CANONICAL_ENCODING):
        """
        Args:
            encoding: 호스트 측 텍스트 인코딩 (기본값: utf-8)

        Raises:
            CodecError: 알 수 없는 인코딩 이름인 경우
        """
        try:
            self.encoding = codecs.lookup(encoding).name
        except LookupError as e:
            raise CodecError(f"Unknown encoding: {encoding}", encoding=encoding) from e

    @property
    def is_canonical(self) -> bool:
        """호스트 인코딩이 전송 인코딩과 같은지 여부"""
        return self.encoding == codecs.lookup(CANONICAL_ENCODING).name

    def encode(self, value: Any) -> bytes:
        """
        값을 UTF-8 전송 페이로드로 인코딩

        Args:
            value: JSON으로 표현 가능한 애플리케이션 값

        Returns:
            bytes: UTF-8로 인코딩된 직렬화 결과

        Raises:
            CodecError: 직렬화 또는 재인코딩 실패 시
        """
        try:
            text = json.dumps(value, ensure_ascii=False, separators=(",", ":"))
        except (TypeError, ValueError) as e:
            raise CodecError(
                f"Value is not serializable: {e}", encoding=self.encoding
            ) from e

        try:
            raw = text.encode(self.encoding)
            if not self.is_canonical:
                # 호스트 인코딩 -> UTF-8
                raw = raw.decode(self.encoding).encode(CANONICAL_ENCODING)
        except UnicodeError as e:
            raise CodecError(
                f"Failed to transcode payload: {e}", encoding=self.encoding
            ) from e

        return raw

    def encode_text(self, value: Any) -> str:
        """JSON 요청 본문에 넣을 수 있도록 UTF-8 페이로드를 문자열로 반환"""
        return self.encode(value).decode(CANONICAL_ENCODING)

    def decode(self, payload: bytes | str) -> Any:
        """
        UTF-8 전송 페이로드를 값으로 디코딩

        Args:
            payload: Redis 또는 서비스에서 받은 페이로드

        Returns:
            Any: 역직렬화된 값

        Raises:
            CodecError: 재인코딩 실패 또는 잘못된 JSON인 경우
        """
        if isinstance(payload, str):
            payload = payload.encode(CANONICAL_ENCODING)
        elif not isinstance(payload, (bytes, bytearray)):
            raise CodecError(
                f"Unexpected payload type: {type(payload).__name__}",
                encoding=self.encoding,
            )

        try:
            raw = payload
            if not self.is_canonical:
                # UTF-8 -> 호스트 인코딩
                raw = raw.decode(CANONICAL_ENCODING).encode(self.encoding)
            return json.loads(raw.decode(self.encoding))
        except (UnicodeError, ValueError) as e:
            # json.JSONDecodeError는 ValueError의 하위 클래스
            logger.warning(
                "캐시 값 디코딩 실패", encoding=self.encoding, size=len(payload)
            )
            raise CodecError(
                f"Malformed payload: {e}", encoding=self.encoding
            ) from e
