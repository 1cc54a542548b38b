"""
cachelink 요청 빌더

여섯 가지 논리 작업(get, get_many, set, clear, clear_later, trigger_clear_now)을
프로토콜 수준의 요청 설명으로 변환합니다. I/O는 수행하지 않습니다.

요청 형식:
    | 작업              | 메서드 | 경로           | 쿼리/본문                                     |
    |-------------------|--------|----------------|-----------------------------------------------|
    | get               | GET    | /{인코딩된 키}  | -                                             |
    | get_many          | GET    | /              | k[0]=키, k[1]=키, ... (인덱스 목록)              |
    | set               | PUT    | /              | key, data, millis, associations, broadcast    |
    | clear             | DELETE | /              | key, levels, local                            |
    | clear_later       | PUT    | /clear-later   | key                                           |
    | trigger_clear_now | GET    | /clear-now     | -                                             |
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Sequence
from urllib.parse import quote

from cachelink.cache.codec import ValueCodec

# 쿼리 값은 문자열 또는 문자열 목록
type QueryParams = dict[str, str | list[str]]

GET_MANY_PARAM = "k"


class ClearLevel(str, Enum):
    """
    캐시 삭제 수준

    ALL: 연관된 모든 키까지 연쇄 삭제
    NONE: 지정한 키만 삭제
    """

    ALL = "all"
    NONE = "none"


@dataclass(frozen=True)
class CacheLinkRequest:
    """
    프로토콜 수준 요청 설명

    Attributes:
        method (str): HTTP 메서드
        path (str): 기본 URL 기준 경로
        params (QueryParams): 쿼리 파라미터
        json (Any): JSON 본문 (없으면 None)
        timeout (float): 요청 타임아웃 (초)
    """

    method: str
    path: str
    timeout: float
    params: QueryParams = field(default_factory=dict)
    json: Optional[Any] = None

    def with_background(self) -> "CacheLinkRequest":
        """background=true 쿼리 표시가 추가된 요청 반환"""
        return CacheLinkRequest(
            method=self.method,
            path=self.path,
            timeout=self.timeout,
            params={**self.params, "background": "true"},
            json=self.json,
        )


class RequestBuilder:
    """
    cachelink 요청 설명 생성기

    모든 요청에 설정된 타임아웃이 포함됩니다.
    """

    def __init__(self, timeout: float, codec: Optional[ValueCodec] = None):
        self.timeout = timeout
        self.codec = codec or ValueCodec()

    def get(self, key: str) -> CacheLinkRequest:
        # 경로 세그먼트 안의 예약 문자까지 모두 이스케이프 ("user:1" -> "user%3A1")
        return CacheLinkRequest("GET", "/" + quote(key, safe=""), self.timeout)

    def get_many(self, keys: Sequence[str]) -> CacheLinkRequest:
        # 키가 하나여도 목록으로 해석되도록 인덱스 표기 사용 (k[0]=a&k[1]=b)
        params = {f"{GET_MANY_PARAM}[{i}]": key for i, key in enumerate(keys)}
        return CacheLinkRequest("GET", "/", self.timeout, params=params)

    def set(
        self,
        key: str,
        value: Any,
        millis: int,
        associations: Sequence[str] = (),
        broadcast: bool = False,
    ) -> CacheLinkRequest:
        """
        set 요청 생성

        값은 코덱으로 인코딩되어 `data` 필드에 UTF-8 문자열로 들어갑니다.

        Args:
            key: 캐시 키
            value: 저장할 값
            millis: TTL (밀리초)
            associations: 이 값이 의존하는 키 목록 (순서 유지)
            broadcast: 모든 데이터센터로 전파할지 여부

        Raises:
            CodecError: 값을 인코딩할 수 없는 경우
        """
        return CacheLinkRequest(
            "PUT",
            "/",
            self.timeout,
            json={
                "key": key,
                "data": self.codec.encode_text(value),
                "millis": millis,
                "associations": list(associations),
                "broadcast": bool(broadcast),
            },
        )

    def clear(
        self,
        keys: Sequence[str],
        levels: ClearLevel | str = ClearLevel.ALL,
        broadcast: bool = True,
    ) -> CacheLinkRequest:
        """
        clear 요청 생성

        서비스는 브로드캐스트 대신 `local` 플래그를 받으므로 반전해서 전송합니다.
        """
        return CacheLinkRequest(
            "DELETE",
            "/",
            self.timeout,
            json={
                "key": list(keys),
                "levels": ClearLevel(levels).value,
                "local": not broadcast,
            },
        )

    def clear_later(self, keys: Sequence[str]) -> CacheLinkRequest:
        return CacheLinkRequest(
            "PUT", "/clear-later", self.timeout, json={"key": list(keys)}
        )

    def trigger_clear_now(self) -> CacheLinkRequest:
        return CacheLinkRequest("GET", "/clear-now", self.timeout)
