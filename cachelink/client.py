"""
cachelink 클라이언트

cachelink 서비스가 운영하는 공유 연관 캐시에 대한 공개 API입니다.
호출마다 가장 빠르면서 올바른 경로를 선택합니다.

작업별 경로:
    - get / get_many: Redis 직접 조회가 설정되어 있고 from_service가 아니면 Redis,
      그 외에는 서비스 (항상 wait=True)
    - set / clear / clear_later / trigger_clear_now: 항상 서비스

옵션 기본값:
    | 옵션         | set   | clear | clear_later | trigger_clear_now |
    |--------------|-------|-------|-------------|-------------------|
    | broadcast    | False | True  | -           | -                 |
    | wait         | False | False | False       | False             |

사용 예시:
    ```python
    async with CacheLinkClient("http://cachelink:3111") as client:
        await client.set("user:1", {"name": "a"}, 60000, ["users"])
        user = await client.get("user:1")
        await client.clear(["users"])
    ```
"""

from typing import Any, Mapping, Optional, Sequence

import httpx
import redis.asyncio as redis
import structlog
from pydantic import BaseModel, ConfigDict, StrictBool

from cachelink.cache.codec import ValueCodec
from cachelink.cache.redis_reader import DirectRedisReader
from cachelink.config.settings import DEFAULT_TIMEOUT, ClientSettings
from cachelink.exceptions import ConfigurationError
from cachelink.protocol.executor import RequestExecutor
from cachelink.protocol.requests import ClearLevel, RequestBuilder
from cachelink.utils.connection_manager import HTTPSessionManager, create_redis_client

logger = structlog.get_logger(__name__)


class RequestOptions(BaseModel):
    """
    호출별 옵션

    지정하지 않은 플래그(None)는 작업별 기본값을 따릅니다.

    Attributes:
        from_service: get/get_many에서 Redis 직접 조회를 건너뜀
        broadcast: 모든 데이터센터로 전파 (set 기본 False, clear 기본 True)
        wait: 서비스가 작업을 완료할 때까지 대기 (기본 False)
    """

    model_config = ConfigDict(frozen=True)

    from_service: Optional[StrictBool] = None
    broadcast: Optional[StrictBool] = None
    wait: Optional[StrictBool] = None


type Options = RequestOptions | Mapping[str, Any] | None


def _flag(options: Options, name: str) -> Optional[bool]:
    """옵션에서 명시적으로 지정된 bool 플래그를 꺼냄 (bool이 아니면 None)"""
    if options is None:
        return None
    if isinstance(options, RequestOptions):
        return getattr(options, name)
    value = options.get(name)
    return value if isinstance(value, bool) else None


class CacheLinkClient:
    """
    cachelink 클라이언트 파사드

    직접 조회 설정은 생성 시점에 한 번 결정되며 인스턴스 수명 동안 바뀌지 않습니다.
    직접 조회를 붙이려면 with_direct_redis()로 새 클라이언트를 만듭니다.

    Attributes:
        base_url (str): cachelink 서비스 기본 URL
        timeout (float): 요청 타임아웃 (초)
        codec (ValueCodec): 값 코덱
        direct_store (DirectRedisReader | None): Redis 직접 조회기
    """

    DEFAULT_TIMEOUT = DEFAULT_TIMEOUT
    CLEAR_LEVELS_ALL = ClearLevel.ALL
    CLEAR_LEVELS_NONE = ClearLevel.NONE

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        *,
        http_client: Optional[httpx.AsyncClient] = None,
        direct_store: Optional[DirectRedisReader] = None,
        codec: Optional[ValueCodec] = None,
        session_manager: Optional[HTTPSessionManager] = None,
    ):
        """
        Args:
            base_url: cachelink 서비스 기본 URL
            timeout: 요청 타임아웃 (초, 기본값: 5)
            http_client: 외부에서 관리하는 httpx 클라이언트 (선택사항, 닫지 않음)
            direct_store: Redis 직접 조회기 (선택사항)
            codec: 값 코덱 (기본값: UTF-8)
            session_manager: 공유할 HTTP 세션 관리자 (선택사항)
        """
        self.base_url = base_url
        self.timeout = timeout
        self.codec = codec or ValueCodec()
        self.direct_store = direct_store

        self._session_manager = session_manager or HTTPSessionManager(
            {"base_url": base_url, "timeout": timeout}, client=http_client
        )
        self._builder = RequestBuilder(timeout, self.codec)
        self._executor = RequestExecutor(self._session_manager)
        self._owned_redis: Optional[redis.Redis] = None
        # with_direct_redis()로 파생된 클라이언트는 세션을 닫지 않음
        self._owns_session = True

    @classmethod
    def from_settings(
        cls,
        settings: ClientSettings,
        redis_client: Optional[redis.Redis] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> "CacheLinkClient":
        """
        설정 객체로부터 클라이언트 생성

        settings.direct_store가 있으면 Redis 직접 조회가 활성화됩니다.
        redis_client를 넘기지 않으면 설정된 URL로 새 Redis 클라이언트를 만들고,
        이 클라이언트는 close() 시 함께 닫힙니다.

        Raises:
            ConfigurationError: 설정 검증 실패 시
        """
        valid, errors = settings.validate()
        if not valid:
            raise ConfigurationError("Invalid cachelink client settings", errors)

        codec = ValueCodec(settings.encoding)
        session_manager = HTTPSessionManager(settings.session_config(), client=http_client)

        direct_store = None
        owned_redis = None
        if settings.direct_store is not None:
            if redis_client is None:
                redis_client = owned_redis = create_redis_client(
                    settings.direct_store.redis_url
                )
            direct_store = DirectRedisReader(
                redis_client, settings.direct_store.key_prefix, codec
            )

        client = cls(
            settings.base_url,
            settings.timeout,
            direct_store=direct_store,
            codec=codec,
            session_manager=session_manager,
        )
        client._owned_redis = owned_redis
        return client

    def with_direct_redis(
        self, redis_client: redis.Redis, key_prefix: str = ""
    ) -> "CacheLinkClient":
        """
        Redis 직접 조회가 설정된 새 클라이언트 반환

        HTTP 세션과 코덱은 공유합니다. 공유 세션은 원래 클라이언트만 닫으며,
        파생된 클라이언트의 close()는 세션을 건드리지 않습니다.

        Args:
            redis_client: 비동기 Redis 클라이언트
            key_prefix: cachelink 키 접두사

        Raises:
            ConfigurationError: 이미 직접 조회가 설정된 경우
        """
        if self.direct_store is not None:
            raise ConfigurationError("Direct Redis reads are already configured")

        derived = CacheLinkClient(
            self.base_url,
            self.timeout,
            direct_store=DirectRedisReader(redis_client, key_prefix, self.codec),
            codec=self.codec,
            session_manager=self._session_manager,
        )
        derived._owns_session = False
        return derived

    def _use_direct(self, options: Options) -> bool:
        return self.direct_store is not None and _flag(options, "from_service") is not True

    async def get(self, key: str, options: Options = None) -> Any:
        """
        단일 키 조회

        Args:
            key: 캐시 키
            options: from_service 지원

        Returns:
            Any: 저장된 값, 없으면 None

        Raises:
            CodecError, StoreError, TransportError, ServiceError
        """
        if self._use_direct(options):
            return await self.direct_store.get(key)

        raw = await self._executor.execute(self._builder.get(key), wait=True)
        if raw is None:
            return None
        return self.codec.decode(raw)

    async def get_many(self, keys: Sequence[str], options: Options = None) -> list[Any]:
        """
        여러 키 조회

        결과 목록의 길이와 순서는 입력 키 목록과 정확히 같습니다.
        값이 없는 키는 None이며, 중복 키는 각 위치에 모두 채워집니다.

        Args:
            keys: 캐시 키 목록
            options: from_service 지원

        Returns:
            list[Any]: 키 순서대로의 값 목록
        """
        keys = list(keys)
        if self._use_direct(options):
            return await self.direct_store.get_many(keys)

        raw_by_key = await self._executor.execute(self._builder.get_many(keys), wait=True)

        index_by_key: dict[str, list[int]] = {}
        for i, key in enumerate(keys):
            index_by_key.setdefault(key, []).append(i)

        results: list[Any] = [None] * len(keys)
        if isinstance(raw_by_key, dict):
            for key, raw in raw_by_key.items():
                # 요청하지 않은 키는 무시
                if raw is None or key not in index_by_key:
                    continue
                for i in index_by_key[key]:
                    results[i] = self.codec.decode(raw)
        elif raw_by_key:
            logger.warning(
                "예상하지 못한 다중 조회 응답 형식",
                response_type=type(raw_by_key).__name__,
                count=len(keys),
            )

        return results

    async def set(
        self,
        key: str,
        value: Any,
        millis: int,
        associations: Sequence[str] = (),
        options: Options = None,
    ) -> Any:
        """
        값 저장

        Args:
            key: 캐시 키
            value: 저장할 값 (JSON으로 표현 가능해야 함)
            millis: TTL (밀리초)
            associations: 이 값이 의존하는 키 목록
            options: broadcast (기본 False), wait (기본 False)

        Returns:
            Any: 서비스 응답
        """
        broadcast = _flag(options, "broadcast") is True
        wait = _flag(options, "wait") is True
        request = self._builder.set(key, value, millis, associations, broadcast)
        return await self._executor.execute(request, wait)

    async def clear(
        self,
        keys: Sequence[str],
        levels: ClearLevel | str = ClearLevel.ALL,
        options: Options = None,
    ) -> Any:
        """
        키 삭제

        Args:
            keys: 삭제할 키 목록
            levels: ClearLevel.ALL이면 연관 키까지 연쇄 삭제
            options: broadcast (기본 True), wait (기본 False)
        """
        broadcast = _flag(options, "broadcast") is not False
        wait = _flag(options, "wait") is True
        request = self._builder.clear(keys, levels, broadcast)
        return await self._executor.execute(request, wait)

    async def clear_later(self, keys: Sequence[str], options: Options = None) -> Any:
        """키를 지연 삭제 목록에 추가"""
        wait = _flag(options, "wait") is True
        return await self._executor.execute(self._builder.clear_later(keys), wait)

    async def trigger_clear_now(self, options: Options = None) -> Any:
        """지연 삭제 목록을 즉시 처리하도록 요청"""
        wait = _flag(options, "wait") is True
        return await self._executor.execute(self._builder.trigger_clear_now(), wait)

    async def close(self) -> None:
        """
        클라이언트가 소유한 리소스 정리

        HTTP 세션은 with_direct_redis()로 파생된 클라이언트와 공유되며,
        원래 클라이언트를 닫을 때만 함께 닫힙니다.
        """
        if self._owns_session:
            await self._session_manager.close()
        if self._owned_redis is not None:
            await self._owned_redis.aclose()
            self._owned_redis = None

    async def __aenter__(self) -> "CacheLinkClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()


__all__ = ["CacheLinkClient", "RequestOptions", "ClearLevel"]
