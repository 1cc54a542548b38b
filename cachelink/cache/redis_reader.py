"""
Redis 직접 조회기

cachelink 서비스를 거치지 않고 백엔드 Redis에서 캐시 값을 바로 읽습니다.
지연 시간에 민감한 읽기 경로에서 사용됩니다.

키 구조:
    {key_prefix}d:{key}
    예: key_prefix="x:" 이면 "a" -> "x:d:a"

동작 원칙:
    - 읽기 전용 (write-through 없음)
    - 로컬 캐싱 및 재시도 없음
    - Redis 실패 시 StoreError 발생 (서비스 경로로 대체하지 않음)
"""

from typing import Any, Optional, Sequence

import redis.asyncio as redis
import structlog

from cachelink.cache.codec import ValueCodec
from cachelink.exceptions import StoreError

logger = structlog.get_logger(__name__)

# 데이터 키 네임스페이스
DATA_KEY_SUFFIX = "d:"


class DirectRedisReader:
    """
    Redis 기반 직접 조회 구현체

    Attributes:
        key_prefix (str): cachelink 키 접두사 (예약, 읽기에는 사용하지 않음)
        data_prefix (str): 캐시 값이 저장되는 데이터 키 접두사
    """

    def __init__(
        self,
        redis_client: redis.Redis,
        key_prefix: str = "",
        codec: Optional[ValueCodec] = None,
    ):
        """
        Args:
            redis_client: 비동기 Redis 클라이언트
            key_prefix: cachelink 서비스와 동일한 키 접두사
            codec: 값 코덱 (기본값: UTF-8 ValueCodec)
        """
        self._client = redis_client
        self.key_prefix = key_prefix
        self.data_prefix = key_prefix + DATA_KEY_SUFFIX
        self.codec = codec or ValueCodec()

    def data_key(self, key: str) -> str:
        """캐시 키를 Redis 데이터 키로 변환"""
        return self.data_prefix + key

    async def get(self, key: str) -> Any:
        """
        단일 키 조회

        Args:
            key: 캐시 키

        Returns:
            Any: 디코딩된 값, 없으면 None

        Raises:
            StoreError: Redis 호출 실패 시
            CodecError: 저장된 값을 디코딩할 수 없는 경우
        """
        try:
            raw = await self._client.get(self.data_key(key))
        except redis.RedisError as e:
            logger.warning("Redis 직접 조회 실패", key=key, error=str(e))
            raise StoreError(f"Redis get failed: {e}", operation="get") from e

        if raw is None:
            return None
        return self.codec.decode(raw)

    async def get_many(self, keys: Sequence[str]) -> list[Any]:
        """
        여러 키를 한 번의 MGET으로 조회

        입력 순서를 그대로 유지하며, 값이 없는 항목은 해당 위치에 None으로 남습니다.

        Args:
            keys: 캐시 키 목록

        Returns:
            list[Any]: 키 순서와 동일한 값 목록

        Raises:
            StoreError: Redis 호출 실패 시
            CodecError: 저장된 값을 디코딩할 수 없는 경우
        """
        if not keys:
            # 인자가 없는 MGET은 Redis 에러
            return []

        data_keys = [self.data_key(key) for key in keys]
        try:
            raw_values = await self._client.mget(data_keys)
        except redis.RedisError as e:
            logger.warning("Redis 직접 다중 조회 실패", count=len(keys), error=str(e))
            raise StoreError(
                f"Redis mget failed: {e}", operation="mget", data={"count": len(keys)}
            ) from e

        return [None if raw is None else self.codec.decode(raw) for raw in raw_values]
