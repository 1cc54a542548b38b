"""
cachelink 캐시 값 처리 모듈

주요 컴포넌트:
    ValueCodec: 전송용 UTF-8 페이로드 인코딩/디코딩
    DirectRedisReader: 백엔드 Redis 직접 조회 (GET / MGET)
"""

from .codec import ValueCodec, CANONICAL_ENCODING
from .redis_reader import DirectRedisReader

__all__ = ["ValueCodec", "CANONICAL_ENCODING", "DirectRedisReader"]
