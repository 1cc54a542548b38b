"""
cachelink 서비스 프로토콜 모듈

주요 컴포넌트:
    RequestBuilder: 논리 작업을 요청 설명(CacheLinkRequest)으로 변환
    RequestExecutor: 요청 전송, background 토글, 에러 변환
    ClearLevel: 삭제 수준 (all / none)
"""

from .requests import CacheLinkRequest, ClearLevel, RequestBuilder
from .executor import RequestExecutor

__all__ = ["CacheLinkRequest", "ClearLevel", "RequestBuilder", "RequestExecutor"]
