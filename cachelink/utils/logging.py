"""
structlog 로깅 설정

라이브러리 자체는 structlog.get_logger()만 사용하며,
애플리케이션이 원하는 경우 configure_logging()으로 출력 형식을 설정합니다.
"""

import logging
import sys

import structlog

from cachelink.config.settings import LoggingConfig


def configure_logging(config: LoggingConfig | None = None) -> None:
    """
    stdlib 기반 structlog 프로세서 체인 설정

    Args:
        config: 로깅 설정 (기본값: LoggingConfig())
    """
    config = config or LoggingConfig()
    level = getattr(logging, config.log_level.upper(), logging.INFO)

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)

    renderer = (
        structlog.processors.JSONRenderer()
        if config.json_logs
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
