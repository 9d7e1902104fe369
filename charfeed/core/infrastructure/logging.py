"""Logging configuration with structlog integration.

提供两种日志记录方式：
1. loguru: 用于一般调试日志
2. structlog: 用于关键业务事件的结构化日志
"""

import sys
from typing import Any

import structlog
from loguru import logger

from charfeed.core.config import settings


def setup_logging(level: str | None = None) -> None:
    """Configure application logging with structlog and loguru."""
    level = (level or settings.LOG_LEVEL).upper()

    _configure_structlog(level)
    _configure_loguru(level)

    logger.info(f"Logging configured with level: {level}")


def _configure_structlog(level: str) -> None:
    """配置 structlog 处理器链。"""
    if settings.ENVIRONMENT == "local":
        renderer = structlog.dev.ConsoleRenderer(colors=True)
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            _get_log_level_number(level)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def _configure_loguru(level: str) -> None:
    """配置 loguru。"""
    logger.remove()

    logger.add(
        sys.stderr,
        level=level,
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
            "<level>{message}</level>"
        ),
        colorize=True,
    )

    if settings.ENVIRONMENT != "local":
        logger.add(
            "logs/charfeed_{time:YYYY-MM-DD}.log",
            rotation="00:00",
            retention="7 days",
            level="INFO",
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
        )


def _get_log_level_number(level: str) -> int:
    """将日志级别字符串转换为数字。"""
    levels = {
        "DEBUG": 10,
        "INFO": 20,
        "WARNING": 30,
        "ERROR": 40,
        "CRITICAL": 50,
    }
    return levels.get(level.upper(), 20)


# ============================================================================
# 业务事件日志记录器
# ============================================================================


class FeedEvents:
    """业务事件日志助手类。

    Usage:
        from charfeed.core.infrastructure.logging import FeedEvents

        FeedEvents.page_loaded(page=2, total_pages=150, item_count=100)
    """

    _log = structlog.get_logger("business.feed")

    @classmethod
    def page_loaded(
        cls,
        page: int,
        total_pages: int,
        item_count: int,
        appended: bool,
        **extra: Any,
    ) -> None:
        """记录分页加载完成事件。"""
        cls._log.info(
            "page_loaded",
            event_type="browse",
            page=page,
            total_pages=total_pages,
            item_count=item_count,
            appended=appended,
            **extra,
        )

    @classmethod
    def search_completed(
        cls,
        query: str,
        result_count: int,
        **extra: Any,
    ) -> None:
        """记录搜索完成事件。"""
        cls._log.info(
            "search_completed",
            event_type="search",
            query=query,
            result_count=result_count,
            **extra,
        )

    @classmethod
    def character_loaded(
        cls,
        character_id: int,
        name: str,
        **extra: Any,
    ) -> None:
        """记录单个实体加载事件。"""
        cls._log.info(
            "character_loaded",
            event_type="detail",
            character_id=character_id,
            name=name,
            **extra,
        )

    @classmethod
    def fetch_failed(
        cls,
        operation: str,
        kind: str,
        error: str,
        **extra: Any,
    ) -> None:
        """记录请求失败事件。"""
        cls._log.warning(
            "fetch_failed",
            event_type="fetch_error",
            operation=operation,
            kind=kind,
            error=error,
            **extra,
        )

    @classmethod
    def request_superseded(
        cls,
        operation: str,
        superseded_by: str,
        **extra: Any,
    ) -> None:
        """记录被新请求取代而丢弃的响应。"""
        cls._log.info(
            "request_superseded",
            event_type="coalesce",
            operation=operation,
            superseded_by=superseded_by,
            **extra,
        )
