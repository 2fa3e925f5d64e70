import logging
from typing import Any

import structlog

from stagehand.config.settings import get_settings


def configure_logging(level: int | str | None = None, json: bool = True) -> None:
    """Configure structlog/standard logging bridge.

    Args:
        level: Log level; defaults to STAGEHAND_LOG_LEVEL
        json: Render JSON lines (operator deployments) or console output (CLI)
    """

    if level is None:
        level = get_settings().log_level.upper()

    renderer: Any = (
        structlog.processors.JSONRenderer() if json else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(level=level, format="%(message)s")


def bind_pass(namespace: str, custom_resource: str) -> structlog.stdlib.BoundLogger:
    """Logger bound to the custom resource being resolved."""

    return structlog.get_logger().bind(namespace=namespace, custom_resource=custom_resource)
