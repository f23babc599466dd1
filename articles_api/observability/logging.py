from __future__ import annotations

import logging
import sys
from typing import IO, Any

import structlog


_CONFIGURED = False


def resolve_level(name: str | int) -> int:
    if isinstance(name, int):
        return name
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging(level: int = logging.INFO, stream: IO[str] | None = None) -> None:
    """Send structlog events and stdlib records through one JSON handler.

    Structured fields survive either way: keyword arguments on structlog
    loggers, ``extra=`` on stdlib ones (uvicorn, SQLAlchemy). No-op after the
    first call.
    """

    global _CONFIGURED
    if _CONFIGURED:
        return

    shared: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=structlog.processors.JSONRenderer(),
            foreign_pre_chain=[structlog.stdlib.ExtraAdder(), *shared],
        )
    )

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level)

    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        server_logger = logging.getLogger(name)
        server_logger.handlers = [handler]
        server_logger.propagate = False
        server_logger.setLevel(level)

    _CONFIGURED = True
