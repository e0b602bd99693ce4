"""Structured logging configuration using structlog.

Development gets colored console output, production gets JSON lines.
Request-scoped fields (request id, user id, report kind) are carried
through contextvars so every event emitted while serving a request
includes them.
"""

import logging
import sys
from datetime import date
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Any
from uuid import UUID

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from landlord_ledger.config import Settings, get_settings

# Libraries that are chatty below INFO
QUIET_LOGGERS = ("httpcore", "httpx", "asyncio", "multipart")


def _render_ledger_values(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Render ids, money, dates and enums the way API responses do."""
    for key, value in event_dict.items():
        if isinstance(value, Enum):
            event_dict[key] = value.value
        elif isinstance(value, (UUID, Decimal)):
            event_dict[key] = str(value)
        elif isinstance(value, date):
            event_dict[key] = value.isoformat()
    return event_dict


def _add_service_fields(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    settings = get_settings()
    event_dict.setdefault("service", settings.app_name)
    event_dict.setdefault("version", settings.app_version)
    event_dict.setdefault("environment", settings.environment.value)
    return event_dict


def _shared_processors() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        _render_ledger_values,
        structlog.processors.StackInfoRenderer(),
    ]


def get_console_processors() -> list[Processor]:
    """Processors for colored, human-readable development output."""
    return [
        *_shared_processors(),
        structlog.dev.ConsoleRenderer(
            colors=sys.stdout.isatty(),
            exception_formatter=structlog.dev.plain_traceback,
        ),
    ]


def get_json_processors() -> list[Processor]:
    """Processors for one JSON object per line."""
    return [
        *_shared_processors(),
        _add_service_fields,
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer(),
    ]


def configure_logging(settings: Settings | None = None) -> None:
    """Configure structlog and the stdlib root logger from settings.

    Call once at application startup, before the first event is logged.
    """
    settings = settings or get_settings()
    level = logging.getLevelName(settings.log_level.value)
    processors = (
        get_json_processors() if settings.log_format == "json" else get_console_processors()
    )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level, force=True)

    if settings.log_file:
        _add_file_handler(settings.log_file, level)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.INFO))


def _add_file_handler(log_file: Path, level: int) -> None:
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(message)s"))
    logging.getLogger().addHandler(handler)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger, usually ``get_logger(__name__)``."""
    return structlog.stdlib.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    structlog.contextvars.bind_contextvars(**kwargs)


def unbind_context(*keys: str) -> None:
    structlog.contextvars.unbind_contextvars(*keys)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()


class LogContext:
    """Bind fields for the duration of a ``with`` block.

    Example:
        with LogContext(user_id=user_id, report_kind="tax"):
            logger.info("building_report")
    """

    def __init__(self, **kwargs: Any) -> None:
        self.kwargs = kwargs

    def __enter__(self) -> "LogContext":
        bind_context(**self.kwargs)
        return self

    def __exit__(self, *args: Any) -> None:
        unbind_context(*self.kwargs)
