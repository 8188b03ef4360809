"""Structured logging on structlog: colored console lines plus a JSONL file under output/logs."""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog
from pydantic_core import to_jsonable_python

from logistx.config import LOG_FILE, LOG_LEVEL, SERVICE_NAME, STORE_BACKEND, VERBOSE_LOGGING

BoundLogger = structlog.stdlib.BoundLogger

# third-party loggers kept at WARNING; their per-request lines bury view-model events
_QUIET_LOGGERS = ("httpx", "httpcore", "uvicorn.access", "sqlalchemy.engine", "reportlab")

_configured = False


def _level() -> int:
    if VERBOSE_LOGGING:
        return logging.DEBUG
    if LOG_LEVEL.isdigit():
        return int(LOG_LEVEL)
    value = logging.getLevelName(LOG_LEVEL)
    return value if isinstance(value, int) else logging.INFO


def _add_service(_logger: Any, _method: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    event_dict.setdefault("service", SERVICE_NAME)
    event_dict.setdefault("backend", STORE_BACKEND)
    return event_dict


def _configure_logging() -> None:
    global _configured
    if _configured:
        return

    level = _level()
    shared = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]

    console = logging.StreamHandler()
    console.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
            foreign_pre_chain=shared,
        )
    )

    # Decimal amounts and datetimes are written as JSON strings
    jsonl = logging.FileHandler(LOG_FILE, encoding="utf-8")
    jsonl.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                _add_service,
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                structlog.processors.JSONRenderer(default=to_jsonable_python),
            ],
            foreign_pre_chain=shared,
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)
    for handler in (console, jsonl):
        handler.setLevel(level)
        root.addHandler(handler)
    logging.captureWarnings(True)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.configure(
        processors=[
            *shared,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=True,
    )
    _configured = True


def get_logger(name: str = "logistx", **bindings: Any) -> BoundLogger:
    """Logger named after the module or view-model, configured on first use."""
    _configure_logging()
    logger = structlog.get_logger(name)
    return logger.bind(**bindings) if bindings else logger


def bind_context(**context: Any) -> None:
    """Attach context (e.g. the CLI command) to every event on this task."""
    structlog.contextvars.bind_contextvars(**context)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
