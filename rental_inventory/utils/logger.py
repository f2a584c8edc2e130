"""Structured logging for the API, CLI and repositories.

Every process configures structlog once, on the first ``get_logger`` call.
Records go to the console (coloured, or JSON when LOG_FORMAT=json) and, unless
LOG_TO_FILE is off, to a JSONL file under output/logs. Context bound with
``bind_context`` or ``log_context`` is merged into every entry logged while it
is active, so repository events carry the request path or CLI command that
caused them.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Iterator

import structlog

from rental_inventory.config import LOG_FILE, LOG_FORMAT, LOG_LEVEL, LOG_TO_FILE, VERBOSE_LOGGING

BoundLogger = structlog.stdlib.BoundLogger

# Third-party loggers held at WARNING: SQL echo and access lines flood INFO.
QUIET_LOGGERS = (
    "sqlalchemy.engine",
    "sqlalchemy.pool",
    "uvicorn.access",
    "httpx",
    "httpcore",
)

_configured = False


def _coerce_level(level_name: str) -> int:
    if level_name.isdigit():
        return int(level_name)
    return getattr(logging, level_name.upper(), logging.INFO)


def _handler(handler: logging.Handler, level: int, renderer: Any, pre_chain: list) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=pre_chain))
    return handler


def _configure_logging() -> None:
    global _configured
    if _configured:
        return

    level = logging.DEBUG if VERBOSE_LOGGING else _coerce_level(LOG_LEVEL)
    timestamper = structlog.processors.TimeStamper(fmt="iso", utc=True)
    pre_chain = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        timestamper,
    ]

    if LOG_FORMAT == "json":
        console_renderer = structlog.processors.JSONRenderer()
    else:
        console_renderer = structlog.dev.ConsoleRenderer(colors=True)
    handlers = [_handler(logging.StreamHandler(), level, console_renderer, pre_chain)]
    if LOG_TO_FILE:
        file_handler = logging.FileHandler(LOG_FILE, encoding="utf-8")
        handlers.append(_handler(file_handler, level, structlog.processors.JSONRenderer(), pre_chain))

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(level)
    for handler in handlers:
        root_logger.addHandler(handler)
    logging.captureWarnings(True)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.configure(
        processors=[
            *pre_chain,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=True,
    )

    _configured = True


def get_logger(name: str = "rental_inventory", **bindings: Any) -> BoundLogger:
    """Return a structlog logger for ``name``, optionally pre-bound with fields."""
    if not _configured:
        _configure_logging()
    logger = structlog.get_logger(name)
    if bindings:
        logger = logger.bind(**bindings)
    return logger


def bind_context(**context: Any) -> None:
    """Attach fields to every entry logged by this thread/task until cleared."""
    structlog.contextvars.bind_contextvars(**context)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()


@contextmanager
def log_context(**context: Any) -> Iterator[None]:
    """Bind fields for the duration of a block, restoring the previous values after."""
    with structlog.contextvars.bound_contextvars(**context):
        yield
