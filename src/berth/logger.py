"""Structured logging singleton for the berth server.

Reads ``LOG_LEVEL`` and ``LOG_FORMAT`` from os.environ directly: the logger
exists before Settings so config errors can be logged.

stdout carries the MCP stdio transport, so nothing may be written there.
Per-call context (``tool``, ``session_id``) is bound with
``structlog.contextvars`` by the tool router and the session registry and
merged into every line logged inside that call.
"""

from __future__ import annotations

import logging
import os
import sys

import structlog

_FORMATS = ("console", "json")


def _renderer(fmt: str) -> structlog.typing.Processor:
    if fmt == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def _setup_logging() -> structlog.stdlib.BoundLogger:
    level = getattr(logging, os.environ.get("LOG_LEVEL", "INFO").upper(), logging.INFO)
    fmt = os.environ.get("LOG_FORMAT", "console").lower()
    if fmt not in _FORMATS:
        fmt = "console"

    logging.basicConfig(level=level, format="%(message)s", stream=sys.stderr)

    processors: list[structlog.typing.Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if fmt == "json":
        processors.append(structlog.processors.format_exc_info)
    else:
        processors.extend([structlog.dev.set_exc_info, structlog.processors.StackInfoRenderer()])
    processors.append(_renderer(fmt))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    return structlog.get_logger("berth")


logger = _setup_logging()


def _log_uncaught(exc_type: type[BaseException], exc: BaseException, tb: object) -> None:
    if issubclass(exc_type, KeyboardInterrupt):
        sys.__excepthook__(exc_type, exc, tb)  # type: ignore[arg-type]
        return
    logger.critical("berth crashed", exc_info=(exc_type, exc, tb))
    sys.exit(1)


sys.excepthook = _log_uncaught
