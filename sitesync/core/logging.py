"""Structured logging for the sitesync CLI: structlog rendered through stdlib logging.

Log lines go to stderr so command output on stdout stays clean.

Environment:
    SITESYNC_LOG_LEVEL   DEBUG | INFO | WARNING | ERROR (default: INFO)
    SITESYNC_LOG_FORMAT  console | json (default: console)
"""

from __future__ import annotations

import logging
import logging.config
import os
import sys

import structlog

LOG_FORMATS = ("console", "json")

# Third-party loggers that would otherwise echo every request at INFO.
_QUIET_LOGGERS = ("httpx", "httpcore")


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def _renderers(log_format: str) -> list[structlog.types.Processor]:
    if log_format == "json":
        return [structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer()]
    return [structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())]


def setup_logging(*, verbose: bool = False, log_format: str | None = None) -> None:
    """Configure structlog and the stdlib root logger.

    ``verbose`` forces DEBUG; ``log_format`` overrides SITESYNC_LOG_FORMAT.
    """
    level = "DEBUG" if verbose else os.environ.get("SITESYNC_LOG_LEVEL", "INFO").upper()
    fmt = (log_format or os.environ.get("SITESYNC_LOG_FORMAT", "console")).lower()
    if fmt not in LOG_FORMATS:
        fmt = "console"

    shared = _shared_processors()
    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    loggers = {name: {"level": "WARNING"} for name in _QUIET_LOGGERS}
    loggers["sitesync"] = {"level": level}
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "sitesync": {
                    "()": structlog.stdlib.ProcessorFormatter,
                    "foreign_pre_chain": shared,
                    "processors": [
                        structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                        *_renderers(fmt),
                    ],
                },
            },
            "handlers": {
                "stderr": {
                    "class": "logging.StreamHandler",
                    "stream": "ext://sys.stderr",
                    "formatter": "sitesync",
                },
            },
            "root": {"handlers": ["stderr"], "level": level},
            "loggers": loggers,
        }
    )
