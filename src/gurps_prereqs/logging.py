"""Structured logging configuration.

structlog-based logging with pretty console output by default and JSON
output when GURPS_PREREQS_LOG_FORMAT=json. The level comes from
GURPS_PREREQS_LOG_LEVEL (default WARNING) unless passed explicitly.

Usage:
    from gurps_prereqs.logging import configure_logging, get_logger

    configure_logging()
    logger = get_logger(__name__)
    logger.debug("prereq_added", tag="skill_prereq")
"""

from __future__ import annotations

import logging
import os
import sys

import structlog
from structlog.types import Processor

__all__ = [
    "configure_logging",
    "get_logger",
]

LOG_FORMAT_ENV_VAR = "GURPS_PREREQS_LOG_FORMAT"
LOG_LEVEL_ENV_VAR = "GURPS_PREREQS_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "WARNING"


def _get_log_level() -> int:
    level_name = os.environ.get(LOG_LEVEL_ENV_VAR, DEFAULT_LOG_LEVEL).upper()
    return getattr(logging, level_name, logging.WARNING)


def _is_json_output() -> bool:
    return os.environ.get(LOG_FORMAT_ENV_VAR, "").lower() == "json"


def _get_shared_processors() -> list[Processor]:
    """Processors shared by structlog and foreign stdlib records."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]


def configure_logging(*, force_json: bool = False, level: int | None = None) -> None:
    """Configure structlog and the stdlib root logger.

    Safe to call more than once; each call replaces the root handlers.

    Args:
        force_json: Render JSON regardless of the environment.
        level: Override the log level. If None, read GURPS_PREREQS_LOG_LEVEL.
    """
    use_json = force_json or _is_json_output()
    log_level = level if level is not None else _get_log_level()

    if use_json:
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *_get_shared_processors(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(log_level)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
            foreign_pre_chain=_get_shared_processors(),
        )
    )
    root_logger.addHandler(handler)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger bound to the stdlib logger ``name``.

    Until configure_logging() runs, events go through stdlib logging at its
    default WARNING level, so debug events from library code stay silent.
    """
    log: structlog.stdlib.BoundLogger = structlog.wrap_logger(
        logging.getLogger(name),
        wrapper_class=structlog.stdlib.BoundLogger,
    )
    return log
