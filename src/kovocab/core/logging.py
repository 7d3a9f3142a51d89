"""
Logging configuration.

Provides a single entry point for configuring structured logging with
structlog. Pipelines log dot-named events with keyword context::

    logger = get_logger(__name__)
    logger.info("pipeline.batch_complete", operation="audit", completed=20, total=140)

Configuration is resolved from arguments, else from the environment:
- KOVOCAB_LOG_LEVEL: DEBUG | INFO | WARNING | ERROR (default: INFO)
- KOVOCAB_LOG_FORMAT: json | console (default: console)
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any, Literal

import structlog
from structlog.types import Processor

# Track if logging has been configured
_configured = False


def configure_logging(
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] | str | None = None,
    format: Literal["json", "console"] | str | None = None,
    force: bool = False,
) -> None:
    """
    Configure structured logging for the application.

    Should be called once at startup (CLI entry). Subsequent calls are
    no-ops unless ``force=True``.

    Args:
        level: Log level (overrides KOVOCAB_LOG_LEVEL)
        format: Output format (overrides KOVOCAB_LOG_FORMAT)
        force: Reconfigure even if already configured
    """
    global _configured

    if _configured and not force:
        return

    log_level = (level or os.environ.get("KOVOCAB_LOG_LEVEL", "INFO")).upper()
    log_format = (format or os.environ.get("KOVOCAB_LOG_FORMAT", "console")).lower()

    processors: list[Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        # UTC ISO-8601 with Z suffix
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.contextvars.merge_contextvars,
        structlog.processors.format_exc_info,
        structlog.processors.StackInfoRenderer(),
    ]

    if log_format == "json":
        processors.append(structlog.processors.JSONRenderer(ensure_ascii=False))
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(
                colors=sys.stderr.isatty(),
                exception_formatter=structlog.dev.plain_traceback,
            )
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Route stdlib logging (openai, google clients) through the same level
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, log_level, logging.INFO),
        force=True,
    )
    logging.getLogger("kovocab").setLevel(getattr(logging, log_level, logging.INFO))

    _configured = True


def get_logger(name: str | None = None, **initial_context: Any) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger, optionally pre-bound with context."""
    logger = structlog.get_logger(name)
    if initial_context:
        logger = logger.bind(**initial_context)
    return logger


def is_configured() -> bool:
    """Check if logging has been configured."""
    return _configured
