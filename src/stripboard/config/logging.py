"""Logging configuration for Stripboard."""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

import structlog
from structlog.contextvars import merge_contextvars
from structlog.processors import (
    CallsiteParameter,
    CallsiteParameterAdder,
    TimeStamper,
    add_log_level,
    dict_tracebacks,
    format_exc_info,
)
from structlog.stdlib import (
    ProcessorFormatter,
    add_logger_name,
    filter_by_level,
)

from stripboard.config.settings import StripboardSettings

LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5


def _renderers(log_format: str) -> list[Any]:
    """Final processors run by the stdlib formatter for each handler."""
    if log_format == "json":
        return [dict_tracebacks, structlog.processors.JSONRenderer()]
    if log_format == "structured":
        return [
            format_exc_info,
            structlog.processors.KeyValueRenderer(
                key_order=["timestamp", "level", "logger", "event"],
                drop_missing=True,
            ),
        ]
    return [
        structlog.dev.ConsoleRenderer(
            colors=sys.stderr.isatty(),
            exception_formatter=structlog.dev.rich_traceback,
        )
    ]


def _build_formatter(log_format: str) -> ProcessorFormatter:
    """Create the stdlib formatter that renders structlog and foreign events."""
    return ProcessorFormatter(
        processors=[
            ProcessorFormatter.remove_processors_meta,
            *_renderers(log_format),
        ],
        # records from plain stdlib loggers (httpx, asyncio) get the same fields
        foreign_pre_chain=[
            TimeStamper(fmt="iso"),
            add_log_level,
            add_logger_name,
        ],
    )


def _event_processors(debug: bool) -> list[Any]:
    processors: list[Any] = [
        merge_contextvars,
        filter_by_level,
        add_logger_name,
        TimeStamper(fmt="iso"),
        add_log_level,
    ]
    if debug:
        processors.append(
            CallsiteParameterAdder(
                parameters=[
                    CallsiteParameter.FILENAME,
                    CallsiteParameter.LINENO,
                    CallsiteParameter.FUNC_NAME,
                ]
            )
        )
    processors.append(ProcessorFormatter.wrap_for_formatter)
    return processors


def configure_logging(settings: StripboardSettings) -> None:
    """Configure logging based on settings.

    Events are rendered once, by the formatter on each handler, so the
    console and the optional log file share one format and pytest's
    ``caplog`` still sees every record.

    Args:
        settings: Application settings containing logging configuration.

    Raises:
        ValueError: If the log level is not a known logging level.
    """
    log_level = logging.getLevelNamesMapping().get(settings.log_level.upper())
    if log_level is None:
        valid_levels = sorted(logging.getLevelNamesMapping())
        raise ValueError(
            f"Invalid log level '{settings.log_level}'. "
            f"Valid levels are: {', '.join(valid_levels)}"
        )

    formatter = _build_formatter(settings.log_format)
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if settings.log_file:
        log_path = Path(settings.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                filename=str(log_path),
                maxBytes=LOG_FILE_MAX_BYTES,
                backupCount=LOG_FILE_BACKUPS,
                encoding="utf-8",
            )
        )

    for handler in handlers:
        handler.setFormatter(formatter)
        handler.setLevel(log_level)

    logging.basicConfig(level=log_level, handlers=handlers, force=True)

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(max(log_level, logging.WARNING))

    structlog.configure(
        processors=_event_processors(debug=settings.debug),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> Any:
    """Get a structlog logger without forcing configuration.

    Args:
        name: Logger name (usually __name__).

    Returns:
        Structlog logger.
    """
    return structlog.get_logger(name)
