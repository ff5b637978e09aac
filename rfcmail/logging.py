"""Structured logging setup using structlog, driven by :class:`ParserLimits`."""

from __future__ import annotations

import logging
import sys
from enum import Enum

import structlog

from .config import ParserLimits
from .mime import OtherEncoding, OtherMimeType, UnknownDisposition


def render_mime_values(
    logger: structlog.types.WrappedLogger,
    method_name: str,
    event_dict: structlog.types.EventDict,
) -> structlog.types.EventDict:
    """Turn MIME tokens and byte spans in an event into plain JSON values.

    Enums and the ``Other*`` names become their header spelling; byte spans
    are replaced by their length so bodies never reach the log.
    """
    for key, value in event_dict.items():
        if isinstance(value, Enum):
            event_dict[key] = value.value
        elif isinstance(value, (OtherEncoding, OtherMimeType, UnknownDisposition)):
            event_dict[key] = value.name
        elif isinstance(value, (bytes, bytearray, memoryview)):
            event_dict[key] = f"<{len(value)} bytes>"
    return event_dict


def setup_logging(limits: ParserLimits | None = None) -> None:
    """Configure structlog for processes embedding the parser.

    ``limits.log_json`` picks JSON lines or the console renderer and
    ``limits.log_level`` the root level; both come from ``RFCMAIL_*``
    variables when ``limits`` is omitted.
    """
    limits = limits or ParserLimits()

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        render_mime_values,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if limits.log_json:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    # stdout carries the CLI report
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(limits.log_level.upper())
