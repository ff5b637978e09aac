"""Entry point: print a JSON report of a MIME part.

Usage::

    python -m rfcmail message.eml   # read a file
    python -m rfcmail -             # read stdin

Limits and log format come from ``RFCMAIL_*`` environment variables
(see :class:`rfcmail.config.ParserLimits`).
"""

from __future__ import annotations

import sys
from pathlib import Path

import structlog

from .config import ParserLimits
from .errors import ParseError
from .headers import parse_part
from .logging import setup_logging
from .report import build_report

logger = structlog.get_logger()


def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    if len(args) != 1:
        print("Usage: python -m rfcmail <file|->", file=sys.stderr)
        return 2

    limits = ParserLimits()
    setup_logging(limits)

    source = args[0]
    try:
        data = sys.stdin.buffer.read() if source == "-" else Path(source).read_bytes()
    except OSError as exc:
        logger.error("read_failed", source=source, error=str(exc))
        return 2

    try:
        raw = parse_part(data, max_depth=limits.max_comment_depth)
        report = build_report(raw, limits)
    except ParseError as exc:
        logger.error("parse_failed", source=source, error=exc.message, kind=type(exc).__name__)
        return 1

    print(report.model_dump_json(indent=2))
    logger.info("parse_succeeded", source=source, entities=len(report.entities))
    return 0


if __name__ == "__main__":
    sys.exit(main())
