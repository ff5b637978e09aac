"""rfcmail: RFC 5322 date-time grammar and MIME entity resolution.

Public API re-exported here for convenience::

    from rfcmail import parse_part, resolve_entity, parse_date_time
"""

from .combinators import MAX_COMMENT_DEPTH, cfws, fws, optional, tag
from .config import ParserLimits
from .date_time import Date, DateTime, Day, Month, Time, Zone, parse_date_time
from .entity import MAX_MULTIPART_DEPTH, resolve_entity, walk_entities
from .errors import DepthExceededError, KnownError, ParseError, TagError
from .headers import parse_header_fields, parse_part
from .logging import setup_logging
from .mime import (
    ContentTransferEncoding,
    Disposition,
    DispositionType,
    Entity,
    MimeType,
    MultipartEntity,
    OtherEncoding,
    OtherMimeType,
    RawEntity,
    TextEntity,
    UnknownDisposition,
    UnknownEntity,
)
from .report import EntityReport, TreeReport, build_report

__all__ = [
    "MAX_COMMENT_DEPTH",
    "MAX_MULTIPART_DEPTH",
    "ContentTransferEncoding",
    "Date",
    "DateTime",
    "Day",
    "DepthExceededError",
    "Disposition",
    "DispositionType",
    "Entity",
    "EntityReport",
    "KnownError",
    "MimeType",
    "Month",
    "MultipartEntity",
    "OtherEncoding",
    "OtherMimeType",
    "ParseError",
    "ParserLimits",
    "RawEntity",
    "TagError",
    "TextEntity",
    "Time",
    "TreeReport",
    "UnknownDisposition",
    "UnknownEntity",
    "Zone",
    "build_report",
    "cfws",
    "fws",
    "optional",
    "parse_date_time",
    "parse_header_fields",
    "parse_part",
    "resolve_entity",
    "setup_logging",
    "tag",
    "walk_entities",
]
