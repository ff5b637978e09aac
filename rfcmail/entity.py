"""Entity resolution: interpret a :class:`RawEntity` as text, multipart or unknown.

Resolution policy:

- ``multipart/*``: split the body on its boundary; children are parsed but
  left unresolved.
- ``text/*`` with a supported transfer encoding and charset: decode both.
- anything else: returned untouched as :class:`UnknownEntity`.

Unsupported is not invalid.  Malformed data inside something that *is*
interpreted (bad boundaries, bad Base64, bad UTF-8) raises
:class:`~rfcmail.errors.KnownError`.
"""

from __future__ import annotations

from collections.abc import Iterator

import structlog

from .combinators import MAX_COMMENT_DEPTH
from .encodings import (
    SUPPORTED_ENCODINGS,
    decode_charset,
    decode_transfer_encoding,
    lookup_charset,
)
from .errors import DepthExceededError, KnownError, ParseError
from .headers import DEFAULT_CONTENT_TYPE, DIGEST_CONTENT_TYPE, parse_part
from .mime import Entity, MimeType, MultipartEntity, RawEntity, TextEntity, UnknownEntity
from .multipart import split_body

logger = structlog.get_logger()

MAX_MULTIPART_DEPTH = 64
"""Deepest multipart nesting :func:`walk_entities` descends into."""


def resolve_entity(raw: RawEntity, *, max_comment_depth: int = MAX_COMMENT_DEPTH) -> Entity:
    """Interpret ``raw`` one level deep.

    ``max_comment_depth`` bounds comment nesting in the headers of
    multipart children.
    """
    if raw.mime_type is MimeType.MULTIPART:
        return _resolve_multipart(raw, max_comment_depth)

    if raw.mime_type is MimeType.TEXT:
        text = _resolve_text(raw)
        if text is not None:
            return text

    logger.debug(
        "entity_unknown_fallback",
        content_type=raw.content_type,
        encoding=raw.encoding,
    )
    return UnknownEntity(raw)


def _resolve_multipart(raw: RawEntity, max_comment_depth: int) -> MultipartEntity:
    boundary = raw.parameters.get("boundary")
    if not boundary:
        raise KnownError("multipart entity has no boundary parameter")

    body = raw.value if isinstance(raw.value, memoryview) else memoryview(raw.value)
    default_type = DIGEST_CONTENT_TYPE if raw.subtype == "digest" else DEFAULT_CONTENT_TYPE
    children = [
        parse_part(section, default_type=default_type, max_depth=max_comment_depth)
        for section in split_body(body, boundary)
    ]
    logger.debug("multipart_split", subtype=raw.subtype, parts=len(children))
    return MultipartEntity(subtype=raw.subtype, content=children)


def _resolve_text(raw: RawEntity) -> TextEntity | None:
    if raw.encoding not in SUPPORTED_ENCODINGS:
        return None
    codec = lookup_charset(raw.parameters.get("charset"))
    if codec is None:
        return None

    decoded = decode_transfer_encoding(raw.value, raw.encoding)
    return TextEntity(subtype=raw.subtype, value=decode_charset(decoded, codec))


def walk_entities(
    raw: RawEntity,
    *,
    max_depth: int = MAX_MULTIPART_DEPTH,
    max_comment_depth: int = MAX_COMMENT_DEPTH,
    lenient_children: bool = False,
) -> Iterator[tuple[int, Entity]]:
    """Resolve ``raw`` and every descendant, depth-first in source order.

    Yields ``(depth, entity)`` with the root at depth 0.  Descent uses an
    explicit stack; an entity nested more than ``max_depth`` multipart
    levels down raises :class:`DepthExceededError`.

    With ``lenient_children`` a child that fails to resolve is yielded as
    :class:`UnknownEntity` instead of aborting the walk.  Failures of the
    root and depth violations are always raised.
    """
    stack: list[tuple[int, RawEntity]] = [(0, raw)]
    while stack:
        depth, current = stack.pop()
        if depth > max_depth:
            raise DepthExceededError("multipart entities are nested too deeply", max_depth)

        try:
            entity = resolve_entity(current, max_comment_depth=max_comment_depth)
        except DepthExceededError:
            raise
        except ParseError as exc:
            if depth == 0 or not lenient_children:
                raise
            logger.warning(
                "child_resolution_failed",
                depth=depth,
                content_type=current.content_type,
                error=exc.message,
            )
            entity = UnknownEntity(current)

        yield depth, entity
        if isinstance(entity, MultipartEntity):
            stack.extend((depth + 1, child) for child in reversed(entity.content))
