"""Boundary delimiter scanning for multipart bodies (RFC 2046 section 5.1.1).

    multipart-body := [preamble CRLF]
                      dash-boundary transport-padding CRLF
                      body-part *encapsulation
                      close-delimiter transport-padding
                      [CRLF epilogue]

The preamble and the epilogue are discarded.  Bare LF line ends are
accepted as well as CRLF.
"""

from __future__ import annotations

import re
from functools import lru_cache

from .errors import Input, KnownError


@lru_cache(maxsize=128)
def _delimiter(boundary: bytes) -> re.Pattern[bytes]:
    return re.compile(
        rb"^--" + re.escape(boundary) + rb"(?P<close>--)?[ \t]*(?:\r?\n|\Z)",
        re.MULTILINE,
    )


def _before_line_break(body: Input, index: int) -> int:
    """The CRLF in front of a delimiter belongs to the delimiter."""
    if index >= 2 and body[index - 2:index] == b"\r\n":
        return index - 2
    if index >= 1 and body[index - 1] == 0x0A:
        return index - 1
    return index


def split_body(body: Input, boundary: str) -> list[Input]:
    """Return the body parts between the delimiters of ``boundary``.

    Parts are slices of ``body``; pass a :class:`memoryview` to avoid copies.
    """
    if not boundary:
        raise KnownError("multipart boundary is empty")
    try:
        delimiter = _delimiter(boundary.encode("ascii"))
    except UnicodeEncodeError:
        raise KnownError("multipart boundary must be ASCII") from None

    parts: list[Input] = []
    start: int | None = None
    closed = False
    for match in delimiter.finditer(body):
        if start is not None:
            parts.append(body[start:max(start, _before_line_break(body, match.start()))])
        if match.group("close"):
            closed = True
            break
        start = match.end()

    if start is None and not closed:
        raise KnownError("no boundary delimiter found in multipart body")
    if not closed:
        raise KnownError("multipart body is missing its close delimiter")
    if not parts:
        raise KnownError("multipart body has no body parts")
    return parts
