"""Header grammar for a single MIME part (RFC 2045, RFC 2183).

Turns the bytes of one body part, header block plus body, into a
:class:`~rfcmail.mime.RawEntity`.  The body is not copied: ``value`` is a
:class:`memoryview` slice of the input.

Only the ``Content-*`` fields are interpreted.  Every other field is kept in
``additional_headers`` in the order it appeared.
"""

from __future__ import annotations

import re

from .combinators import MAX_COMMENT_DEPTH, cfws, optional, tag, take_while1
from .date_time import DateTime, date_time
from .errors import Input, KnownError, Res
from .mime import (
    AnyMimeType,
    Disposition,
    MimeType,
    RawEntity,
    disposition_type_from_name,
    encoding_from_name,
    mime_type_from_name,
)

ContentType = tuple[AnyMimeType, str, dict[str, str]]

DEFAULT_CONTENT_TYPE: ContentType = (MimeType.TEXT, "plain", {"charset": "us-ascii"})
"""RFC 2045 section 5.2: what a part without Content-Type is."""

DIGEST_CONTENT_TYPE: ContentType = (MimeType.MESSAGE, "rfc822", {})
"""RFC 2046 section 5.1.5: the default inside ``multipart/digest``."""

_HEAD_END = re.compile(rb"\r?\n\r?\n")
_LEADING_BLANK_LINE = re.compile(rb"\r?\n")
_LINE_END = re.compile(rb"\r?\n")

# RFC 2045 tspecials
_TSPECIALS = frozenset(b'()<>@,;:\\"/[]?=')

_DATE_PARAMETERS = {
    "creation-date": "creation_date",
    "modification-date": "modification_date",
    "read-date": "read_date",
}


def _is_token_char(byte: int) -> bool:
    return 0x20 < byte < 0x7F and byte not in _TSPECIALS


def _is_field_name_char(byte: int) -> bool:
    return 0x20 < byte < 0x7F and byte != 0x3A


def _text(span: Input) -> str:
    """Header text is UTF-8 when it decodes as such, otherwise Latin-1.

    Latin-1 maps every byte, so raw 8-bit header values never fail.
    """
    raw = bytes(span)
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        return raw.decode("latin-1")


# ------------------------------------------------------------------
# Header block
# ------------------------------------------------------------------


def split_head(data: Input) -> tuple[Input, Input]:
    """Split a part into its header block and body at the first empty line."""
    blank = _LEADING_BLANK_LINE.match(data)
    if blank:
        return data[:0], data[blank.end():]
    end = _HEAD_END.search(data)
    if end is None:
        return data, data[len(data):]
    return data[:end.start()], data[end.end():]


def _raw_fields(head: Input) -> list[tuple[str, bytes]]:
    fields: list[tuple[str, bytearray]] = []
    pos = 0
    while pos < len(head):
        eol = _LINE_END.search(head, pos)
        stop = eol.start() if eol else len(head)
        line = bytes(head[pos:stop])
        pos = eol.end() if eol else len(head)

        if line[:1] in (b" ", b"\t"):
            if not fields:
                raise KnownError("header block starts with a continuation line")
            # unfolding drops the line break and keeps the whitespace
            fields[-1][1].extend(line)
            continue

        name, colon, value = line.partition(b":")
        name = name.rstrip(b" \t")
        if not colon or not name or not all(_is_field_name_char(byte) for byte in name):
            raise KnownError("invalid header field")
        fields.append((name.decode("ascii"), bytearray(value)))
    return [(name, bytes(value).strip(b" \t")) for name, value in fields]


def parse_header_fields(head: Input) -> list[tuple[str, str]]:
    """Unfolded ``(name, value)`` pairs of a header block, in order."""
    return [(name, _text(value)) for name, value in _raw_fields(head)]


# ------------------------------------------------------------------
# Structured field values
# ------------------------------------------------------------------


def token(input: Input) -> Res[Input]:
    try:
        return take_while1(input, _is_token_char)
    except KnownError:
        raise KnownError("expected a token") from None


def quoted_string(input: Input) -> Res[bytes]:
    """DQUOTE *(qtext / quoted-pair) DQUOTE, returned without the quotes."""
    input, _ = tag(input, b'"')
    out = bytearray()
    pos = 0
    while pos < len(input):
        byte = input[pos]
        if byte == 0x22:
            return input[pos + 1:], bytes(out)
        if byte == 0x5C and pos + 1 < len(input):
            out.append(input[pos + 1])
            pos += 2
            continue
        if byte not in (0x0D, 0x0A):
            out.append(byte)
        pos += 1
    raise KnownError("unterminated quoted-string")


def _parameter_value(input: Input) -> Res[bytes]:
    if input[:1] == b'"':
        return quoted_string(input)
    input, value = token(input)
    return input, bytes(value)


def parameters(input: Input, *, max_depth: int = MAX_COMMENT_DEPTH) -> Res[dict[str, bytes]]:
    """*(";" [CFWS] attribute [CFWS] "=" [CFWS] value [CFWS])

    Attribute names are lower-cased.  A trailing ``;`` is tolerated.
    """
    params: dict[str, bytes] = {}
    while True:
        input, _ = optional(input, cfws, max_depth=max_depth)
        if input[:1] != b";":
            return input, params
        input, _ = tag(input, b";")
        input, _ = optional(input, cfws, max_depth=max_depth)
        if not len(input):
            return input, params
        input, name = token(input)
        input, _ = optional(input, cfws, max_depth=max_depth)
        input, _ = tag(input, b"=")
        input, _ = optional(input, cfws, max_depth=max_depth)
        input, value = _parameter_value(input)
        params[bytes(name).decode("ascii").lower()] = value


def content_type(input: Input, *, max_depth: int = MAX_COMMENT_DEPTH) -> Res[ContentType]:
    """[CFWS] type "/" subtype *(";" parameter)"""
    input, _ = optional(input, cfws, max_depth=max_depth)
    input, type_name = token(input)
    input, _ = optional(input, cfws, max_depth=max_depth)
    input, _ = tag(input, b"/")
    input, _ = optional(input, cfws, max_depth=max_depth)
    input, subtype = token(input)
    input, params = parameters(input, max_depth=max_depth)
    return input, (
        mime_type_from_name(bytes(type_name).decode("ascii")),
        bytes(subtype).decode("ascii").lower(),
        {name: _text(value) for name, value in params.items()},
    )


def content_id(input: Input, *, max_depth: int = MAX_COMMENT_DEPTH) -> Res[tuple[str, str]]:
    """[CFWS] "<" id-left "@" id-right ">" [CFWS]"""
    input, _ = optional(input, cfws, max_depth=max_depth)
    input, _ = tag(input, b"<")
    input, left = take_while1(input, lambda byte: byte not in (0x40, 0x3E))
    input, _ = tag(input, b"@")
    input, right = take_while1(input, lambda byte: byte != 0x3E)
    input, _ = tag(input, b">")
    input, _ = optional(input, cfws, max_depth=max_depth)
    return input, (_text(left), _text(right))


def _parameter_date(value: bytes) -> DateTime:
    rest, parsed = date_time(memoryview(value))
    if len(rest):
        raise KnownError("unexpected characters after date-time parameter")
    return parsed


def content_disposition(input: Input, *, max_depth: int = MAX_COMMENT_DEPTH) -> Res[Disposition]:
    """[CFWS] disposition-type *(";" disposition-parm)"""
    input, _ = optional(input, cfws, max_depth=max_depth)
    input, kind = token(input)
    input, params = parameters(input, max_depth=max_depth)

    disposition = Disposition(disposition_type_from_name(bytes(kind).decode("ascii")))
    for name, value in params.items():
        if name == "filename":
            disposition.filename = _text(value)
        elif name in _DATE_PARAMETERS:
            setattr(disposition, _DATE_PARAMETERS[name], _parameter_date(value))
        else:
            disposition.unstructured[name] = _text(value)
    return input, disposition


def _whole(rule, value: bytes, max_depth: int):
    rest, parsed = rule(memoryview(value), max_depth=max_depth)
    if len(rest):
        raise KnownError("unexpected characters at the end of a header field")
    return parsed


def _encoding(input: Input, *, max_depth: int = MAX_COMMENT_DEPTH) -> Res[str]:
    input, _ = optional(input, cfws, max_depth=max_depth)
    input, name = token(input)
    input, _ = optional(input, cfws, max_depth=max_depth)
    return input, bytes(name).decode("ascii")


# ------------------------------------------------------------------
# Entry point
# ------------------------------------------------------------------


def parse_part(
    data: Input,
    *,
    default_type: ContentType = DEFAULT_CONTENT_TYPE,
    max_depth: int = MAX_COMMENT_DEPTH,
) -> RawEntity:
    """Read one MIME part into a :class:`RawEntity`.

    ``default_type`` applies when the part has no Content-Type field.
    """
    if not isinstance(data, memoryview):
        data = memoryview(data)
    head, body = split_head(data)

    mime_type, subtype, params = default_type
    entity = RawEntity(mime_type=mime_type, subtype=subtype, parameters=dict(params), value=body)

    for name, value in _raw_fields(head):
        field = name.lower()
        if field == "content-type":
            entity.mime_type, entity.subtype, entity.parameters = _whole(content_type, value, max_depth)
        elif field == "content-transfer-encoding":
            entity.encoding = encoding_from_name(_whole(_encoding, value, max_depth))
        elif field == "content-id":
            entity.id = _whole(content_id, value, max_depth)
        elif field == "content-description":
            entity.description = _text(value)
        elif field == "content-disposition":
            entity.disposition = _whole(content_disposition, value, max_depth)
        else:
            entity.additional_headers.append((name, _text(value)))
    return entity
