"""Content-Transfer-Encoding and charset decoding (RFC 2045 section 6).

Both steps are strict: invalid Base64, a bad ``=`` escape in
Quoted-Printable, or bytes that are not valid in the declared charset raise
:class:`~rfcmail.errors.KnownError`.  Nothing is replaced or dropped.
"""

from __future__ import annotations

import base64
import binascii
import re

from .errors import Input, KnownError
from .mime import AnyEncoding, ContentTransferEncoding

SUPPORTED_ENCODINGS = frozenset(ContentTransferEncoding)

# ISO-8859-12 was never published.
ISO_8859_PARTS = frozenset(range(1, 17)) - {12}

DEFAULT_CHARSET = "us-ascii"

_ISO_8859 = re.compile(r"iso[-_ ]?8859[-_ ](\d{1,2})")
_HEX_DIGITS = frozenset(b"0123456789abcdefABCDEF")


def decode_base64(data: Input) -> bytes:
    """Standard alphabet; line breaks and other whitespace are ignored."""
    compact = b"".join(bytes(data).split())
    try:
        return base64.b64decode(compact, validate=True)
    except binascii.Error as exc:
        raise KnownError(f"invalid base64 data: {exc}") from None


def decode_quoted_printable(data: Input) -> bytes:
    """Decode ``=XX`` escapes and remove soft line breaks.

    Whitespace at the end of an encoded line was added in transport and is
    dropped.  Hard line breaks keep their original form (CRLF or LF).
    """
    out = bytearray()
    lines = bytes(data).split(b"\n")
    last = len(lines) - 1
    for index, line in enumerate(lines):
        newline = b""
        if index < last:
            if line.endswith(b"\r"):
                line = line[:-1]
                newline = b"\r\n"
            else:
                newline = b"\n"
        line = line.rstrip(b" \t")

        soft_break = False
        pos = 0
        while pos < len(line):
            eq = line.find(b"=", pos)
            if eq < 0:
                out += line[pos:]
                break
            out += line[pos:eq]
            if eq == len(line) - 1:
                soft_break = True
                break
            escape = line[eq + 1:eq + 3]
            if len(escape) != 2 or not _HEX_DIGITS.issuperset(escape):
                raise KnownError("invalid quoted-printable escape sequence")
            out.append(int(escape, 16))
            pos = eq + 3

        if not soft_break:
            out += newline
    return bytes(out)


def decode_transfer_encoding(data: Input, encoding: AnyEncoding) -> Input:
    """Undo ``encoding``.  Identity encodings hand ``data`` back uncopied."""
    if encoding in (
        ContentTransferEncoding.SEVEN_BIT,
        ContentTransferEncoding.EIGHT_BIT,
        ContentTransferEncoding.BINARY,
    ):
        return data
    if encoding is ContentTransferEncoding.QUOTED_PRINTABLE:
        return decode_quoted_printable(data)
    if encoding is ContentTransferEncoding.BASE64:
        return decode_base64(data)
    raise KnownError(f"unsupported transfer encoding {encoding.name!r}")


def lookup_charset(name: str | None) -> str | None:
    """Return the Python codec for a supported charset, or None.

    US-ASCII is decoded as UTF-8, of which it is a subset.  ISO-8859 parts
    use Python's ``iso8859_N`` codecs; positions those tables leave
    unassigned (0xA5 in part 3, 0xA1 in parts 6 and 8 ...) are not text, and
    :func:`decode_charset` rejects them.
    """
    name = (name or DEFAULT_CHARSET).strip().lower()
    if name in ("us-ascii", "ascii", "utf-8", "utf8"):
        return "utf-8"
    match = _ISO_8859.fullmatch(name)
    if match and int(match.group(1)) in ISO_8859_PARTS:
        return f"iso8859_{int(match.group(1))}"
    return None


def decode_charset(data: Input, codec: str) -> str:
    try:
        return str(data, codec, "strict")
    except UnicodeDecodeError as exc:
        raise KnownError(f"invalid {codec} text at byte {exc.start}") from None
