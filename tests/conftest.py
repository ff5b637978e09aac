"""Shared test fixtures for the rfcmail test suite."""

from __future__ import annotations

from email import encoders
from email.mime.base import MIMEBase
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

import pytest

from rfcmail.config import ParserLimits


@pytest.fixture
def limits() -> ParserLimits:
    return ParserLimits(
        max_comment_depth=16,
        max_multipart_depth=8,
        lenient_children=False,
        log_json=True,
        log_level="INFO",
    )


# ------------------------------------------------------------------
# Raw part builders
# ------------------------------------------------------------------


def _build_part(headers: list[tuple[str, str]], body: bytes, *, newline: bytes = b"\r\n") -> bytes:
    """Build one MIME part: header lines, an empty line, then the body."""
    head = b"".join(f"{name}: {value}".encode() + newline for name, value in headers)
    return head + newline + body


def _build_multipart_body(
    boundary: str,
    parts: list[bytes],
    *,
    preamble: bytes = b"",
    epilogue: bytes = b"",
    newline: bytes = b"\r\n",
) -> bytes:
    """Join ``parts`` with RFC 2046 delimiters for ``boundary``."""
    dash = b"--" + boundary.encode()
    out = preamble + newline if preamble else b""
    for part in parts:
        out += dash + newline + part + newline
    out += dash + b"--" + newline + epilogue
    return out


def _nested_multipart(levels: int) -> bytes:
    """A text part wrapped in ``levels`` multipart/mixed containers."""
    part = b"Content-Type: text/plain\r\n\r\ninnermost"
    for level in range(levels):
        boundary = f"level-{level}".encode()
        part = (
            b'Content-Type: multipart/mixed; boundary="' + boundary + b'"\r\n'
            b"\r\n"
            b"--" + boundary + b"\r\n"
            + part
            + b"\r\n--" + boundary + b"--\r\n"
        )
    return part


# ------------------------------------------------------------------
# Sample EML builders
# ------------------------------------------------------------------


def _build_plain_email(*, body: str = "Hello, World!", charset: str = "us-ascii") -> bytes:
    msg = MIMEText(body, "plain", charset)
    msg["Subject"] = "Test Subject"
    msg["From"] = "sender@example.com"
    msg["To"] = "recipient@example.com"
    msg["Date"] = "Mon, 01 Jun 2025 12:00:00 +0000"
    return msg.as_bytes()


def _build_multipart_email(
    *,
    body_text: str = "Plain body",
    body_html: str = "<p>HTML body</p>",
    attachments: list[tuple[str, str, bytes]] | None = None,
) -> bytes:
    """Build a multipart email with text, HTML, and optional attachments."""
    msg = MIMEMultipart("mixed")
    msg["Subject"] = "Multipart Email"
    msg["From"] = "sender@example.com"
    msg["To"] = "recipient@example.com"
    msg["Date"] = "Mon, 01 Jun 2025 12:00:00 +0000"

    alt = MIMEMultipart("alternative")
    alt.attach(MIMEText(body_text, "plain"))
    alt.attach(MIMEText(body_html, "html"))
    msg.attach(alt)

    for filename, content_type, payload in attachments or []:
        maintype, subtype = content_type.split("/", 1)
        part = MIMEBase(maintype, subtype)
        part.set_payload(payload)
        encoders.encode_base64(part)
        part.add_header("Content-Disposition", "attachment", filename=filename)
        msg.attach(part)

    return msg.as_bytes()


@pytest.fixture
def plain_eml_bytes() -> bytes:
    return _build_plain_email()


@pytest.fixture
def multipart_eml_bytes() -> bytes:
    return _build_multipart_email(
        attachments=[("report.pdf", "application/pdf", b"%PDF-1.4 fake pdf content")],
    )
