"""Tests for rfcmail.headers."""

from __future__ import annotations

import pytest

from rfcmail.date_time import Date, Month
from rfcmail.errors import DepthExceededError, KnownError, ParseError, TagError
from rfcmail.headers import (
    DIGEST_CONTENT_TYPE,
    content_disposition,
    content_id,
    content_type,
    parameters,
    parse_header_fields,
    parse_part,
    quoted_string,
    split_head,
    token,
)
from rfcmail.mime import (
    ContentTransferEncoding,
    DispositionType,
    MimeType,
    OtherEncoding,
    OtherMimeType,
    UnknownDisposition,
)
from tests.conftest import _build_part


class TestHeaderBlock:
    def test_split_crlf(self):
        head, body = split_head(b"A: 1\r\nB: 2\r\n\r\nbody\r\n")
        assert head == b"A: 1\r\nB: 2"
        assert body == b"body\r\n"

    def test_split_lf(self):
        head, body = split_head(b"A: 1\n\nbody")
        assert head == b"A: 1"
        assert body == b"body"

    def test_no_headers(self):
        head, body = split_head(b"\r\nbody only")
        assert head == b""
        assert body == b"body only"

    def test_no_body(self):
        head, body = split_head(b"A: 1")
        assert head == b"A: 1"
        assert body == b""

    def test_unfolding(self):
        fields = parse_header_fields(b"Subject: a long\r\n  subject line\r\nX-Other: value")
        assert fields == [("Subject", "a long  subject line"), ("X-Other", "value")]

    def test_invalid_field(self):
        with pytest.raises(KnownError):
            parse_header_fields(b"no colon here")

    def test_leading_continuation(self):
        with pytest.raises(KnownError):
            parse_header_fields(b" folded: first")

    def test_utf8_value(self):
        assert parse_header_fields("Subject: café".encode()) == [("Subject", "café")]

    def test_8bit_value_falls_back_to_latin1(self):
        assert parse_header_fields(b"Subject: caf\xe9") == [("Subject", "café")]


class TestTokens:
    def test_token(self):
        assert token(b"text/plain") == (b"/plain", b"text")

    def test_token_rejects_tspecial(self):
        with pytest.raises(KnownError):
            token(b"/plain")

    def test_quoted_string(self):
        assert quoted_string(b'"a \\"b\\" c" rest') == (b" rest", b'a "b" c')

    def test_unterminated_quoted_string(self):
        with pytest.raises(KnownError):
            quoted_string(b'"never closed')

    def test_quoted_string_needs_quote(self):
        with pytest.raises(TagError):
            quoted_string(b"plain")

    def test_parameters(self):
        rest, params = parameters(b'; Charset=utf-8 ; name="a b.txt";')
        assert rest == b""
        assert params == {"charset": b"utf-8", "name": b"a b.txt"}

    def test_parameters_with_comments(self):
        _, params = parameters(b" (c1); (c2) format = flowed (c3)")
        assert params == {"format": b"flowed"}

    def test_parameter_without_value(self):
        with pytest.raises(ParseError):
            parameters(b"; charset=")


class TestContentType:
    def test_simple(self):
        assert content_type(b"text/plain")[1] == (MimeType.TEXT, "plain", {})

    def test_with_parameters_and_comments(self):
        rest, value = content_type(b' (lead) Multipart/Mixed (kind); boundary="simple boundary"')
        assert rest == b""
        assert value == (MimeType.MULTIPART, "mixed", {"boundary": "simple boundary"})

    def test_other_type(self):
        assert content_type(b"x-custom/thing")[1][0] == OtherMimeType("x-custom")

    def test_missing_subtype(self):
        with pytest.raises(ParseError):
            content_type(b"text")

    def test_deep_comment(self):
        with pytest.raises(DepthExceededError):
            content_type(b"text/plain " + b"(" * 10 + b")" * 10, max_depth=4)


class TestContentId:
    def test_content_id(self):
        assert content_id(b" <part1@example.com> ") == (b"", ("part1", "example.com"))

    def test_missing_at(self):
        with pytest.raises(ParseError):
            content_id(b"<part1>")


class TestContentDisposition:
    def test_attachment(self):
        rest, disposition = content_disposition(
            b'attachment; filename="genome.jpeg";\r\n'
            b' modification-date="Wed, 12 Feb 1997 16:29:51 -0500"; size=1024'
        )
        assert rest == b""
        assert disposition.disposition_type is DispositionType.ATTACHMENT
        assert disposition.filename == "genome.jpeg"
        assert disposition.modification_date.date == Date(12, Month.FEBRUARY, 1997)
        assert disposition.creation_date is None
        assert disposition.unstructured == {"size": "1024"}

    def test_unknown_type(self):
        _, disposition = content_disposition(b"form-data; name=field")
        assert disposition.disposition_type == UnknownDisposition("form-data")
        assert disposition.unstructured == {"name": "field"}

    def test_invalid_date_parameter(self):
        with pytest.raises(ParseError):
            content_disposition(b'inline; creation-date="yesterday"')

    def test_date_parameter_with_trailing_text(self):
        with pytest.raises(KnownError):
            content_disposition(b'inline; read-date="1 Jan 2024 10:00 +0000 extra"')


class TestParsePart:
    def test_defaults_without_headers(self):
        raw = parse_part(b"\r\njust a body")
        assert raw.mime_type is MimeType.TEXT
        assert raw.subtype == "plain"
        assert raw.parameters == {"charset": "us-ascii"}
        assert raw.encoding is ContentTransferEncoding.SEVEN_BIT
        assert raw.value == b"just a body"

    def test_digest_default(self):
        raw = parse_part(b"\r\nFrom: someone", default_type=DIGEST_CONTENT_TYPE)
        assert raw.content_type == "message/rfc822"
        assert raw.parameters == {}

    def test_content_headers(self):
        data = _build_part(
            [
                ("Content-Type", 'text/html; charset="ISO-8859-1"'),
                ("Content-Transfer-Encoding", " Quoted-Printable "),
                ("Content-ID", "<body@example.com>"),
                ("Content-Description", "The body"),
                ("Content-Disposition", "inline"),
                ("X-Mailer", "test"),
            ],
            b"caf=E9",
        )
        raw = parse_part(data)
        assert raw.content_type == "text/html"
        assert raw.parameters == {"charset": "ISO-8859-1"}
        assert raw.encoding is ContentTransferEncoding.QUOTED_PRINTABLE
        assert raw.id == ("body", "example.com")
        assert raw.description == "The body"
        assert raw.disposition.disposition_type is DispositionType.INLINE
        assert raw.additional_headers == [("X-Mailer", "test")]
        assert raw.value == b"caf=E9"

    def test_header_names_are_case_insensitive(self):
        raw = parse_part(b"content-type: IMAGE/PNG\r\n\r\n\x89PNG")
        assert raw.content_type == "image/png"

    def test_other_encoding(self):
        raw = parse_part(b"Content-Transfer-Encoding: x-uuencode\r\n\r\nbegin")
        assert raw.encoding == OtherEncoding("x-uuencode")

    def test_body_is_a_view_of_input(self):
        buffer = b"Content-Type: text/plain\r\n\r\nbody"
        raw = parse_part(buffer)
        assert isinstance(raw.value, memoryview)
        assert raw.value.obj is buffer

    def test_last_duplicate_wins(self):
        raw = parse_part(b"Content-Type: text/plain\r\nContent-Type: text/html\r\n\r\n")
        assert raw.subtype == "html"

    def test_8bit_uninterpreted_headers(self):
        raw = parse_part(
            b"Content-Type: text/plain\r\n"
            b"Content-Description: R\xe9sum\xe9\r\n"
            b"X-Comment: caf\xe9\r\n"
            b"\r\n"
            b"hello"
        )
        assert raw.description == "Résumé"
        assert raw.additional_headers == [("X-Comment", "café")]

    def test_8bit_disposition_parameters(self):
        raw = parse_part(b'Content-Disposition: attachment; filename="r\xe9sum\xe9.pdf"; note="\xff"\r\n\r\n')
        assert raw.disposition.filename == "résumé.pdf"
        assert raw.disposition.unstructured == {"note": "\xff"}

    def test_trailing_garbage_in_field(self):
        with pytest.raises(KnownError):
            parse_part(b"Content-Type: text/plain garbage\r\n\r\n")

    def test_header_comment_depth(self):
        data = b"Content-Type: text/plain " + b"(" * 8 + b")" * 8 + b"\r\n\r\n"
        assert parse_part(data, max_depth=8).subtype == "plain"
        with pytest.raises(DepthExceededError):
            parse_part(data, max_depth=7)

    def test_stdlib_generated_message(self, plain_eml_bytes):
        raw = parse_part(plain_eml_bytes)
        assert raw.content_type == "text/plain"
        assert raw.parameters == {"charset": "us-ascii"}
        assert ("Subject", "Test Subject") in raw.additional_headers
        assert bytes(raw.value).rstrip() == b"Hello, World!"
