"""Byte-level parser combinators every grammar rule is built from.

Each primitive takes a byte slice and returns ``(remaining, value)``, where
``remaining`` is a suffix of the input.  Failures raise
:class:`~rfcmail.errors.ParseError`; nothing else is raised for short or
malformed input.

Backtracking is explicit: a rule that may be absent is wrapped with
:func:`optional`, which hands back the untouched input when the sub-rule
fails.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

from .errors import DepthExceededError, Input, KnownError, ParseError, Res, TagError

T = TypeVar("T")

MAX_COMMENT_DEPTH = 64
"""Deepest parenthesised comment nesting accepted by :func:`cfws`."""

WSP = b" \t"
CRLF = b"\r\n"

_BACKSLASH = 0x5C
_OPEN_PAREN = 0x28
_CLOSE_PAREN = 0x29


def is_digit(byte: int) -> bool:
    return 0x30 <= byte <= 0x39


def is_wsp(byte: int) -> bool:
    return byte == 0x20 or byte == 0x09


def as_str(span: Input) -> str:
    """Convert an already-validated ASCII span to text."""
    return bytes(span).decode("ascii")


def tag(input: Input, literal: bytes) -> Res[None]:
    """Match ``literal`` at the start of ``input``."""
    if input[: len(literal)] == literal:
        return input[len(literal):], None
    raise TagError(f"expected {literal!r}")


def optional(input: Input, rule: Callable[..., Res[T]], *args: Any, **kwargs: Any) -> Res[T | None]:
    """Apply ``rule``; on failure return the original input and ``None``.

    :class:`DepthExceededError` is a resource limit, not a non-match, and
    always propagates.
    """
    try:
        return rule(input, *args, **kwargs)
    except DepthExceededError:
        raise
    except ParseError:
        return input, None


def take_while(input: Input, predicate: Callable[[int], bool]) -> Res[Input]:
    pos = 0
    while pos < len(input) and predicate(input[pos]):
        pos += 1
    return input[pos:], input[:pos]


def take_while1(input: Input, predicate: Callable[[int], bool]) -> Res[Input]:
    """Like :func:`take_while` but at least one byte must match."""
    rest, span = take_while(input, predicate)
    if not len(span):
        raise KnownError("expected at least one matching character")
    return rest, span


def digit(input: Input) -> Res[int]:
    if len(input) >= 1 and is_digit(input[0]):
        return input[1:], input[0] - 0x30
    raise KnownError("expected a digit")


def two_digits(input: Input) -> Res[int]:
    """Exactly two ASCII digits."""
    if len(input) >= 2 and is_digit(input[0]) and is_digit(input[1]):
        return input[2:], (input[0] - 0x30) * 10 + (input[1] - 0x30)
    raise KnownError("expected two digits")


def fws(input: Input) -> Res[Input]:
    """FWS = ([*WSP CRLF] 1*WSP), repeated as obs-FWS allows.

    Returns the consumed span, folds included.
    """
    pos = 0
    end = len(input)
    saw_wsp = False
    while True:
        start = pos
        while pos < end and is_wsp(input[pos]):
            pos += 1
        if pos > start:
            saw_wsp = True
        if input[pos:pos + 2] == CRLF and pos + 2 < end and is_wsp(input[pos + 2]):
            pos += 2
            continue
        break
    if not saw_wsp:
        raise TagError("expected folding whitespace")
    return input[pos:], input[:pos]


def comment(input: Input, *, max_depth: int = MAX_COMMENT_DEPTH) -> Res[Input]:
    """comment = "(" *([FWS] ccontent) [FWS] ")"

    Nested comments are tracked with a counter rather than recursion.
    """
    if input[:1] != b"(":
        raise TagError("expected '('")
    depth = 0
    pos = 0
    end = len(input)
    while pos < end:
        byte = input[pos]
        if byte == _BACKSLASH:
            pos += 2
            continue
        if byte == _OPEN_PAREN:
            depth += 1
            if depth > max_depth:
                raise DepthExceededError("comments are nested too deeply", max_depth)
        elif byte == _CLOSE_PAREN:
            depth -= 1
            if depth == 0:
                return input[pos + 1:], input[:pos + 1]
        pos += 1
    raise KnownError("unterminated comment")


def cfws(input: Input, *, max_depth: int = MAX_COMMENT_DEPTH) -> Res[Input]:
    """CFWS = (1*([FWS] comment) [FWS]) / FWS"""
    rest = input
    matched = False
    while True:
        rest, ws = optional(rest, fws)
        if ws is not None:
            matched = True
        if rest[:1] != b"(":
            break
        rest, _ = comment(rest, max_depth=max_depth)
        matched = True
    if not matched:
        raise TagError("expected comment or folding whitespace")
    return rest, input[: len(input) - len(rest)]
