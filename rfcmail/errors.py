"""Parse errors shared by every grammar rule and the resolution engine.

Rules return ``(remaining, value)`` on success and raise a
:class:`ParseError` subclass on failure.  Only :func:`rfcmail.combinators.optional`
catches them.
"""

from __future__ import annotations

from typing import TypeVar, Union

T = TypeVar("T")

Input = Union[bytes, bytearray, memoryview]
"""A byte slice.  Remainders are always suffixes of the slice passed in."""

Res = tuple[Input, T]


class ParseError(Exception):
    """Base class for every parse failure."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other) and self.message == other.message  # type: ignore[attr-defined]

    def __hash__(self) -> int:
        return hash((type(self), self.message))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r})"


class KnownError(ParseError):
    """A value is present but violates the grammar or a semantic rule."""


class TagError(ParseError):
    """An expected literal token is absent at the current position.

    Callers trying alternatives treat this as "not this production".
    """


class DepthExceededError(KnownError):
    """Nesting (comments or multipart bodies) went past the configured limit."""

    def __init__(self, message: str, limit: int) -> None:
        super().__init__(message)
        self.limit = limit
