"""MIME entity model shared by the part-header grammar and the resolver.

A :class:`RawEntity` is a body part whose headers have been read but whose
body has not been interpreted.  :func:`rfcmail.entity.resolve_entity` turns it
into one of the :class:`Entity` variants.

Bodies may be :class:`memoryview` slices of the caller's buffer.  Every type
has ``into_owned()``, which copies such slices so the result stays valid
after the buffer is released.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import TYPE_CHECKING, Union

from .date_time import DateTime

if TYPE_CHECKING:
    from .errors import Input


# ------------------------------------------------------------------
# Content types
# ------------------------------------------------------------------


class MimeType(str, Enum):
    """Top-level media types of RFC 2046."""

    TEXT = "text"
    IMAGE = "image"
    AUDIO = "audio"
    VIDEO = "video"
    APPLICATION = "application"
    MESSAGE = "message"
    MULTIPART = "multipart"

    @property
    def is_composite(self) -> bool:
        """Composite types carry nested entities instead of an opaque payload."""
        return self in (MimeType.MESSAGE, MimeType.MULTIPART)

    def into_owned(self) -> MimeType:
        return self


@dataclass(frozen=True)
class OtherMimeType:
    """A top-level type outside RFC 2046 (``x-custom``, ``chemical`` ...)."""

    name: str

    @property
    def is_composite(self) -> bool:
        return False

    def into_owned(self) -> OtherMimeType:
        return self


AnyMimeType = Union[MimeType, OtherMimeType]


def mime_type_from_name(name: str) -> AnyMimeType:
    name = name.lower()
    try:
        return MimeType(name)
    except ValueError:
        return OtherMimeType(name)


# ------------------------------------------------------------------
# Content-Transfer-Encoding
# ------------------------------------------------------------------


class ContentTransferEncoding(str, Enum):
    SEVEN_BIT = "7bit"
    EIGHT_BIT = "8bit"
    BINARY = "binary"
    QUOTED_PRINTABLE = "quoted-printable"
    BASE64 = "base64"

    def into_owned(self) -> ContentTransferEncoding:
        return self


@dataclass(frozen=True)
class OtherEncoding:
    """An ``x-token`` or otherwise unknown transfer encoding."""

    name: str

    def into_owned(self) -> OtherEncoding:
        return self


AnyEncoding = Union[ContentTransferEncoding, OtherEncoding]


def encoding_from_name(name: str) -> AnyEncoding:
    name = name.lower()
    try:
        return ContentTransferEncoding(name)
    except ValueError:
        return OtherEncoding(name)


# ------------------------------------------------------------------
# Content-Disposition (RFC 2183)
# ------------------------------------------------------------------


class DispositionType(str, Enum):
    """How an entity should be presented.

    See https://tools.ietf.org/html/rfc2183#section-2.1
    """

    INLINE = "inline"
    ATTACHMENT = "attachment"

    def into_owned(self) -> DispositionType:
        return self


@dataclass(frozen=True)
class UnknownDisposition:
    """Unrecognised disposition; RFC 2183 says to treat it as an attachment."""

    name: str

    def into_owned(self) -> UnknownDisposition:
        return self


AnyDispositionType = Union[DispositionType, UnknownDisposition]


def disposition_type_from_name(name: str) -> AnyDispositionType:
    name = name.lower()
    try:
        return DispositionType(name)
    except ValueError:
        return UnknownDisposition(name)


@dataclass
class Disposition:
    """Presentation hints and file metadata of an entity.

    The ``size`` parameter is only approximate and is left in
    ``unstructured``; use ``len(entity.value)`` for the exact size.
    """

    disposition_type: AnyDispositionType
    filename: str | None = None
    creation_date: DateTime | None = None
    modification_date: DateTime | None = None
    read_date: DateTime | None = None
    unstructured: dict[str, str] = field(default_factory=dict)

    def into_owned(self) -> Disposition:
        return replace(self, unstructured=dict(self.unstructured))


# ------------------------------------------------------------------
# Entities
# ------------------------------------------------------------------


def _owned_bytes(value: Input) -> bytes:
    return value if isinstance(value, bytes) else bytes(value)


@dataclass
class RawEntity:
    """A MIME entity before interpretation.

    ``subtype`` is lower-case and so are the keys of ``parameters``; the
    parameter values are kept verbatim.  ``value`` holds the body exactly as
    transmitted, still in its ``encoding``.
    """

    mime_type: AnyMimeType = MimeType.TEXT
    subtype: str = "plain"
    description: str | None = None
    id: tuple[str, str] | None = None
    parameters: dict[str, str] = field(default_factory=dict)
    disposition: Disposition | None = None
    encoding: AnyEncoding = ContentTransferEncoding.SEVEN_BIT
    value: Input = b""
    additional_headers: list[tuple[str, str]] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.subtype = self.subtype.lower()
        if any(key != key.lower() for key in self.parameters):
            self.parameters = {key.lower(): value for key, value in self.parameters.items()}

    @property
    def content_type(self) -> str:
        mime_type = self.mime_type.value if isinstance(self.mime_type, MimeType) else self.mime_type.name
        return f"{mime_type}/{self.subtype}"

    def parse(self, **kwargs) -> Entity:
        """Interpret this entity; see :func:`rfcmail.entity.resolve_entity`."""
        from .entity import resolve_entity

        return resolve_entity(self, **kwargs)

    def into_owned(self) -> RawEntity:
        return replace(
            self,
            parameters=dict(self.parameters),
            disposition=self.disposition.into_owned() if self.disposition else None,
            value=_owned_bytes(self.value),
            additional_headers=list(self.additional_headers),
        )


class Entity(ABC):
    """Base class of the interpreted entity variants."""

    subtype: str

    @abstractmethod
    def into_owned(self) -> Entity:
        """Copy every borrowed span so the entity outlives the input buffer."""


@dataclass
class MultipartEntity(Entity):
    """Sibling entities; the subtype tells how they relate (mixed, alternative ...).

    Children are left unresolved.
    """

    subtype: str
    content: list[RawEntity]

    def into_owned(self) -> MultipartEntity:
        return MultipartEntity(self.subtype, [child.into_owned() for child in self.content])


@dataclass
class TextEntity(Entity):
    """Decoded text.  Supported charsets: US-ASCII, UTF-8 and ISO-8859-*."""

    subtype: str
    value: str

    def into_owned(self) -> TextEntity:
        return self


@dataclass
class UnknownEntity(Entity):
    """An entity this library has no higher-level structure for."""

    raw: RawEntity

    @property
    def subtype(self) -> str:  # type: ignore[override]
        return self.raw.subtype

    def into_owned(self) -> UnknownEntity:
        return UnknownEntity(self.raw.into_owned())
