"""Report models: a JSON-friendly view of a resolved entity tree."""

from __future__ import annotations

from pydantic import BaseModel, Field

from .config import ParserLimits
from .entity import walk_entities
from .mime import Entity, MultipartEntity, RawEntity, TextEntity, UnknownEntity


class EntityReport(BaseModel):
    """One resolved entity of the tree."""

    depth: int = Field(description="Multipart nesting level, 0 for the root")
    kind: str = Field(description="multipart, text or unknown")
    subtype: str = Field(description="Lower-case media subtype")
    content_type: str | None = Field(
        default=None,
        description="Full type/subtype of an unknown entity",
    )
    parts: int | None = Field(default=None, description="Number of children of a multipart")
    size_bytes: int | None = Field(default=None, description="Raw body size of an unknown entity")
    filename: str | None = Field(default=None, description="Disposition filename, if any")
    text: str | None = Field(default=None, description="Decoded text, possibly truncated")
    truncated: bool = Field(default=False, description="Whether text was cut to the preview size")


class TreeReport(BaseModel):
    """Flattened depth-first listing of an entity tree."""

    entities: list[EntityReport] = Field(default_factory=list)

    @property
    def text_parts(self) -> list[EntityReport]:
        return [entity for entity in self.entities if entity.kind == "text"]


def _entity_report(depth: int, entity: Entity, preview_chars: int) -> EntityReport:
    if isinstance(entity, MultipartEntity):
        return EntityReport(
            depth=depth,
            kind="multipart",
            subtype=entity.subtype,
            parts=len(entity.content),
        )
    if isinstance(entity, TextEntity):
        return EntityReport(
            depth=depth,
            kind="text",
            subtype=entity.subtype,
            text=entity.value[:preview_chars],
            truncated=len(entity.value) > preview_chars,
        )
    if not isinstance(entity, UnknownEntity):
        raise TypeError(f"unexpected entity variant {type(entity).__name__}")
    raw = entity.raw
    return EntityReport(
        depth=depth,
        kind="unknown",
        subtype=raw.subtype,
        content_type=raw.content_type,
        size_bytes=len(raw.value),
        filename=raw.disposition.filename if raw.disposition else None,
    )


def build_report(
    raw: RawEntity,
    limits: ParserLimits | None = None,
    *,
    preview_chars: int = 200,
) -> TreeReport:
    """Walk ``raw`` under ``limits`` and summarise every entity."""
    limits = limits or ParserLimits()
    return TreeReport(
        entities=[
            _entity_report(depth, entity, preview_chars)
            for depth, entity in walk_entities(
                raw,
                max_depth=limits.max_multipart_depth,
                max_comment_depth=limits.max_comment_depth,
                lenient_children=limits.lenient_children,
            )
        ]
    )
