"""Parser limits loaded from environment variables.

Uses pydantic-settings so every limit can be overridden via ``RFCMAIL_*``
env vars.  The engine itself never reads this; callers (the CLI, services
embedding the library) build a :class:`ParserLimits` and pass the numbers
down explicitly.
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings

from .combinators import MAX_COMMENT_DEPTH
from .entity import MAX_MULTIPART_DEPTH


class ParserLimits(BaseSettings):
    """Bounds applied to attacker-controlled nesting."""

    model_config = {"env_prefix": "RFCMAIL_"}

    max_comment_depth: int = Field(
        default=MAX_COMMENT_DEPTH,
        ge=1,
        description="Deepest nesting of parenthesised comments in header fields",
    )
    max_multipart_depth: int = Field(
        default=MAX_MULTIPART_DEPTH,
        ge=1,
        description="Deepest nesting of multipart entities",
    )
    lenient_children: bool = Field(
        default=False,
        description="Report children that fail to resolve as unknown instead of failing",
    )
    log_json: bool = Field(default=True, description="Emit JSON log lines")
    log_level: str = Field(default="INFO", description="Root log level name")
