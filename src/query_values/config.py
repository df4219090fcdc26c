"""Encoder configuration."""

from __future__ import annotations

import datetime
from dataclasses import dataclass, field, replace

DEFAULT_TAG_KEY = "url"
DEFAULT_MAX_DEPTH = 64


@dataclass(frozen=True)
class EncoderConfig:
    """
    Immutable encoder settings.

    Attributes:
        tag_key: Dataclass field metadata key holding the raw tag.
        max_depth: Maximum record nesting depth before
            :class:`~query_values.exceptions.MaxDepthExceededError` is raised.
        naive_timezone: Timezone assumed for naive ``datetime`` values.
    """

    tag_key: str = DEFAULT_TAG_KEY
    max_depth: int = DEFAULT_MAX_DEPTH
    naive_timezone: datetime.tzinfo = field(default=datetime.timezone.utc)

    def __post_init__(self) -> None:
        if self.max_depth < 1:
            raise ValueError(f"max_depth must be positive, got {self.max_depth}")
        if not self.tag_key:
            raise ValueError("tag_key must not be empty")

    def with_tag_key(self, tag_key: str) -> EncoderConfig:
        """Return a copy reading tags from a different metadata key."""
        return replace(self, tag_key=tag_key)

    def with_max_depth(self, max_depth: int) -> EncoderConfig:
        """Return a copy with a different nesting limit."""
        return replace(self, max_depth=max_depth)
