"""
Field tags: the external name and option flags of a record field.

A tag is written as ``"name"``, ``"name,opt1,opt2"`` or ``",opt1"`` (empty
name means "use the declared field identifier").  The sentinel name ``-``
suppresses the field entirely.

Tags are attached to fields either through ``typing.Annotated``::

    page: Annotated[int, UrlTag("page,omitempty")] = 0

or through dataclass field metadata::

    page: int = url_field("page,omitempty", default=0)
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

IGNORE_NAME = "-"


class TagOption(str, Enum):
    """Options recognised after the name segment of a tag."""

    OMITEMPTY = "omitempty"
    INT = "int"
    UNIX = "unix"

    # Collection strategies
    COMMA = "comma"
    SPACE = "space"
    SEMICOLON = "semicolon"
    BRACKETS = "brackets"
    NUMBERED = "numbered"


_VALID_OPTIONS: frozenset[str] = frozenset(m.value for m in TagOption)

# Join delimiters in precedence order
JOIN_DELIMITERS: tuple[tuple[TagOption, str], ...] = (
    (TagOption.COMMA, ","),
    (TagOption.SPACE, " "),
    (TagOption.SEMICOLON, ";"),
)


@dataclass(frozen=True)
class Tag:
    """
    Parsed field tag.

    Attributes:
        name: External parameter name (empty = use the field identifier).
        options: Recognised options.  Unknown tokens are dropped.
    """

    name: str = ""
    options: frozenset[TagOption] = field(default_factory=frozenset)

    @classmethod
    def parse(cls, raw: str | None) -> Tag:
        """Split *raw* into a name and its options.  Never raises."""
        if not raw:
            return cls()
        name, *tokens = raw.split(",")
        return cls(
            name=name,
            options=frozenset(TagOption(t) for t in tokens if t in _VALID_OPTIONS),
        )

    def has(self, option: TagOption | str) -> bool:
        if not isinstance(option, TagOption):
            if option not in _VALID_OPTIONS:
                return False
            option = TagOption(option)
        return option in self.options

    @property
    def is_ignored(self) -> bool:
        return self.name == IGNORE_NAME

    @property
    def join_delimiter(self) -> str | None:
        """Delimiter for the first join option present, if any."""
        for option, delimiter in JOIN_DELIMITERS:
            if option in self.options:
                return delimiter
        return None


@dataclass(frozen=True)
class UrlTag:
    """
    ``Annotated`` marker carrying a raw tag.

    ``embedded=True`` promotes the inner record's fields into the
    enclosing record, unless the tag also gives the field a name.
    """

    raw: str = ""
    embedded: bool = False

    @property
    def tag(self) -> Tag:
        return Tag.parse(self.raw)


Embedded = UrlTag(embedded=True)

# Dataclass metadata key for the embedded flag (the tag key is configurable)
EMBEDDED_METADATA_KEY = "url_embedded"


def url_field(
    raw: str = "",
    *,
    embedded: bool = False,
    tag_key: str = "url",
    **kwargs: Any,
) -> Any:
    """``dataclasses.field`` wrapper that stores the raw tag in field metadata."""
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[tag_key] = raw
    if embedded:
        metadata[EMBEDDED_METADATA_KEY] = True
    return dataclasses.field(metadata=metadata, **kwargs)
