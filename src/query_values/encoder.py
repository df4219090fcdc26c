"""
Record -> query values encoder.

As a simple example::

    @dataclass
    class Options:
        query: Annotated[str, UrlTag("q")]
        show_all: Annotated[bool, UrlTag("all")]
        page: Annotated[int, UrlTag("page")]

    encode(Options("foo", True, 2)).encode()   # "all=true&page=2&q=foo"

Each public field becomes a parameter unless its tag name is ``-`` or it
is empty and tagged ``omitempty``.  The parameter name defaults to the
field name.  Nested records are scoped with brackets
(``user[addr][city]``); embedded records are flattened into their parent.
Several fields resolving to the same name all contribute values.

Cyclic record graphs are rejected once nesting exceeds
``EncoderConfig.max_depth``.
"""

from __future__ import annotations

import datetime
import logging
from typing import TYPE_CHECKING, Any

from .config import EncoderConfig
from .exceptions import InvalidInputKindError, MaxDepthExceededError
from .hooks import dispatch_custom_encoder
from .records import RecordRegistry, default_registry
from .tags import TagOption
from .utils import is_empty_value, value_string
from .values import QueryValues

if TYPE_CHECKING:
    from collections.abc import Collection

    from .tags import Tag

logger = logging.getLogger("query_values.encoder")

SEQUENCE_TYPES: tuple[type, ...] = (list, tuple, set, frozenset)


class Encoder:
    """
    Walks records and accumulates their fields into :class:`QueryValues`.

    The encoder holds no per-call state and may be shared freely.
    """

    def __init__(
        self,
        config: EncoderConfig | None = None,
        registry: RecordRegistry | None = None,
    ) -> None:
        self.config = config or EncoderConfig()
        if registry is None:
            if self.config.tag_key == default_registry.tag_key:
                registry = default_registry
            else:
                registry = RecordRegistry(tag_key=self.config.tag_key)
        self.registry = registry

    def encode(self, value: Any) -> QueryValues:
        """
        Encode the record *value*.

        ``None`` yields empty values.  Any non-record input raises
        :class:`InvalidInputKindError`.  If a custom encoder raises, its
        exception propagates and no partial result is returned.
        """
        values = QueryValues()
        if value is None:
            logger.debug("encode() got None, returning empty values")
            return values

        if not self.registry.is_record(value):
            raise InvalidInputKindError(type(value).__name__)

        self._encode_record(values, value, scope="", depth=0)
        return values

    # -- traversal -----------------------------------------------------------

    def _encode_record(
        self,
        values: QueryValues,
        record: Any,
        scope: str,
        depth: int,
    ) -> None:
        if depth >= self.config.max_depth:
            raise MaxDepthExceededError(self.config.max_depth, scope)

        fields = self.registry.describe(type(record)) or ()
        embedded: list[Any] = []

        for desc in fields:
            if not desc.visible and not desc.anonymous:
                continue

            tag = desc.tag
            if tag.is_ignored:
                logger.debug("Skipping ignored field %s", desc.name)
                continue

            value = desc.get(record)
            name = tag.name
            if not name:
                if desc.anonymous and self.registry.is_record(value):
                    embedded.append(value)
                    continue
                name = desc.name

            if scope:
                name = f"{scope}[{name}]"

            if tag.has(TagOption.OMITEMPTY) and is_empty_value(value):
                logger.debug("Omitting empty field %s", name)
                continue

            if dispatch_custom_encoder(desc, value, name, values):
                continue

            if isinstance(value, SEQUENCE_TYPES):
                self._encode_sequence(values, name, value, tag)
                continue

            if isinstance(value, datetime.datetime):
                values.add(name, self._string(value, tag))
                continue

            if self.registry.is_record(value):
                self._encode_record(values, value, name, depth + 1)
                continue

            values.add(name, self._string(value, tag))

        # Embedded records share the parent's namespace
        for record_value in embedded:
            self._encode_record(values, record_value, scope, depth + 1)

    def _encode_sequence(
        self,
        values: QueryValues,
        name: str,
        items: Collection[Any],
        tag: Tag,
    ) -> None:
        if isinstance(items, (set, frozenset)):
            # Sets have no order of their own
            items = sorted(items, key=lambda v: self._string(v, tag))

        delimiter = tag.join_delimiter
        if delimiter is not None:
            values.add(name, delimiter.join(self._string(v, tag) for v in items))
            return

        if tag.has(TagOption.BRACKETS):
            name += "[]"

        numbered = tag.has(TagOption.NUMBERED)
        for i, item in enumerate(items):
            key = f"{name}{i}" if numbered else name
            values.add(key, self._string(item, tag))

    def _string(self, value: Any, tag: Tag) -> str:
        return value_string(value, tag, naive_timezone=self.config.naive_timezone)


_default_encoder = Encoder()


def encode(value: Any) -> QueryValues:
    """Encode *value* with the default configuration and registry."""
    return _default_encoder.encode(value)


def to_query_string(value: Any, *, sort_keys: bool = True) -> str:
    """Encode *value* straight to a URL query string."""
    return encode(value).encode(sort_keys=sort_keys)
