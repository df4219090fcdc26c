"""
Field descriptor tables for record types.

A *record* is any class whose instances are walked field by field:
dataclasses and pydantic models are described automatically, anything
else can be registered by hand.  Each type's table is built once and
cached by its :class:`RecordRegistry`.
"""

from __future__ import annotations

import dataclasses
import inspect
import logging
import operator
import sys
import types
import weakref
from dataclasses import dataclass, field
from typing import (
    TYPE_CHECKING,
    Annotated,
    Any,
    Union,
    get_args,
    get_origin,
    get_type_hints,
)

from pydantic import BaseModel

from .config import DEFAULT_TAG_KEY
from .exceptions import UnresolvedAnnotationError
from .tags import EMBEDDED_METADATA_KEY, Tag, UrlTag

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

logger = logging.getLogger("query_values.records")

_NONE_TYPE = type(None)

# Errors raised while evaluating string annotations
_UNRESOLVED = (NameError, AttributeError, TypeError, SyntaxError)


@dataclass(frozen=True)
class FieldDescriptor:
    """
    Everything the encoder needs to know about one record field.

    Attributes:
        name: Declared identifier (fallback parameter name).
        tag: Parsed tag.
        declared_type: Annotated type with ``Optional``/``Annotated`` removed,
            or ``None`` when unknown.
        getter: Reads the field from a record; defaults to ``getattr``.
        anonymous: Embedded field whose inner fields are promoted.
    """

    name: str
    tag: Tag = field(default_factory=Tag)
    declared_type: Any = None
    getter: Callable[[Any], Any] | None = None
    anonymous: bool = False

    @property
    def visible(self) -> bool:
        """Underscore-prefixed fields are private."""
        return not self.name.startswith("_")

    def get(self, record: Any) -> Any:
        if self.getter is None:
            return getattr(record, self.name)
        return self.getter(record)


def unwrap_annotation(annotation: Any) -> tuple[Any, tuple[Any, ...]]:
    """
    Strip ``Annotated`` and ``Optional`` layers from *annotation*.

    Returns the bare type and every ``Annotated`` extra found on the way.
    Unions of more than one non-``None`` member are returned unchanged.
    """
    extras: list[Any] = []
    while True:
        origin = get_origin(annotation)
        if origin is Annotated:
            annotation, *more = get_args(annotation)
            extras.extend(more)
        elif origin is Union or origin is types.UnionType:
            members = [a for a in get_args(annotation) if a is not _NONE_TYPE]
            if len(members) != 1:
                break
            annotation = members[0]
        else:
            break
    return annotation, tuple(extras)


def _find_url_tag(extras: Iterable[Any]) -> UrlTag | None:
    for extra in extras:
        if isinstance(extra, UrlTag):
            return extra
    return None


def _field_owner(cls: type, name: str) -> type:
    """The class in *cls*'s MRO that declares the annotation for *name*."""
    for base in cls.__mro__:
        if name in inspect.get_annotations(base):
            return base
    return cls


def _resolve_field_annotation(
    cls: type,
    f: dataclasses.Field[Any],
    tag_key: str,
) -> Any:
    """
    Resolve one string annotation in the namespace of its declaring class.

    An unresolvable annotation is dropped, unless it is an ``Annotated[...]``
    that may carry the field's tag and no metadata tag replaces it: that
    raises :class:`UnresolvedAnnotationError`.
    """
    annotation = f.type
    if not isinstance(annotation, str):
        return annotation

    owner = _field_owner(cls, f.name)
    module = sys.modules.get(owner.__module__)
    globalns = dict(vars(module)) if module is not None else {}

    def holder() -> None: ...

    holder.__annotations__ = {f.name: annotation}
    try:
        hints = get_type_hints(
            holder, globalns, dict(vars(owner)), include_extras=True
        )
    except _UNRESOLVED as exc:
        if tag_key not in f.metadata and "Annotated" in annotation:
            raise UnresolvedAnnotationError(
                cls.__qualname__, f.name, annotation
            ) from exc
        logger.debug(
            "Unresolved annotation %r on %s.%s: %s",
            annotation,
            cls.__qualname__,
            f.name,
            exc,
        )
        return None
    return hints[f.name]


def _describe_dataclass(cls: type, tag_key: str) -> tuple[FieldDescriptor, ...]:
    hints: dict[str, Any] | None
    try:
        hints = get_type_hints(cls, include_extras=True)
    except _UNRESOLVED as exc:
        # Resolve each field on its own instead
        logger.debug("Unresolved annotations on %s: %s", cls.__qualname__, exc)
        hints = None

    descriptors = []
    for f in dataclasses.fields(cls):
        if hints is not None:
            annotation = hints.get(f.name, f.type)
        else:
            annotation = _resolve_field_annotation(cls, f, tag_key)
        declared, extras = unwrap_annotation(annotation)
        url_tag = _find_url_tag(extras)
        if tag_key in f.metadata:
            tag = Tag.parse(f.metadata[tag_key])
        else:
            tag = url_tag.tag if url_tag is not None else Tag()
        embedded = bool(f.metadata.get(EMBEDDED_METADATA_KEY)) or (
            url_tag is not None and url_tag.embedded
        )
        descriptors.append(
            FieldDescriptor(
                name=f.name,
                tag=tag,
                declared_type=None if isinstance(declared, str) else declared,
                getter=operator.attrgetter(f.name),
                anonymous=embedded,
            )
        )
    return tuple(descriptors)


def _describe_model(
    cls: type[BaseModel],
    tag_key: str,
) -> tuple[FieldDescriptor, ...]:
    descriptors = []
    for name, info in cls.model_fields.items():
        declared, extras = unwrap_annotation(info.annotation)
        url_tag = _find_url_tag((*info.metadata, *extras))
        schema_extra = info.json_schema_extra
        if isinstance(schema_extra, dict) and tag_key in schema_extra:
            tag = Tag.parse(str(schema_extra[tag_key]))
        else:
            tag = url_tag.tag if url_tag is not None else Tag()
        descriptors.append(
            FieldDescriptor(
                name=name,
                tag=tag,
                declared_type=declared,
                getter=operator.attrgetter(name),
                anonymous=url_tag is not None and url_tag.embedded,
            )
        )
    return tuple(descriptors)


class RecordRegistry:
    """
    Cache of field descriptor tables keyed by record type.

    Usage::

        registry = RecordRegistry()
        registry.register(Point, [FieldDescriptor("x"), FieldDescriptor("y")])

        registry.describe(Point)   # -> (FieldDescriptor("x"), ...)
    """

    def __init__(self, tag_key: str = DEFAULT_TAG_KEY) -> None:
        self.tag_key = tag_key
        self._tables: weakref.WeakKeyDictionary[
            type, tuple[FieldDescriptor, ...]
        ] = weakref.WeakKeyDictionary()

    # -- registration --------------------------------------------------------

    def register(self, cls: type, fields: Iterable[FieldDescriptor]) -> None:
        """Register (or replace) the descriptor table for *cls*."""
        self._tables[cls] = tuple(fields)

    def unregister(self, cls: type) -> None:
        """Forget *cls*; dataclasses and models are re-described on demand."""
        self._tables.pop(cls, None)

    def clear(self) -> None:
        self._tables.clear()

    # -- look-up -------------------------------------------------------------

    def describe(self, cls: type) -> tuple[FieldDescriptor, ...] | None:
        """Descriptor table for *cls*, or ``None`` if it is not a record type."""
        table = self._tables.get(cls)
        if table is not None:
            return table

        if dataclasses.is_dataclass(cls):
            table = _describe_dataclass(cls, self.tag_key)
        elif issubclass(cls, BaseModel):
            table = _describe_model(cls, self.tag_key)
        else:
            return None

        logger.debug("Described %s: %d fields", cls.__qualname__, len(table))
        self._tables[cls] = table
        return table

    def is_record_type(self, cls: type) -> bool:
        return self.describe(cls) is not None

    def is_record(self, value: Any) -> bool:
        """True for record *instances* (record classes themselves are not)."""
        if value is None or isinstance(value, type):
            return False
        return self.is_record_type(type(value))


default_registry = RecordRegistry()
