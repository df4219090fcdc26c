"""
Query values exception hierarchy.

All exceptions raised by the package itself inherit from
``QueryValuesError`` and provide ``to_dict()`` for API-friendly error
responses.  Failures raised by a custom ``ValuesEncoder`` are *not*
wrapped: they reach the caller unchanged.
"""

from __future__ import annotations

from typing import Any


class QueryValuesError(Exception):
    """Base exception for all query values errors."""

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.__class__.__name__,
            "message": str(self),
        }


class InvalidInputKindError(QueryValuesError, TypeError):
    """
    Top-level value passed to ``encode`` is not a record.

    Only records (dataclasses, pydantic models, registered classes) and
    ``None`` are accepted.
    """

    def __init__(self, kind: str) -> None:
        self.kind = kind
        super().__init__(f"query_values: encode() expects a record input. Got {kind}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "INVALID_INPUT_KIND",
            "message": str(self),
            "kind": self.kind,
        }


class MaxDepthExceededError(QueryValuesError):
    """
    Nested records go deeper than the configured ``max_depth``.

    This is almost always a self-referential record graph.
    """

    def __init__(self, max_depth: int, scope: str) -> None:
        self.max_depth = max_depth
        self.scope = scope
        super().__init__(
            f"Nesting deeper than {max_depth} levels at '{scope}'. "
            "Is the record graph cyclic?"
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "MAX_DEPTH_EXCEEDED",
            "max_depth": self.max_depth,
            "scope": self.scope,
        }


class UnresolvedAnnotationError(QueryValuesError):
    """
    A tagged field annotation could not be evaluated.

    Raised when an ``Annotated[...]`` string annotation (which may hold the
    field's ``UrlTag``) names something missing from its module, such as a
    type imported only under ``TYPE_CHECKING``.  Encoding without the tag
    would silently rename, keep or expose the field.
    """

    def __init__(self, record: str, field: str, annotation: str) -> None:
        self.record = record
        self.field = field
        self.annotation = annotation
        super().__init__(
            f"Cannot resolve annotation {annotation!r} of field "
            f"'{record}.{field}'; its tag would be lost."
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "UNRESOLVED_ANNOTATION",
            "record": self.record,
            "field": self.field,
            "annotation": self.annotation,
        }
