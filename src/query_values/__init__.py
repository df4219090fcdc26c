"""Encode annotated records into URL query parameters."""

from .config import EncoderConfig
from .encoder import Encoder, encode, to_query_string
from .exceptions import (
    InvalidInputKindError,
    MaxDepthExceededError,
    QueryValuesError,
    UnresolvedAnnotationError,
)
from .hooks import ValuesEncoder
from .records import FieldDescriptor, RecordRegistry, default_registry
from .tags import Embedded, Tag, TagOption, UrlTag, url_field
from .utils import format_rfc3339, is_empty_value, is_zero_time, value_string
from .values import QueryValues

__all__ = [
    # Entry points
    "Encoder",
    "encode",
    "to_query_string",
    # Output
    "QueryValues",
    # Tags
    "Tag",
    "TagOption",
    "UrlTag",
    "Embedded",
    "url_field",
    # Records
    "FieldDescriptor",
    "RecordRegistry",
    "default_registry",
    # Custom encoding
    "ValuesEncoder",
    # Configuration
    "EncoderConfig",
    # Exceptions
    "QueryValuesError",
    "InvalidInputKindError",
    "MaxDepthExceededError",
    "UnresolvedAnnotationError",
    # Utilities
    "format_rfc3339",
    "is_empty_value",
    "is_zero_time",
    "value_string",
]
