"""
Custom encoder capability.

A field whose type implements :class:`ValuesEncoder` takes over its own
encoding entirely: the engine hands it the (already scoped) parameter
name and the output multi-map, and applies no default rule afterwards.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Protocol, get_origin, runtime_checkable

if TYPE_CHECKING:
    from .records import FieldDescriptor
    from .values import QueryValues

logger = logging.getLogger("query_values.hooks")


@runtime_checkable
class ValuesEncoder(Protocol):
    """
    Protocol for types that encode themselves into query values.

    Implementations add zero or more entries to *values*, typically under
    *key*.  Raising aborts the whole ``encode`` call; the exception reaches
    the caller unchanged.

    A field declared with an encoder type whose value is ``None`` is
    encoded through ``declared_type()``, so such types must be
    constructible without arguments.  If they are not, the ``TypeError``
    from the constructor propagates like any other encoder failure.
    """

    def encode_values(self, key: str, values: QueryValues) -> None:
        ...


def implements_encoder(tp: Any) -> bool:
    """True if the class *tp* satisfies :class:`ValuesEncoder`."""
    if not isinstance(tp, type) or get_origin(tp) is not None:
        return False
    return issubclass(tp, ValuesEncoder)


def dispatch_custom_encoder(
    descriptor: FieldDescriptor,
    value: Any,
    key: str,
    values: QueryValues,
) -> bool:
    """
    Let the field encode itself if its type supports it.

    A ``None`` value of an encoder type is replaced by a zero-valued
    instance (``declared_type()``) so the type can still emit a default.

    Returns:
        True if the field was handled and default rules must be skipped.
    """
    if value is None and implements_encoder(descriptor.declared_type):
        logger.debug("Materialising zero %s for '%s'", descriptor.declared_type, key)
        value = descriptor.declared_type()

    if isinstance(value, type) or not isinstance(value, ValuesEncoder):
        return False

    logger.debug("Custom encoder %s handles '%s'", type(value).__name__, key)
    value.encode_values(key, values)
    return True
