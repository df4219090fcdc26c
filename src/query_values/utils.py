"""
Leaf-value helpers: emptiness, timestamp formatting, stringification.

These are pure-Python helpers with no knowledge of records.
"""

from __future__ import annotations

import datetime
import numbers
from collections.abc import Sized
from enum import Enum
from typing import TYPE_CHECKING, Any

from .tags import TagOption

if TYPE_CHECKING:
    from .tags import Tag

UTC = datetime.timezone.utc
_ZERO = datetime.timedelta(0)
_SECOND = datetime.timedelta(seconds=1)
_EPOCH = datetime.datetime(1970, 1, 1, tzinfo=UTC)

# ---------------------------------------------------------------------------
# Timestamps
# ---------------------------------------------------------------------------


def is_zero_time(value: datetime.datetime) -> bool:
    """
    True if *value* is the zero instant, ``0001-01-01T00:00:00Z``.

    The check is on the instant, so the same moment expressed in another
    offset is zero as well.  Naive values are compared as-is.
    """
    offset = value.utcoffset() or _ZERO
    try:
        return value.replace(tzinfo=None) - offset == datetime.datetime.min
    except OverflowError:
        return False


def _as_aware(
    value: datetime.datetime,
    naive_timezone: datetime.tzinfo,
) -> datetime.datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=naive_timezone)
    return value


def format_rfc3339(
    value: datetime.datetime,
    naive_timezone: datetime.tzinfo = UTC,
) -> str:
    """
    Format *value* as an RFC 3339 timestamp without fractional seconds.

    UTC renders as ``Z``; other offsets as ``+HH:MM`` / ``-HH:MM``.
    """
    value = _as_aware(value, naive_timezone)
    base = (
        f"{value.year:04d}-{value.month:02d}-{value.day:02d}"
        f"T{value.hour:02d}:{value.minute:02d}:{value.second:02d}"
    )
    offset = value.utcoffset() or _ZERO
    if offset == _ZERO:
        return base + "Z"
    sign = "-" if offset < _ZERO else "+"
    minutes = abs(offset) // datetime.timedelta(minutes=1)
    return f"{base}{sign}{minutes // 60:02d}:{minutes % 60:02d}"


def unix_seconds(
    value: datetime.datetime,
    naive_timezone: datetime.tzinfo = UTC,
) -> int:
    """Whole seconds since the Unix epoch, floored."""
    return (_as_aware(value, naive_timezone) - _EPOCH) // _SECOND


# ---------------------------------------------------------------------------
# Emptiness
# ---------------------------------------------------------------------------


def is_empty_value(value: Any) -> bool:
    """
    Whether *value* counts as empty for the ``omitempty`` option.

    Empty values are ``None``, ``False``, numeric zero, anything sized with
    length zero (strings, sequences, sets, mappings) and the zero
    ``datetime``.  Everything else, records included, is never empty.
    """
    if value is None:
        return True
    if isinstance(value, bool):
        return not value
    if isinstance(value, datetime.datetime):
        return is_zero_time(value)
    if isinstance(value, numbers.Number):
        return value == 0
    if isinstance(value, Sized):
        return len(value) == 0
    return False


# ---------------------------------------------------------------------------
# Stringification
# ---------------------------------------------------------------------------


def value_string(
    value: Any,
    tag: Tag | None = None,
    *,
    naive_timezone: datetime.tzinfo = UTC,
) -> str:
    """
    String form of a single leaf value.

    - ``None`` -> ``""``
    - bool -> ``"true"``/``"false"`` (``"1"``/``"0"`` with the ``int`` option)
    - datetime -> RFC 3339 (epoch seconds with the ``unix`` option)
    - Enum -> its member value
    - anything else -> ``str(value)``
    """
    if value is None:
        return ""

    if isinstance(value, bool):
        if tag is not None and tag.has(TagOption.INT):
            return "1" if value else "0"
        return "true" if value else "false"

    if isinstance(value, datetime.datetime):
        if tag is not None and tag.has(TagOption.UNIX):
            return str(unix_seconds(value, naive_timezone))
        return format_rfc3339(value, naive_timezone)

    if isinstance(value, Enum):
        return value_string(value.value, tag, naive_timezone=naive_timezone)

    return str(value)
