"""Numeric conversions."""

from __future__ import annotations

_INT64_SPAN = 2**64
_INT64_OFFSET = 2**63


def to_int64(value: object) -> int:
    """Convert an integer to the signed 64-bit range, wrapping like a cast.

    Raises TypeError for anything that is not an integer (booleans included).
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"to_int64 needs an integer, not `{type(value).__name__}`")
    return (value + _INT64_OFFSET) % _INT64_SPAN - _INT64_OFFSET