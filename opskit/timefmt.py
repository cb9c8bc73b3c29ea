"""Human readable time formatting."""

from __future__ import annotations

from datetime import datetime

DEFAULT_PATTERN = "%Y-%m-%d %H:%M:%S"

_MINUTE = 60
_HOUR = 3600
_DAY = 24 * _HOUR


def duration(now: int, before: int) -> str:
    """Describe how long ago ``before`` was, both given in Unix seconds."""
    d = now - before
    if d <= _MINUTE:
        return "just now"
    if d <= 2 * _MINUTE:
        return "1 minute ago"
    if d <= _HOUR:
        return f"{d // _MINUTE} minutes ago"
    if d <= 2 * _HOUR:
        return "1 hour ago"
    if d <= _DAY:
        return f"{d // _HOUR} hours ago"
    if d <= 2 * _DAY:
        return "1 day ago"
    return f"{d // _DAY} days ago"


def format_time(ts: int, pattern: str | None = None) -> str:
    """Format Unix seconds in local time with a strftime pattern."""
    return datetime.fromtimestamp(ts).strftime(pattern or DEFAULT_PATTERN)