"""Errors meant to be shown to the user of a page."""

from __future__ import annotations

from typing import Any


class PageError(Exception):
    """An error whose message is fit to show to the user."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


def bomb(fmt: str, *args: Any) -> None:
    """Raise a PageError with a %-formatted message."""
    raise PageError(fmt % args if args else fmt)


def dangerous(value: Any) -> None:
    """Raise a PageError if ``value`` is a non-empty string or an exception."""
    if value is None:
        return
    if isinstance(value, str):
        if value:
            raise PageError(value)
    elif isinstance(value, BaseException):
        raise PageError(str(value)) from value