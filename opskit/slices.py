"""Helpers for working with lists of plain values."""

from __future__ import annotations

from collections.abc import Hashable, Iterable, Sequence
from typing import Any, TypeVar

T = TypeVar("T")
H = TypeVar("H", bound=Hashable)


def contains(items: Iterable[Any], value: Any) -> bool:
    """Return True if ``value`` equals any element of ``items``."""
    return any(item == value for item in items)


def contains_all(small: Iterable[Any], big: Sequence[Any]) -> bool:
    """Return True if every element of ``small`` is present in ``big``."""
    return all(contains(big, item) for item in small)


def merge(first: Iterable[T], second: Iterable[T]) -> list[T]:
    """Concatenate two sequences into a new list."""
    return [*first, *second]


def subtract(a: Sequence[H], b: Iterable[H]) -> list[H]:
    """Return the elements of ``a`` that are not in ``b``, keeping order."""
    excluded = set(b)
    if not excluded or not a:
        return list(a)
    return [item for item in a if item not in excluded]


def total(values: Iterable[Any]) -> Any:
    """Sum the values; an empty input sums to 0."""
    return sum(values)


def unique(items: Iterable[H]) -> list[H]:
    """Return the distinct elements of ``items`` in first-seen order."""
    return list(dict.fromkeys(items))


def unique_trimmed(items: Iterable[str]) -> list[str]:
    """Strip each string, drop blanks and return the distinct results."""
    return unique(stripped for stripped in (item.strip() for item in items) if stripped)