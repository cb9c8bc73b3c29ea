"""Set types, with thread-safe variants."""

from __future__ import annotations

import threading
from collections.abc import Iterable, Iterator


class IntSet:
    """A set of integers."""

    def __init__(self) -> None:
        self._items: set[int] = set()

    def add(self, elt: int) -> IntSet:
        """Add ``elt`` and return the set for chaining."""
        self._items.add(elt)
        return self

    def exists(self, elt: int) -> bool:
        return elt in self._items

    def delete(self, elt: int) -> None:
        self._items.discard(elt)

    def clear(self) -> None:
        self._items = set()

    def to_list(self) -> list[int]:
        return list(self._items)

    def __contains__(self, elt: object) -> bool:
        return elt in self._items

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[int]:
        return iter(self.to_list())


class StringSet:
    """A set of strings."""

    def __init__(self) -> None:
        self._items: set[str] = set()

    def add(self, elt: str) -> StringSet:
        """Add ``elt`` and return the set for chaining."""
        self._items.add(elt)
        return self

    def exists(self, elt: str) -> bool:
        return elt in self._items

    def delete(self, elt: str) -> None:
        self._items.discard(elt)

    def clear(self) -> None:
        self._items = set()

    def to_list(self) -> list[str]:
        return list(self._items)

    def __contains__(self, elt: object) -> bool:
        return elt in self._items

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[str]:
        return iter(self.to_list())


class SafeInt64Set:
    """A thread-safe set of integers."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._items: set[int] = set()

    def add(self, item: int) -> SafeInt64Set:
        """Add ``item`` and return the set for chaining."""
        with self._lock:
            self._items.add(item)
        return self

    def adds(self, items: Iterable[int]) -> SafeInt64Set:
        """Add every element of ``items`` and return the set for chaining."""
        with self._lock:
            self._items.update(items)
        return self

    def contains(self, item: int) -> bool:
        with self._lock:
            return item in self._items

    def size(self) -> int:
        with self._lock:
            return len(self._items)

    def clear(self) -> None:
        with self._lock:
            self._items = set()

    def to_list(self) -> list[int]:
        with self._lock:
            return list(self._items)

    def __contains__(self, item: object) -> bool:
        with self._lock:
            return item in self._items

    def __len__(self) -> int:
        return self.size()

    def __iter__(self) -> Iterator[int]:
        return iter(self.to_list())

    def __str__(self) -> str:
        return "[" + " ".join(str(item) for item in self.to_list()) + "]"


class SafeSet:
    """A thread-safe set of strings."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._items: set[str] = set()

    def add(self, key: str) -> None:
        with self._lock:
            self._items.add(key)

    def remove(self, key: str) -> None:
        """Remove ``key`` if present."""
        with self._lock:
            self._items.discard(key)

    def clear(self) -> None:
        with self._lock:
            self._items = set()

    def contains(self, key: str) -> bool:
        with self._lock:
            return key in self._items

    def size(self) -> int:
        with self._lock:
            return len(self._items)

    def to_list(self) -> list[str]:
        with self._lock:
            return list(self._items)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._items

    def __len__(self) -> int:
        return self.size()

    def __iter__(self) -> Iterator[str]:
        return iter(self.to_list())