"""Thread-safe double-ended lists, with an optional size limit."""

from __future__ import annotations

import threading
from collections import deque
from typing import Any


class _Element:
    """A handle to a value stored in a SafeList."""

    __slots__ = ("value",)

    def __init__(self, value: Any) -> None:
        self.value = value


class SafeList:
    """A list with a front and a back, safe to share between threads."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._items: deque[_Element] = deque()

    def push_front(self, value: Any) -> _Element:
        """Insert ``value`` at the front and return its handle."""
        element = _Element(value)
        with self._lock:
            self._items.appendleft(element)
        return element

    def push_front_batch(self, values: list[Any]) -> None:
        """Insert each value at the front in turn."""
        with self._lock:
            self._items.extendleft(_Element(value) for value in values)

    def pop_back(self) -> Any:
        """Remove and return the back value, or None if empty."""
        with self._lock:
            if not self._items:
                return None
            return self._items.pop().value

    def pop_back_by(self, limit: int) -> list[Any]:
        """Remove up to ``limit`` values from the back, back first."""
        with self._lock:
            count = min(len(self._items), max(limit, 0))
            return [self._items.pop().value for _ in range(count)]

    def pop_back_all(self) -> list[Any]:
        """Remove every value, back first."""
        with self._lock:
            items = [element.value for element in reversed(self._items)]
            self._items.clear()
            return items

    def remove(self, element: _Element) -> Any:
        """Remove the element if present and return its value."""
        with self._lock:
            try:
                self._items.remove(element)
            except ValueError:
                pass
        return element.value

    def remove_all(self) -> None:
        with self._lock:
            self._items = deque()

    def front_all(self) -> list[Any]:
        """Return every value, front first."""
        with self._lock:
            return [element.value for element in self._items]

    def back_all(self) -> list[Any]:
        """Return every value, back first."""
        with self._lock:
            return [element.value for element in reversed(self._items)]

    def front(self) -> Any:
        """Return the front value, or None if empty."""
        with self._lock:
            return self._items[0].value if self._items else None

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)


class SafeListLimited:
    """A SafeList that refuses pushes once it holds ``max_size`` values."""

    def __init__(self, max_size: int) -> None:
        self._max_size = max_size
        self._list = SafeList()

    def push_front(self, value: Any) -> bool:
        """Insert at the front unless full; return whether it was inserted."""
        if len(self._list) >= self._max_size:
            return False
        self._list.push_front(value)
        return True

    def push_front_batch(self, values: list[Any]) -> bool:
        """Insert all values unless already full; return whether they were inserted."""
        if len(self._list) >= self._max_size:
            return False
        self._list.push_front_batch(values)
        return True

    def push_front_violently(self, value: Any) -> bool:
        """Insert at the front, dropping the back value if over the limit."""
        self._list.push_front(value)
        if len(self._list) > self._max_size:
            self._list.pop_back()
        return True

    def pop_back(self) -> Any:
        return self._list.pop_back()

    def pop_back_by(self, limit: int) -> list[Any]:
        return self._list.pop_back_by(limit)

    def remove_all(self) -> None:
        self._list.remove_all()

    def front(self) -> Any:
        return self._list.front()

    def front_all(self) -> list[Any]:
        return self._list.front_all()

    def __len__(self) -> int:
        return len(self._list)