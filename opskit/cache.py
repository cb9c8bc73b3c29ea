"""An expiring key/value cache modelled on memcached, with a default instance."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

# Expiration values, in seconds.
DEFAULT = 0.0
FOREVER = -1.0

_UINT64_SPAN = 2**64


class CacheMissError(LookupError):
    """The key is not in the cache."""

    def __init__(self, message: str = "not found") -> None:
        super().__init__(message)


class NotStoredError(Exception):
    """The value was not stored because of the operation's condition."""

    def __init__(self, message: str = "not stored") -> None:
        super().__init__(message)


@dataclass
class _Item:
    value: Any
    expires_at: float | None


class _ItemGetter:
    """Serves the values fetched by one multi-key lookup."""

    def __init__(self, values: dict[str, Any]) -> None:
        self._values = values

    def get(self, key: str) -> Any:
        """Return the value fetched for ``key``; raise CacheMissError if absent."""
        try:
            return self._values[key]
        except KeyError:
            raise CacheMissError() from None


class InMemoryCache:
    """A thread-safe in-process cache whose entries may expire.

    ``default_expiration`` (seconds) is used when an operation passes DEFAULT;
    a default of DEFAULT itself, or any value not above zero, means never.
    """

    def __init__(
        self, default_expiration: float = DEFAULT, *, clock: Callable[[], float] = time.monotonic
    ) -> None:
        self.default_expiration = FOREVER if default_expiration == DEFAULT else default_expiration
        self._clock = clock
        self._items: dict[str, _Item] = {}
        self._lock = threading.Lock()

    def _deadline(self, expires: float) -> float | None:
        if expires == DEFAULT:
            expires = self.default_expiration
        return self._clock() + expires if expires > 0 else None

    def _live(self, key: str) -> _Item | None:
        item = self._items.get(key)
        if item is None:
            return None
        if item.expires_at is not None and self._clock() > item.expires_at:
            del self._items[key]
            return None
        return item

    def get(self, key: str) -> Any:
        """Return the value for ``key``; raise CacheMissError if absent."""
        with self._lock:
            item = self._live(key)
        if item is None:
            raise CacheMissError()
        return item.value

    def get_multi(self, *args: str) -> _ItemGetter:
        """Fetch the live values of the given keys into a getter."""
        with self._lock:
            found = {}
            for key in args:
                item = self._live(key)
                if item is not None:
                    found[key] = item.value
        return _ItemGetter(found)

    def set(self, key: str, value: Any, expires: float = DEFAULT) -> None:
        """Store ``value`` under ``key``, overwriting any existing value."""
        with self._lock:
            self._items[key] = _Item(value, self._deadline(expires))

    def add(self, key: str, value: Any, expires: float = DEFAULT) -> None:
        """Store only if ``key`` is absent; raise NotStoredError otherwise."""
        with self._lock:
            if self._live(key) is not None:
                raise NotStoredError()
            self._items[key] = _Item(value, self._deadline(expires))

    def replace(self, key: str, value: Any, expires: float = DEFAULT) -> None:
        """Store only if ``key`` is present; raise NotStoredError otherwise."""
        with self._lock:
            if self._live(key) is None:
                raise NotStoredError()
            self._items[key] = _Item(value, self._deadline(expires))

    def delete(self, key: str) -> None:
        """Remove ``key``; raise CacheMissError if absent."""
        with self._lock:
            if self._live(key) is None:
                raise CacheMissError()
            del self._items[key]

    def _counter(self, key: str, n: int) -> _Item:
        if n < 0:
            raise ValueError("delta must not be negative")
        item = self._live(key)
        if item is None:
            raise CacheMissError()
        if isinstance(item.value, bool) or not isinstance(item.value, int):
            raise TypeError(f"the value for {key} is not an integer")
        return item

    def increment(self, key: str, n: int) -> int:
        """Add ``n`` to the counter, wrapping around the unsigned 64-bit range."""
        with self._lock:
            item = self._counter(key, n)
            item.value = (item.value + n) % _UINT64_SPAN
            return item.value

    def decrement(self, key: str, n: int) -> int:
        """Subtract ``n`` from the counter, stopping at zero."""
        with self._lock:
            item = self._counter(key, n)
            item.value = max(item.value - n, 0)
            return item.value

    def flush(self) -> None:
        """Drop every entry."""
        with self._lock:
            self._items.clear()


instance: InMemoryCache | None = None


def _instance() -> InMemoryCache:
    if instance is None:
        raise RuntimeError("cache is not initialised")
    return instance


def init_memory_cache(default_expiration: float) -> InMemoryCache:
    """Install a new in-memory cache as the default instance."""
    global instance
    instance = InMemoryCache(default_expiration)
    return instance


def get(key: str) -> Any:
    return _instance().get(key)


def get_multi(*args: str) -> _ItemGetter:
    return _instance().get_multi(*args)


def set(key: str, value: Any, expires: float = DEFAULT) -> None:
    _instance().set(key, value, expires)


def add(key: str, value: Any, expires: float = DEFAULT) -> None:
    _instance().add(key, value, expires)


def replace(key: str, value: Any, expires: float = DEFAULT) -> None:
    _instance().replace(key, value, expires)


def delete(key: str) -> None:
    _instance().delete(key)


def increment(key: str, n: int) -> int:
    return _instance().increment(key, n)


def decrement(key: str, n: int) -> int:
    return _instance().decrement(key, n)


def flush() -> None:
    _instance().flush()