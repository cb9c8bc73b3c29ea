"""A consistent hash ring that maps names onto a changing set of members."""

from __future__ import annotations

import bisect
import struct
import threading

_MASK = 0xFFFFFFFF
_C1 = 0xCC9E2D51
_C2 = 0x1B873593


def _rotl(x: int, r: int) -> int:
    return ((x << r) | (x >> (32 - r))) & _MASK


def murmur3_32(data: bytes | str, seed: int = 0) -> int:
    """Return the 32-bit MurmurHash3 (x86) of ``data``."""
    if isinstance(data, str):
        data = data.encode("utf-8")
    h = seed & _MASK
    length = len(data)
    body_len = length - length % 4
    for (k,) in struct.iter_unpack("<I", data[:body_len]):
        k = (k * _C1) & _MASK
        k = _rotl(k, 15)
        k = (k * _C2) & _MASK
        h ^= k
        h = _rotl(h, 13)
        h = (h * 5 + 0xE6546B64) & _MASK
    tail = data[body_len:]
    if tail:
        k = 0
        for shift, byte in enumerate(tail):
            k ^= byte << (8 * shift)
        k = (k * _C1) & _MASK
        k = _rotl(k, 15)
        k = (k * _C2) & _MASK
        h ^= k
    h ^= length
    h ^= h >> 16
    h = (h * 0x85EBCA6B) & _MASK
    h ^= h >> 13
    h = (h * 0xC2B2AE35) & _MASK
    h ^= h >> 16
    return h


class EmptyCircleError(LookupError):
    """Raised when looking up a name on a ring with no members."""

    def __init__(self) -> None:
        super().__init__("empty circle")


class Consistent:
    """A hash ring; each member occupies ``number_of_replicas`` points.

    Change ``number_of_replicas`` before adding members.
    """

    def __init__(self, number_of_replicas: int = 20) -> None:
        self.number_of_replicas = number_of_replicas
        self._circle: dict[int, str] = {}
        self._members: dict[str, None] = {}
        self._sorted_hashes: list[int] = []
        self._count = 0
        self._lock = threading.RLock()

    @staticmethod
    def _hash_key(key: str) -> int:
        return murmur3_32(key.encode("utf-8"))

    def _points(self, elt: str) -> list[int]:
        return [self._hash_key(f"{i}{elt}") for i in range(self.number_of_replicas)]

    def _update_sorted_hashes(self) -> None:
        self._sorted_hashes = sorted(self._circle)

    def _add(self, elt: str) -> None:
        for point in self._points(elt):
            self._circle[point] = elt
        self._members[elt] = None
        self._update_sorted_hashes()
        self._count += 1

    def _remove(self, elt: str) -> None:
        for point in self._points(elt):
            self._circle.pop(point, None)
        self._members.pop(elt, None)
        self._update_sorted_hashes()
        self._count -= 1

    def add(self, elt: str) -> None:
        """Insert a member into the ring."""
        with self._lock:
            self._add(elt)

    def remove(self, elt: str) -> None:
        """Take a member out of the ring."""
        with self._lock:
            self._remove(elt)

    def set(self, elts: list[str]) -> None:
        """Make the ring hold exactly ``elts``, adding and removing as needed."""
        with self._lock:
            wanted = set(elts)
            for member in [m for m in self._members if m not in wanted]:
                self._remove(member)
            for elt in elts:
                if elt not in self._members:
                    self._add(elt)

    def members(self) -> list[str]:
        with self._lock:
            return list(self._members)

    def _search(self, key: int) -> int:
        index = bisect.bisect_right(self._sorted_hashes, key)
        return 0 if index >= len(self._sorted_hashes) else index

    def _start(self, name: str) -> int:
        if not self._circle:
            raise EmptyCircleError()
        return self._search(self._hash_key(name))

    def _walk(self, start: int):
        """Yield the members at the points after ``start``, once round the ring."""
        hashes = self._sorted_hashes
        size = len(hashes)
        for step in range(1, size):
            yield self._circle[hashes[(start + step) % size]]

    def get(self, name: str) -> str:
        """Return the member closest after where ``name`` hashes on the ring."""
        with self._lock:
            start = self._start(name)
            return self._circle[self._sorted_hashes[start]]

    def get_two(self, name: str) -> tuple[str, str]:
        """Return the two closest distinct members; the second is '' with one member."""
        with self._lock:
            start = self._start(name)
            first = self._circle[self._sorted_hashes[start]]
            if self._count == 1:
                return first, ""
            second = ""
            for second in self._walk(start):
                if second != first:
                    break
            return first, second

    def get_n(self, name: str, n: int) -> list[str]:
        """Return up to ``n`` closest distinct members, nearest first."""
        with self._lock:
            start = self._start(name)
            n = min(n, self._count)
            result = [self._circle[self._sorted_hashes[start]]]
            if len(result) == n:
                return result
            for elem in self._walk(start):
                if elem not in result:
                    result.append(elem)
                if len(result) == n:
                    break
            return result