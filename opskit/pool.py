"""A bounded pool of named connections."""

from __future__ import annotations

import threading
import time
from collections import deque
from collections.abc import Callable
from typing import Protocol


class NConn(Protocol):
    """A connection the pool can hold."""

    @property
    def name(self) -> str: ...

    def close(self) -> None: ...


class MaxConnectionsError(Exception):
    """Raised when the pool already has its maximum of active connections."""

    def __init__(self) -> None:
        super().__init__("maximum connections reached")


class ConnPool:
    """Hand out connections, reusing idle ones and capping how many are active.

    ``new`` is called with a unique name to open a new connection.
    """

    def __init__(
        self,
        name: str,
        address: str,
        max_conns: int,
        max_idle: int,
        new: Callable[[str], NConn] | None = None,
    ) -> None:
        self.name = name
        self.address = address
        self.max_conns = max_conns
        self.max_idle = max_idle
        self.new = new
        self.cnt = 0
        self._active = 0
        self._free: deque[NConn] = deque()
        self._all: dict[str, NConn] = {}
        self._lock = threading.Lock()

    def proc(self) -> str:
        """Return a one-line summary of the pool's counters."""
        with self._lock:
            return (
                f"Name:{self.name},Cnt:{self.cnt},active:{self._active},"
                f"all:{len(self._all)},free:{len(self._free)}"
            )

    def fetch(self) -> NConn:
        """Return an idle connection, or open a new one if under the limit."""
        with self._lock:
            if self._free:
                return self._free.popleft()
            if self._active >= self.max_conns:
                raise MaxConnectionsError()
            conn = self._new_conn()
            self._active += 1
            return conn

    def force_close(self, conn: NConn) -> None:
        """Close a connection and drop it from the pool."""
        with self._lock:
            self._delete_conn(conn)
            self._active -= 1

    def release(self, conn: NConn) -> None:
        """Return a connection; it is closed if the idle list is full."""
        with self._lock:
            if len(self._free) >= self.max_idle:
                self._delete_conn(conn)
                self._active -= 1
            else:
                self._free.append(conn)

    def _new_conn(self) -> NConn:
        if self.new is None:
            raise RuntimeError("connection factory is not set")
        conn = self.new(f"{self.name}_{self.cnt}_{int(time.time())}")
        self.cnt += 1
        self._all[conn.name] = conn
        return conn

    def _delete_conn(self, conn: NConn | None) -> None:
        if conn is None:
            return
        conn.close()
        self._all.pop(conn.name, None)