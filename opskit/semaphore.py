"""A counting semaphore with non-blocking acquisition."""

from __future__ import annotations

import threading


class Semaphore:
    """Limit concurrency to a fixed number of permits."""

    def __init__(self, concurrency_num: int) -> None:
        if concurrency_num < 0:
            raise ValueError("concurrency_num must not be negative")
        self._size = concurrency_num
        self._held = 0
        self._cond = threading.Condition()

    def try_acquire(self) -> bool:
        """Take a permit if one is free; return whether it was taken."""
        with self._cond:
            if self._held < self._size:
                self._held += 1
                return True
            return False

    def acquire(self) -> None:
        """Take a permit, waiting until one is free."""
        with self._cond:
            self._cond.wait_for(lambda: self._held < self._size)
            self._held += 1

    def release(self) -> None:
        """Give back a permit; raise ValueError if none is held."""
        with self._cond:
            if self._held == 0:
                raise ValueError("semaphore released more times than acquired")
            self._held -= 1
            self._cond.notify()

    def available_permits(self) -> int:
        with self._cond:
            return self._size - self._held

    def __enter__(self) -> Semaphore:
        self.acquire()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.release()