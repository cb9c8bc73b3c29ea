"""Backend that writes one log file per severity, with size or hourly rotation."""

from __future__ import annotations

import contextlib
import os
import re
import threading
import time
from collections.abc import Callable
from datetime import datetime
from typing import BinaryIO

from opskit.log.logger import Backend, Severity

BUFFER_SIZE = 256 * 1024
DEFAULT_FLUSH_INTERVAL = 3.0
MIN_FLUSH_INTERVAL = 1.0
DEFAULT_ROTATE_NUM = 20
DEFAULT_MAX_SIZE = 1024 * 1024 * 1024
DEFAULT_KEEP_HOURS = 24 * 7
MONITOR_INTERVAL = 5.0
HOUR_CHECK_INTERVAL = 1.0

# Matches files left behind by hourly rotation; only this century is covered.
_HOURLY_FILE_RE = re.compile(r"(INFO|ERROR|WARNING|DEBUG|FATAL)\.log\.20[0-9]{8}")
_INT_RE = re.compile(r"[+-]?[0-9]+")


def hour_tag(now: datetime) -> int:
    """Return the hour stamp YYYYMMDDHH of ``now`` as an integer."""
    return now.year * 1000000 + now.month * 10000 + now.day * 100 + now.hour


def should_delete(file_name: str, keep_hours: int) -> bool:
    """Return True if an hourly log file is older than ``keep_hours`` hours.

    The file name is expected to look like ``INFO.log.2016071114``.
    """
    parts = file_name.split(".")
    if len(parts) < 3 or not _INT_RE.fullmatch(parts[2]):
        return False
    tag = int(parts[2])
    point = time.time() - keep_hours * 3600
    return hour_tag(datetime.fromtimestamp(point)) > tag


def _open_append(path: str) -> BinaryIO:
    fd = os.open(path, os.O_APPEND | os.O_CREAT | os.O_WRONLY, 0o644)
    return os.fdopen(fd, "ab", buffering=BUFFER_SIZE)


class _LogFile:
    """A buffered append-only file with a running size count."""

    def __init__(self, path: str) -> None:
        self.path = path
        self.fh = _open_append(path)
        self.cur = 0
        try:
            self.count = os.fstat(self.fh.fileno()).st_size
        except OSError:
            self.count = 0

    def sync(self) -> None:
        self.fh.flush()
        with contextlib.suppress(OSError):
            os.fsync(self.fh.fileno())

    def reopen(self) -> None:
        """Open the path afresh, closing the previous handle."""
        new = _open_append(self.path)
        self.close()
        self.fh = new

    def close(self) -> None:
        with contextlib.suppress(OSError, ValueError):
            self.sync()
        with contextlib.suppress(OSError):
            self.fh.close()


class FileBackend(Backend):
    """Write each severity to ``<dir>/<SEVERITY>.log``.

    Files are rotated by size (``rotate``) or, when enabled, every hour; hourly
    files older than ``keep_hours`` are deleted. Background threads flush the
    buffers, recreate deleted files and perform hourly rotation.
    """

    def __init__(self, dir: str) -> None:
        os.makedirs(dir, 0o755, exist_ok=True)
        self.dir = dir
        self._lock = threading.Lock()
        self._files: dict[Severity, _LogFile] = {}
        try:
            for severity in Severity:
                self._files[severity] = _LogFile(os.path.join(dir, f"{severity.name}.log"))
        except OSError:
            for opened in self._files.values():
                opened.close()
            raise
        self.flush_interval = DEFAULT_FLUSH_INTERVAL
        self.rotate_num = DEFAULT_ROTATE_NUM
        self.max_size = DEFAULT_MAX_SIZE
        self.rotate_by_hour = False
        self.last_check = 0
        self.keep_hours = DEFAULT_KEEP_HOURS
        self.falls_through = False
        self._closed = False
        self._stop = threading.Event()
        self._threads = [
            threading.Thread(target=self._every, args=(lambda: self.flush_interval, self.flush), daemon=True),
            threading.Thread(target=self._every, args=(lambda: MONITOR_INTERVAL, self._monitor_once), daemon=True),
            threading.Thread(
                target=self._every, args=(lambda: HOUR_CHECK_INTERVAL, self._rotate_by_hour_once), daemon=True
            ),
        ]
        for thread in self._threads:
            thread.start()

    def _every(self, interval: Callable[[], float], action: Callable[[], None]) -> None:
        while not self._stop.wait(interval()):
            with contextlib.suppress(OSError, ValueError):
                action()

    def _write(self, log_file: _LogFile, data: bytes) -> None:
        if (
            not self.rotate_by_hour
            and self.max_size > 0
            and self.rotate_num > 0
            and log_file.count + len(data) >= self.max_size
        ):
            log_file.fh.flush()
            with contextlib.suppress(OSError):
                os.rename(log_file.path, f"{log_file.path}.{log_file.cur:03d}")
            log_file.reopen()
            log_file.cur += 1
            if log_file.cur >= self.rotate_num:
                log_file.cur = 0
            log_file.count = 0
        log_file.count += len(data)
        log_file.fh.write(data)

    def log(self, severity: Severity, msg: bytes) -> None:
        """Append ``msg`` to the file of its severity."""
        severity = Severity(severity)
        with self._lock:
            if self._closed:
                raise ValueError("file backend is closed")
            self._write(self._files[severity], msg)
            if self.falls_through and severity < Severity.INFO:
                self._write(self._files[Severity.INFO], msg)
        if severity == Severity.FATAL:
            self.flush()

    def flush(self) -> None:
        """Write out buffered lines and sync them to disk."""
        with self._lock:
            if self._closed:
                return
            for log_file in self._files.values():
                log_file.sync()

    def close(self) -> None:
        """Stop the background threads, flush and close every file."""
        if self._closed:
            return
        self._stop.set()
        current = threading.current_thread()
        for thread in self._threads:
            if thread is not current:
                thread.join()
        with self._lock:
            self._closed = True
            for log_file in self._files.values():
                log_file.close()

    def rotate(self, rotate_num: int, max_size: int) -> None:
        """Keep ``rotate_num`` numbered files of at most ``max_size`` bytes each."""
        self.rotate_num = rotate_num
        self.max_size = max_size

    def set_rotate_by_hour(self, rotate_by_hour: bool) -> None:
        self.rotate_by_hour = rotate_by_hour
        self.last_check = hour_tag(datetime.now()) if rotate_by_hour else 0

    def set_keep_hours(self, hours: int) -> None:
        """Set how many hours of hourly files to keep."""
        self.keep_hours = hours

    def fall(self) -> None:
        """Also copy FATAL, ERROR and WARNING lines into the INFO file."""
        self.falls_through = True

    def set_flush_duration(self, seconds: float) -> None:
        """Set the flush interval; anything under one second becomes one second."""
        self.flush_interval = seconds if seconds >= MIN_FLUSH_INTERVAL else MIN_FLUSH_INTERVAL

    def _monitor_once(self) -> None:
        for log_file in self._files.values():
            if not os.path.exists(log_file.path):
                with self._lock:
                    if not self._closed:
                        log_file.reopen()

    def _rotate_by_hour_once(self) -> None:
        if not self.rotate_by_hour:
            return
        check = hour_tag(datetime.now())
        if self.last_check < check:
            with self._lock:
                if self._closed:
                    return
                for log_file in self._files.values():
                    log_file.fh.flush()
                    with contextlib.suppress(OSError):
                        os.rename(log_file.path, f"{log_file.path}.{self.last_check}")
                    log_file.reopen()
            self.last_check = check
        try:
            names = os.listdir(self.dir)
        except OSError:
            return
        for name in names:
            if _HOURLY_FILE_RE.fullmatch(name) and should_delete(name, self.keep_hours):
                with contextlib.suppress(OSError):
                    os.remove(os.path.join(self.dir, name))