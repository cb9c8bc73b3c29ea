"""Levelled logging with pluggable backends."""

from __future__ import annotations

import os
import sys
import threading
import traceback
from abc import ABC, abstractmethod
from collections.abc import Iterable
from datetime import datetime
from enum import IntEnum
from typing import Any


class Severity(IntEnum):
    """Log levels; a lower value is more severe."""

    FATAL = 0
    ERROR = 1
    WARNING = 2
    INFO = 3
    DEBUG = 4


NUM_SEVERITY = len(Severity)

# Width of the "YYYY-MM-DD HH:MM:SS.ffffff " prefix of every header.
HEADER_TIME_WIDTH = 27


class Backend(ABC):
    """Destination for formatted log lines."""

    @abstractmethod
    def log(self, severity: Severity, msg: bytes) -> None:
        """Deliver one formatted line."""

    def close(self) -> None:
        """Release what the backend holds; the default holds nothing."""


class StdBackend(Backend):
    """Write log lines to standard output."""

    def log(self, severity: Severity, msg: bytes) -> None:
        sys.stdout.write(msg.decode("utf-8", errors="replace"))


class MultiBackend(Backend):
    """Send every line to several backends in turn."""

    def __init__(self, backends: Iterable[Backend]) -> None:
        self.backends = list(backends)

    def log(self, severity: Severity, msg: bytes) -> None:
        for backend in self.backends:
            backend.log(severity, msg)

    def close(self) -> None:
        for backend in self.backends:
            backend.close()


def _sprint(args: tuple[Any, ...]) -> str:
    """Join operands, with a space between two neighbours that are not strings."""
    parts: list[str] = []
    prev_is_str = True
    for index, arg in enumerate(args):
        is_str = isinstance(arg, str)
        if index and not is_str and not prev_is_str:
            parts.append(" ")
        parts.append(str(arg))
        prev_is_str = is_str
    return "".join(parts)


def _sprintf(fmt: str, args: tuple[Any, ...]) -> str:
    return fmt % args if args else fmt


def _format_header(severity: Severity, file: str, line: int) -> str:
    now = datetime.now()
    line = max(line, 0)
    return (
        f"{now.year:04d}-{now.month:02d}-{now.day:02d} "
        f"{now.hour:02d}:{now.minute:02d}:{now.second:02d}.{now.microsecond:06d} "
        f"{severity.name} {file}:{line} "
    )


class Logger:
    """A logger that drops lines less severe than its level."""

    def __init__(self, level: Severity | str = Severity.FATAL, backend: Backend | None = None) -> None:
        self.severity = Severity.FATAL
        self.backend = backend
        self.to_stderr = False
        self._lock = threading.Lock()
        self.set_severity(level)

    def set_severity(self, level: Severity | str) -> None:
        """Set the level from a Severity or its name; anything else is ignored."""
        if isinstance(level, Severity):
            self.severity = level
        elif isinstance(level, str):
            try:
                self.severity = Severity[level]
            except KeyError:
                pass

    def set_logging(self, level: Severity | str, backend: Backend | None) -> None:
        self.set_severity(level)
        self.backend = backend

    def close(self) -> None:
        if self.backend is not None:
            self.backend.close()

    def log_to_stderr(self) -> None:
        """Send every line to standard error instead of the backend."""
        self.to_stderr = True

    # The frame arithmetic below assumes: _header <- _print/_printf <- public call <- caller.
    def _header(self, severity: Severity, depth: int) -> str:
        try:
            frame = sys._getframe(3 + depth)
        except ValueError:
            file, line = "???", 1
        else:
            parts = frame.f_code.co_filename.replace(os.sep, "/").split("/")
            file = "/".join(parts[-2:])
            line = frame.f_lineno
        return _format_header(severity, file, line)

    def _print(self, severity: Severity, depth: int, args: tuple[Any, ...]) -> None:
        if self.severity < severity:
            return
        text = self._header(severity, depth) + _sprint(args)
        self._output(severity, text)

    def _printf(self, severity: Severity, depth: int, fmt: str, args: tuple[Any, ...]) -> None:
        if self.severity < severity:
            return
        text = self._header(severity, depth) + _sprintf(fmt, args)
        self._output(severity, text)

    def _output(self, severity: Severity, text: str) -> None:
        if self.severity < severity:
            return
        if not text.endswith("\n"):
            text += "\n"
        with self._lock:
            if self.to_stderr:
                sys.stderr.write(text)
            else:
                if self.backend is None:
                    raise RuntimeError("logger has no backend")
                self.backend.log(severity, text.encode("utf-8"))
        if severity == Severity.FATAL:
            sys.stderr.write("".join(traceback.format_stack()))
            raise SystemExit(255)

    def debug(self, *args: Any) -> None:
        self._print(Severity.DEBUG, 0, args)

    def debugf(self, fmt: str, *args: Any) -> None:
        self._printf(Severity.DEBUG, 0, fmt, args)

    def info(self, *args: Any) -> None:
        self._print(Severity.INFO, 0, args)

    def infof(self, fmt: str, *args: Any) -> None:
        self._printf(Severity.INFO, 0, fmt, args)

    def warning(self, *args: Any) -> None:
        self._print(Severity.WARNING, 0, args)

    def warningf(self, fmt: str, *args: Any) -> None:
        self._printf(Severity.WARNING, 0, fmt, args)

    def error(self, *args: Any) -> None:
        self._print(Severity.ERROR, 0, args)

    def errorf(self, fmt: str, *args: Any) -> None:
        self._printf(Severity.ERROR, 0, fmt, args)

    def fatal(self, *args: Any) -> None:
        """Log, dump the stack to stderr and exit with status 255."""
        self._print(Severity.FATAL, 0, args)

    def fatalf(self, fmt: str, *args: Any) -> None:
        """Log, dump the stack to stderr and exit with status 255."""
        self._printf(Severity.FATAL, 0, fmt, args)

    def log_depth(self, severity: Severity, depth: int, fmt: str, *args: Any) -> None:
        """Log attributing the line to a caller ``depth`` frames above this call's caller."""
        self._printf(severity, depth + 1, fmt, args)

    def printf_simple(self, fmt: str, *args: Any) -> None:
        """Log at INFO without a header."""
        self._output(Severity.INFO, _sprintf(fmt, args))


def new_logger(level: Severity | str, backend: Backend | None) -> Logger:
    return Logger(level, backend)


def new_multi_backend(*args: Backend) -> MultiBackend:
    return MultiBackend(args)


_logging = Logger(Severity.DEBUG, StdBackend())


def get_logger() -> Logger:
    """Return the process-wide logger used by the module functions."""
    return _logging


def set_logging(level: Severity | str, backend: Backend | None) -> None:
    _logging.set_logging(level, backend)


def set_severity(level: Severity | str) -> None:
    _logging.set_severity(level)


def close() -> None:
    _logging.close()


def log_to_stderr() -> None:
    _logging.log_to_stderr()


def debug(*args: Any) -> None:
    _logging._print(Severity.DEBUG, 0, args)


def debugf(fmt: str, *args: Any) -> None:
    _logging._printf(Severity.DEBUG, 0, fmt, args)


def info(*args: Any) -> None:
    _logging._print(Severity.INFO, 0, args)


def infof(fmt: str, *args: Any) -> None:
    _logging._printf(Severity.INFO, 0, fmt, args)


def warning(*args: Any) -> None:
    _logging._print(Severity.WARNING, 0, args)


def warningf(fmt: str, *args: Any) -> None:
    _logging._printf(Severity.WARNING, 0, fmt, args)


def error(*args: Any) -> None:
    _logging._print(Severity.ERROR, 0, args)


def errorf(fmt: str, *args: Any) -> None:
    _logging._printf(Severity.ERROR, 0, fmt, args)


def fatal(*args: Any) -> None:
    _logging._print(Severity.FATAL, 0, args)


def fatalf(fmt: str, *args: Any) -> None:
    _logging._printf(Severity.FATAL, 0, fmt, args)


def log_depth(severity: Severity, depth: int, fmt: str, *args: Any) -> None:
    _logging._printf(severity, depth + 1, fmt, args)


def printf(fmt: str, *args: Any) -> None:
    _logging._output(Severity.INFO, _sprintf(fmt, args))