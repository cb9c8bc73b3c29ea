"""Kernel limits, load average, memory and uptime read from /proc."""

from __future__ import annotations

import re
import socket
from dataclasses import dataclass

from opskit import files

FILE_MAX_PATH = "/proc/sys/fs/file-max"
FILE_NR_PATH = "/proc/sys/fs/file-nr"
PID_MAX_PATH = "/proc/sys/kernel/pid_max"
LOADAVG_PATH = "/proc/loadavg"
MEMINFO_PATH = "/proc/meminfo"
UPTIME_PATH = "/proc/uptime"

MULTI = 1024

_UINT_RE = re.compile(r"[0-9]+")
_UINT64_MAX = 2**64 - 1
_UINT64_SPAN = 2**64

_WANT = {
    "Buffers:": "buffers",
    "Cached:": "cached",
    "MemTotal:": "mem_total",
    "MemFree:": "mem_free",
    "MemAvailable:": "mem_available",
    "SwapTotal:": "swap_total",
    "SwapFree:": "swap_free",
}


def _parse_uint(text: str) -> int | None:
    if not _UINT_RE.fullmatch(text):
        return None
    value = int(text)
    return value if value <= _UINT64_MAX else None


def kernel_max_files() -> int:
    """Return the system-wide limit on open files."""
    return files.to_uint64(FILE_MAX_PATH)


def kernel_allocate_files() -> int:
    """Return the number of file handles currently allocated."""
    content = files.to_trim_string(FILE_NR_PATH)
    fields = content.split()
    if len(fields) != 3:
        raise ValueError(f"{FILE_NR_PATH} format error")
    value = _parse_uint(fields[0])
    if value is None:
        raise ValueError(f"invalid unsigned integer {fields[0]!r}")
    return value


def kernel_max_proc() -> int:
    """Return the largest process id the kernel hands out."""
    return files.to_uint64(PID_MAX_PATH)


def kernel_hostname() -> str:
    return socket.gethostname()


@dataclass
class Loadavg:
    """System load averaged over one, five and fifteen minutes."""

    avg_1min: float = 0.0
    avg_5min: float = 0.0
    avg_15min: float = 0.0

    def __str__(self) -> str:
        return f"<1min:{self.avg_1min:f}, 5min:{self.avg_5min:f}, 15min:{self.avg_15min:f}>"


def parse_loadavg(text: str) -> Loadavg:
    """Parse the first three fields of loadavg text."""
    fields = text.split()
    if len(fields) < 3:
        raise ValueError(f"{LOADAVG_PATH} format not supported")
    return Loadavg(float(fields[0]), float(fields[1]), float(fields[2]))


def load_avg() -> Loadavg:
    return parse_loadavg(files.to_trim_string(LOADAVG_PATH))


@dataclass
class Mem:
    """Memory and swap figures in bytes."""

    buffers: int = 0
    cached: int = 0
    mem_total: int = 0
    mem_free: int = 0
    mem_available: int = 0
    swap_total: int = 0
    swap_used: int = 0
    swap_free: int = 0

    def __str__(self) -> str:
        return (
            f"<MemTotal:{self.mem_total}, MemFree:{self.mem_free}, "
            f"MemAvailable:{self.mem_available}, Buffers:{self.buffers}, Cached:{self.cached}...>"
        )


def parse_meminfo(text: str) -> Mem:
    """Parse meminfo text; values in kB are converted to bytes."""
    mem = Mem()
    for line in text.split("\n"):
        fields = line.split()
        if not fields:
            continue
        attr = _WANT.get(fields[0])
        if attr is None or len(fields) != 3:
            continue
        value = _parse_uint(fields[1])
        if value is None:
            continue
        setattr(mem, attr, (value * MULTI) % _UINT64_SPAN)
    mem.swap_used = (mem.swap_total - mem.swap_free) % _UINT64_SPAN
    return mem


def mem_info() -> Mem:
    with open(MEMINFO_PATH, encoding="utf-8", errors="replace", newline="") as fh:
        return parse_meminfo(fh.read())


def parse_uptime(text: str) -> tuple[int, int, int]:
    """Split uptime text into ``(days, hours, minutes)``."""
    fields = text.split()
    if len(fields) < 2:
        raise ValueError(f"{UPTIME_PATH} format not supported")
    seconds = float(fields[0])
    minutes_total = seconds / 60.0
    hours_total = minutes_total / 60.0
    days = int(hours_total / 24.0)
    hours = int(hours_total) - days * 24
    minutes = int(minutes_total) - days * 60 * 24 - hours * 60
    return days, hours, minutes


def system_uptime() -> tuple[int, int, int]:
    """Return how long the system has been up as ``(days, hours, minutes)``."""
    return parse_uptime(files.to_trim_string(UPTIME_PATH))