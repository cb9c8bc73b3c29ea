"""Running processes listed from /proc."""

from __future__ import annotations

import re
from dataclasses import dataclass

from opskit import files

PROC_ROOT = "/proc"

_INT_RE = re.compile(r"[+-]?[0-9]+")


@dataclass
class Proc:
    """A process: its pid, name and command line with NUL bytes removed."""

    pid: int
    name: str
    cmdline: str

    def __str__(self) -> str:
        return f"<Pid:{self.pid}, Name:{self.name}, Cmdline:{self.cmdline}>"


def read_name(path: str) -> str:
    """Return the Name field of a process status file."""
    with open(path, encoding="utf-8", errors="replace", newline="") as fh:
        content = fh.read()
    for line in content.split("\n"):
        key, sep, value = line.partition(":")
        if sep and key.strip() == "Name":
            return value.strip()
    raise ValueError(f"no Name in {path}")


def all_procs() -> list[Proc]:
    """List the processes that have a status file and a non-empty command line."""
    procs: list[Proc] = []
    for entry in files.dirs_under(PROC_ROOT):
        if not _INT_RE.fullmatch(entry):
            continue
        pid = int(entry)
        status_file = f"{PROC_ROOT}/{pid}/status"
        cmdline_file = f"{PROC_ROOT}/{pid}/cmdline"
        if not files.is_exist(status_file) or not files.is_exist(cmdline_file):
            continue
        try:
            name = read_name(status_file)
            with open(cmdline_file, "rb") as fh:
                raw = fh.read()
        except (OSError, ValueError):
            continue
        if not raw:
            continue
        cmdline = raw.replace(b"\0", b"").decode("utf-8", errors="replace")
        procs.append(Proc(pid=pid, name=name, cmdline=cmdline))
    return procs