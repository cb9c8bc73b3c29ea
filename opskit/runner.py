"""Process start-up: logging format, host facts and random seeding."""

from __future__ import annotations

import logging
import os
import random
import socket
import time
import zlib
from dataclasses import dataclass

from opskit import files


@dataclass(frozen=True)
class RuntimeInfo:
    """Facts about the running program gathered at start-up."""

    hostname: str
    cwd: str


current: RuntimeInfo | None = None


def init() -> RuntimeInfo:
    """Configure logging, record the host name and program directory, seed random."""
    global current
    logging.basicConfig(
        format="%(asctime)s %(filename)s:%(lineno)d: %(message)s",
        datefmt="%Y/%m/%d %H:%M:%S",
    )
    try:
        hostname = socket.gethostname()
    except OSError as exc:
        raise SystemExit("[F] cannot get hostname") from exc
    cwd = files.self_dir()
    random.seed(
        time.time_ns() + os.getpid() + os.getppid() + zlib.crc32(hostname.encode("utf-8"))
    )
    current = RuntimeInfo(hostname=hostname, cwd=cwd)
    return current