"""Network interface counters from /proc/net/dev, with link speed and usage."""

from __future__ import annotations

import re
import subprocess
from collections.abc import Iterable
from dataclasses import dataclass

from opskit import sysutil

NET_DEV_PATH = "/proc/net/dev"
SYS_CLASS_NET = "/sys/class/net"

BITS_PER_BYTE = 8
MILLION_BIT = 1000000

_INT_RE = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1

_COUNTER_FIELDS = (
    "in_bytes",
    "in_packages",
    "in_errors",
    "in_dropped",
    "in_fifo_errs",
    "in_frame_errs",
    "in_compressed",
    "in_multicast",
    "out_bytes",
    "out_packages",
    "out_errors",
    "out_dropped",
    "out_fifo_errs",
    "out_collisions",
    "out_carrier_errs",
    "out_compressed",
)


def _parse_int64(text: str) -> int | None:
    if not _INT_RE.fullmatch(text):
        return None
    return min(max(int(text), _INT64_MIN), _INT64_MAX)


def _lines(text: str) -> list[str]:
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line.removesuffix("\r") for line in lines]


@dataclass
class NetIf:
    """Traffic counters of one network interface."""

    iface: str = ""
    in_bytes: int = 0
    in_packages: int = 0
    in_errors: int = 0
    in_dropped: int = 0
    in_fifo_errs: int = 0
    in_frame_errs: int = 0
    in_compressed: int = 0
    in_multicast: int = 0
    out_bytes: int = 0
    out_packages: int = 0
    out_errors: int = 0
    out_dropped: int = 0
    out_fifo_errs: int = 0
    out_collisions: int = 0
    out_carrier_errs: int = 0
    out_compressed: int = 0
    total_bytes: int = 0
    total_packages: int = 0
    total_errors: int = 0
    total_dropped: int = 0
    speed_bits: int = 0
    in_percent: float = 0.0
    out_percent: float = 0.0

    def __str__(self) -> str:
        return f"<Iface:{self.iface},InBytes:{self.in_bytes},InPackages:{self.in_packages}...>"


def parse_net_dev(text: str, only_prefix: Iterable[str] | None = None) -> list[NetIf]:
    """Parse /proc/net/dev text; speed fields are left at zero.

    With ``only_prefix`` non-empty, only interfaces starting with one of the
    prefixes are kept.
    """
    prefixes = tuple(only_prefix or ())
    result: list[NetIf] = []
    for line in _lines(text):
        idx = line.find(":")
        if idx < 0:
            continue
        iface = line[:idx].strip()
        if prefixes and not iface.startswith(prefixes):
            continue
        fields = line[idx + 1 :].split()
        if len(fields) != len(_COUNTER_FIELDS):
            continue
        netif = NetIf(iface=iface)
        for name, raw in zip(_COUNTER_FIELDS, fields):
            value = _parse_int64(raw)
            setattr(netif, name, 0 if value is None else value)
        netif.total_bytes = netif.in_bytes + netif.out_bytes
        netif.total_packages = netif.in_packages + netif.out_packages
        netif.total_errors = netif.in_errors + netif.out_errors
        netif.total_dropped = netif.in_dropped + netif.out_dropped
        result.append(netif)
    return result


def parse_ethtool_speed(output: str) -> int:
    """Return the speed in Mb/s reported by ethtool output, or 0 if unknown."""
    speed_text = ""
    for line in _lines(output):
        line = line.strip("\t")
        if line.startswith("Speed:") and line.endswith("Mb/s"):
            speed_text = line[7 : len(line) - 4]
            break
    value = _parse_int64(speed_text.strip())
    return 0 if value is None else value


def _apply_speed(netif: NetIf, speed: int) -> None:
    if speed == 0:
        netif.speed_bits = 0
        netif.in_percent = 0.0
        netif.out_percent = 0.0
        return
    netif.speed_bits = speed
    netif.in_percent = float(netif.in_bytes * BITS_PER_BYTE) * 100.0 / float(speed)
    netif.out_percent = float(netif.out_bytes * BITS_PER_BYTE) * 100.0 / float(speed)


def _link_speed(iface: str) -> int:
    try:
        with open(f"{SYS_CLASS_NET}/{iface}/speed", encoding="utf-8", errors="replace") as fh:
            content = fh.read()
    except OSError:
        try:
            output = sysutil.cmd_out_bytes("ethtool", iface)
        except (OSError, subprocess.CalledProcessError):
            return 0
        return parse_ethtool_speed(output.decode("utf-8", errors="replace"))
    value = _parse_int64(content.strip())
    return 0 if value is None else value


def net_ifs(only_prefix: Iterable[str] | None = None) -> list[NetIf]:
    """Read interface counters and work out link speed and usage for each."""
    with open(NET_DEV_PATH, encoding="utf-8", errors="replace", newline="") as fh:
        interfaces = parse_net_dev(fh.read(), only_prefix)
    for netif in interfaces:
        _apply_speed(netif, _link_speed(netif.iface))
    return interfaces