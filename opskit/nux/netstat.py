"""Protocol counters, socket summaries and listening ports."""

from __future__ import annotations

import re

from opskit import slices, sysutil

NETSTAT_PATH = "/proc/net/netstat"
SNMP_PATH = "/proc/net/snmp"
SOCKSTAT_PATH = "/proc/net/sockstat"

_SHELL = "sh"

_UINT_RE = re.compile(r"[0-9]+")
_INT_RE = re.compile(r"[+-]?[0-9]+")
_UINT64_MAX = 2**64 - 1
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


def _lines(text: str) -> list[str]:
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line.removesuffix("\r") for line in lines]


def _uint(text: str) -> int:
    if not _UINT_RE.fullmatch(text) or int(text) > _UINT64_MAX:
        raise ValueError(f"invalid unsigned integer {text!r}")
    return int(text)


def _int(text: str) -> int:
    if not _INT_RE.fullmatch(text) or not _INT64_MIN <= int(text) <= _INT64_MAX:
        raise ValueError(f"invalid integer {text!r}")
    return int(text)


def _uint_or_zero(text: str) -> int:
    try:
        return _uint(text)
    except ValueError:
        return 0


def _table(text: str, title: str, parse) -> dict[str, int]:
    """Read the header/value line pair whose title is ``title``."""
    lines = _lines(text)
    for position, line in enumerate(lines):
        idx = line.find(":")
        if idx < 0 or line[:idx].strip() != title:
            continue
        headers = line[idx + 1 :].split()
        if position + 1 >= len(lines):
            raise ValueError(f"no values line after {title}")
        values = lines[position + 1][idx + 1 :].split()
        if len(values) < len(headers):
            raise ValueError(f"fewer values than headers for {title}")
        return {header: parse(value) for header, value in zip(headers, values)}
    return {}


def parse_netstat(text: str, ext: str) -> dict[str, int]:
    """Return the counters of section ``ext`` (e.g. TcpExt or IpExt) of netstat text."""
    return _table(text, ext, _uint)


def netstat(ext: str) -> dict[str, int]:
    with open(NETSTAT_PATH, encoding="utf-8", errors="replace", newline="") as fh:
        return parse_netstat(fh.read(), ext)


def parse_snmp(text: str, title: str) -> dict[str, int]:
    """Return the counters of section ``title`` (e.g. Tcp or Udp) of snmp text."""
    return _table(text, title, _int)


def snmp(title: str) -> dict[str, int]:
    with open(SNMP_PATH, encoding="utf-8", errors="replace", newline="") as fh:
        return parse_snmp(fh.read(), title)


def parse_sockstat(text: str) -> dict[str, int]:
    """Read used sockets, TCP sockets in use and TCP sockets in time-wait."""

    def word(parts: list[str], index: int) -> int:
        return _uint_or_zero(parts[index]) if index < len(parts) else 0

    result: dict[str, int] = {}
    for line in _lines(text):
        parts = line.split(" ")
        if line.startswith("sockets: used"):
            result["sockets.used"] = word(parts, 2)
        else:
            result["sockets.tcp.inuse"] = word(parts, 2)
            result["sockets.tcp.timewait"] = word(parts, 6)
            return result
    raise ValueError(f"no TCP line in {SOCKSTAT_PATH}")


def socket_stat_summary() -> dict[str, int]:
    with open(SOCKSTAT_PATH, encoding="utf-8", errors="replace", newline="") as fh:
        return parse_sockstat(fh.read())


def parse_ss_summary(text: str) -> dict[str, int]:
    """Read the TCP state counts from the output of ``ss -s``."""
    lines = _lines(text)
    if not lines:
        raise ValueError("empty ss output")
    result: dict[str, int] = {}
    for line in lines[1:]:
        if not line.startswith("TCP"):
            continue
        left = line.find("(")
        right = line.find(")")
        if left < 0 or right < 0:
            continue
        for item in line[left + 1 : right].split(", "):
            fields = item.split()
            if not fields:
                continue
            value = fields[1] if len(fields) > 1 else ""
            if fields[0] == "timewait":
                parts = value.split("/")
                result["timewait"] = _uint_or_zero(parts[0])
                result["slabinfo.timewait"] = _uint_or_zero(parts[1]) if len(parts) > 1 else 0
                continue
            result[fields[0]] = _uint_or_zero(value)
        return result
    raise ValueError("no TCP line in ss output")


def ss_summary() -> dict[str, int]:
    output = sysutil.cmd_out_bytes(_SHELL, "-c", "ss -s")
    return parse_ss_summary(output.decode("utf-8", errors="replace"))


def parse_listening_ports(output: str) -> list[int]:
    """Return the distinct local ports listed in ``ss`` output, header skipped."""
    lines = _lines(output)
    if not lines:
        raise ValueError("empty ss output")
    ports: list[int] = []
    for line in lines[1:]:
        fields = line.split()
        if len(fields) not in (4, 5):
            raise ValueError(f"output of {_SHELL} format not supported")
        column = fields[3 if len(fields) == 5 else 2]
        port = column[column.rfind(":") + 1 :]
        try:
            ports.append(_int(port))
        except ValueError as exc:
            raise ValueError(f"parse port to int64 fail: {exc}") from exc
    return list(slices.unique(ports))


def _ports(command: str) -> list[int]:
    output = sysutil.cmd_out_bytes(_SHELL, "-c", command)
    return parse_listening_ports(output.decode("utf-8", errors="replace"))


def tcp_ports() -> list[int]:
    """Return the TCP ports being listened on."""
    return _ports("ss -t -l -n")


def udp_ports() -> list[int]:
    """Return the UDP ports with open sockets."""
    return _ports("ss -u -a -n")


def listening_ports() -> list[int]:
    """Return the TCP ports being listened on."""
    return tcp_ports()