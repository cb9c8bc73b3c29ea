"""CPU facts read from /proc: clock speed and time counters."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field

CPUINFO_PATH = "/proc/cpuinfo"
PROC_STAT_PATH = "/proc/stat"

_UINT_RE = re.compile(r"[0-9]+")
_INT_RE = re.compile(r"[+-]?[0-9]+")
_UINT64_MAX = 2**64 - 1

_CPU_FIELDS = ("user", "nice", "system", "idle", "iowait", "irq", "softirq", "steal", "guest")

_COUNTERS = {
    "ctxt": "ctxt",
    "processes": "processes",
    "procs_running": "procs_running",
    "procs_blocked": "procs_blocked",
}


def _parse_uint(text: str) -> int | None:
    if not _UINT_RE.fullmatch(text):
        return None
    value = int(text)
    return value if value <= _UINT64_MAX else None


def _lines(text: str) -> list[str]:
    return [line.removesuffix("\r") for line in text.split("\n")]


@dataclass
class CpuUsage:
    """Time spent by a CPU in each state, in clock ticks."""

    user: int = 0
    nice: int = 0
    system: int = 0
    idle: int = 0
    iowait: int = 0
    irq: int = 0
    softirq: int = 0
    steal: int = 0
    guest: int = 0
    total: int = 0

    def __str__(self) -> str:
        return (
            f"<User:{self.user}, Nice:{self.nice}, System:{self.system}, Idle:{self.idle}, "
            f"Iowait:{self.iowait}, Irq:{self.irq}, SoftIrq:{self.softirq}, Steal:{self.steal}, "
            f"Guest:{self.guest}, Total:{self.total}>"
        )


@dataclass
class ProcStat:
    """Counters from /proc/stat: all CPUs, each CPU and process activity."""

    cpu: CpuUsage | None = None
    cpus: list[CpuUsage | None] = field(default_factory=list)
    ctxt: int = 0
    processes: int = 0
    procs_running: int = 0
    procs_blocked: int = 0

    def __str__(self) -> str:
        def show(usage: CpuUsage | None) -> str:
            return "<nil>" if usage is None else str(usage)

        cpus = "[" + " ".join(show(usage) for usage in self.cpus) + "]"
        return (
            f"<Cpu:{show(self.cpu)}, Cpus:{cpus}, Ctxt:{self.ctxt}, Processes:{self.processes}, "
            f"ProcsRunning:{self.procs_running}, ProcsBlocking:{self.procs_blocked}>"
        )


def num_cpu() -> int:
    """Return the number of logical CPUs."""
    return os.cpu_count() or 1


def parse_cpu_mhz(text: str) -> str:
    """Return the value of the first line mentioning MHz in cpuinfo text."""
    for line in _lines(text):
        if "MHz" not in line:
            continue
        parts = line.split(":")
        if len(parts) != 2:
            raise ValueError(f"{CPUINFO_PATH} content format error")
        return parts[1].strip()
    raise ValueError(f"no MHz in {CPUINFO_PATH}")


def cpu_mhz(path: str = CPUINFO_PATH) -> str:
    """Return the CPU clock speed in MHz as written in cpuinfo."""
    with open(path, encoding="utf-8", errors="replace", newline="") as fh:
        return parse_cpu_mhz(fh.read())


def _parse_cpu_fields(fields: list[str]) -> CpuUsage:
    usage = CpuUsage()
    for position, raw in enumerate(fields[1:], start=1):
        value = _parse_uint(raw)
        if value is None:
            continue
        usage.total = (usage.total + value) & _UINT64_MAX
        if position <= len(_CPU_FIELDS):
            setattr(usage, _CPU_FIELDS[position - 1], value)
    return usage


def parse_proc_stat(text: str, num_cpus: int) -> ProcStat:
    """Parse /proc/stat text, keeping per-CPU lines for CPUs below ``num_cpus``."""
    stat = ProcStat(cpus=[None] * num_cpus)
    for line in _lines(text):
        fields = line.split()
        if len(fields) < 2:
            continue
        name = fields[0]
        if name == "cpu":
            stat.cpu = _parse_cpu_fields(fields)
            continue
        if name.startswith("cpu"):
            suffix = name[3:]
            if _INT_RE.fullmatch(suffix):
                index = int(suffix)
                if 0 <= index < len(stat.cpus):
                    stat.cpus[index] = _parse_cpu_fields(fields)
            continue
        attr = _COUNTERS.get(name)
        if attr is not None:
            value = _parse_uint(fields[1])
            setattr(stat, attr, 0 if value is None else value)
    return stat


def current_proc_stat(path: str = PROC_STAT_PATH) -> ProcStat:
    """Read and parse the current CPU counters."""
    with open(path, encoding="utf-8", errors="replace", newline="") as fh:
        return parse_proc_stat(fh.read(), num_cpu())