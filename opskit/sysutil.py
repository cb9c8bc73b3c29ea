"""Running commands, finding processes and inspecting local addresses."""

from __future__ import annotations

import contextlib
import ipaddress
import os
import re
import signal
import socket
import subprocess

import psutil

from opskit import files

PROC_ROOT = "/proc"

_INT_RE = re.compile(r"[+-]?[0-9]+")


def cmd_out_bytes(name: str, *args: str) -> bytes:
    """Run a command and return its combined stdout and stderr.

    Raises subprocess.CalledProcessError on a non-zero exit status.
    """
    completed = subprocess.run(
        [name, *args], stdout=subprocess.PIPE, stderr=subprocess.STDOUT, check=True
    )
    return completed.stdout


def cmd_out_string(name: str, *args: str) -> str:
    """Run a command and return its combined output as text."""
    return cmd_out_bytes(name, *args).decode("utf-8", errors="replace")


def cmd_out_trim(name: str, *args: str) -> str:
    """Run a command and return its combined output with whitespace trimmed."""
    return cmd_out_string(name, *args).strip()


def cmd_run(name: str, *args: str) -> None:
    """Run a command; raise subprocess.CalledProcessError on failure."""
    subprocess.run([name, *args], check=True)


def cmd_run_timeout(timeout: float, name: str, *args: str) -> tuple[str, int | None, bool]:
    """Run a command in its own process group, killing the group after ``timeout`` seconds.

    Returns ``(output, returncode, timed_out)`` where output is combined stdout and stderr.
    """
    proc = subprocess.Popen(
        [name, *args],
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        start_new_session=True,
    )
    try:
        out, _ = proc.communicate(timeout=timeout)
        timed_out = False
    except subprocess.TimeoutExpired:
        with contextlib.suppress(ProcessLookupError):
            os.killpg(proc.pid, signal.SIGKILL)
        out, _ = proc.communicate()
        timed_out = True
    return out.decode("utf-8", errors="replace"), proc.returncode, timed_out


def kill_process_by_cmdline(cmdline: str) -> None:
    """Send SIGKILL to every process whose command line contains ``cmdline``."""
    cmdline = cmdline.strip()
    if not cmdline:
        raise ValueError("cmdline is blank")
    for pid in pids_by_cmdline(cmdline):
        try:
            os.kill(pid, signal.SIGKILL)
        except OSError as exc:
            raise OSError(f"kill -9 {pid} fail: {exc}") from exc


def is_intranet(ip: str) -> bool:
    """Return True if ``ip`` is in one of the private address ranges in use."""
    if ip.startswith(("10.", "100.", "192.168.")):
        return True
    if ip.startswith("172."):
        parts = ip.split(".")
        if len(parts) != 4 or not _INT_RE.fullmatch(parts[1]):
            return False
        return 16 <= int(parts[1]) <= 31
    return False


def intranet_ips() -> list[str]:
    """List the private IPv4 addresses of interfaces that are up."""
    stats = psutil.net_if_stats()
    result: list[str] = []
    for iface, addrs in psutil.net_if_addrs().items():
        iface_stats = stats.get(iface)
        if iface_stats is None or not iface_stats.isup:
            continue
        flags = getattr(iface_stats, "flags", "")
        if "loopback" in flags.split(","):
            continue
        if iface.startswith(("docker", "w-")):
            continue
        for addr in addrs:
            if addr.family != socket.AF_INET:
                continue
            try:
                ip = ipaddress.ip_address(addr.address)
            except ValueError:
                continue
            if ip.is_loopback:
                continue
            text = str(ip)
            if is_intranet(text):
                result.append(text)
    return result


def _quiet_trim(name: str, *args: str) -> str:
    try:
        return cmd_out_trim(name, *args)
    except (OSError, subprocess.CalledProcessError):
        return ""


def local_host_ident() -> str:
    """Return ``<serial>-<hostname>-<intranet ip>`` for this machine."""
    serial = _quiet_trim("/bin/bash", "-c", "dmidecode -s system-serial-number")
    serial = serial.split()[-1] if serial else "nil"
    name = _quiet_trim("hostname")
    try:
        ips = intranet_ips()
    except OSError:
        ips = []
    ip = ips[0] if ips else ""
    return f"{serial}-{name}-{ip}"


def outbound_ipaddr() -> str:
    """Return the local address used for outbound IPv4 traffic, or '' if unknown."""
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
            sock.connect(("1.2.3.4", 56))
            return sock.getsockname()[0]
    except OSError:
        return ""


def pids_by_cmdline(cmdline: str) -> list[int]:
    """Return the pids whose command line, NUL bytes removed, contains ``cmdline``."""
    try:
        dirs = files.dirs_under(PROC_ROOT)
    except OSError:
        return []
    pids: list[int] = []
    for name in dirs:
        if not name.isdigit():
            continue
        pid = int(name)
        cmdline_file = f"{PROC_ROOT}/{pid}/cmdline"
        if not files.is_exist(cmdline_file):
            continue
        try:
            raw = files.read_bytes(cmdline_file)
        except OSError:
            continue
        if not raw:
            continue
        if cmdline in raw.replace(b"\0", b"").decode("utf-8", errors="replace"):
            pids.append(pid)
    return pids