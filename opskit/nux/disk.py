"""Disk facts: mounted file systems, their usage, and block device I/O counters."""

from __future__ import annotations

import math
import os
import re
from dataclasses import dataclass, field
from datetime import datetime

from opskit import files

MOUNTS_PATH = "/proc/mounts"
DISKSTATS_PATH = "/proc/diskstats"

FSSPEC_IGNORE = frozenset({"none", "nodev", "tmpfs", "shm", "proc"})
FSTYPE_IGNORE = frozenset({"cgroup", "debugfs", "devtmpfs", "rpc_pipefs", "rootfs"})
FSFILE_PREFIX_IGNORE = ("/dev", "/sys", "/net", "/misc", "/proc", "/lib")

_UINT_RE = re.compile(r"[0-9]+")
_INT_RE = re.compile(r"[+-]?[0-9]+")
_UINT64_MAX = 2**64 - 1


def _uint(text: str) -> int:
    if not _UINT_RE.fullmatch(text) or int(text) > _UINT64_MAX:
        raise ValueError(f"invalid unsigned integer {text!r}")
    return int(text)


def _int(text: str) -> int:
    if not _INT_RE.fullmatch(text):
        raise ValueError(f"invalid integer {text!r}")
    return int(text)


def ignore_fs_file(fs_file: str) -> bool:
    """Return True if the mount point lies under a system directory."""
    return fs_file.startswith(FSFILE_PREFIX_IGNORE)


@dataclass
class DeviceUsage:
    """Block and inode usage of one mounted file system."""

    fs_spec: str = ""
    fs_file: str = ""
    fs_vfstype: str = ""
    blocks_all: int = 0
    blocks_used: int = 0
    blocks_free: int = 0
    blocks_used_percent: float = 0.0
    blocks_free_percent: float = 0.0
    inodes_all: int = 0
    inodes_used: int = 0
    inodes_free: int = 0
    inodes_used_percent: float = 0.0
    inodes_free_percent: float = 0.0

    def __str__(self) -> str:
        return (
            f"<FsSpec:{self.fs_spec}, FsFile:{self.fs_file}, FsVfstype:{self.fs_vfstype}, "
            f"BPFree:{self.blocks_free_percent:f}...>"
        )


@dataclass
class DiskStats:
    """I/O counters of one block device."""

    major: int
    minor: int
    device: str
    read_requests: int
    read_merged: int
    read_sectors: int
    msec_read: int
    write_requests: int
    write_merged: int
    write_sectors: int
    msec_write: int
    ios_in_progress: int
    msec_total: int
    msec_weighted_total: int
    ts: datetime = field(default_factory=datetime.now)

    def __str__(self) -> str:
        return (
            f"<Device:{self.device}, Major:{self.major}, Minor:{self.minor}, "
            f"ReadRequests:{self.read_requests}...>"
        )


def parse_mounts(text: str) -> list[tuple[str, str, str]]:
    """Return ``(fs_spec, fs_file, fs_vfstype)`` for the mounts worth reporting.

    Pseudo file systems are skipped; a device mounted several times is kept
    once, under its shortest mount point.
    """
    result: list[list[str]] = []
    for line in text.split("\n"):
        fields = line.split()
        if len(fields) < 3:
            continue
        fs_spec, fs_file, fs_vfstype = fields[:3]
        if fs_spec in FSSPEC_IGNORE or fs_vfstype in FSTYPE_IGNORE:
            continue
        if fs_vfstype.startswith("fuse") or ignore_fs_file(fs_file):
            continue
        if fs_spec.startswith("/dev"):
            existing = next((entry for entry in result if entry[0] == fs_spec), None)
            if existing is not None:
                if len(fs_file) < len(existing[1]):
                    existing[1] = fs_file
                continue
        result.append([fs_spec, fs_file, fs_vfstype])
    return [(spec, mount, vfstype) for spec, mount, vfstype in result]


def list_mount_points(path: str = MOUNTS_PATH) -> list[tuple[str, str, str]]:
    """Read and filter the mount table."""
    with open(path, encoding="utf-8", errors="replace", newline="") as fh:
        return parse_mounts(fh.read())


def build_device_usage(fs_spec: str, fs_file: str, fs_vfstype: str) -> DeviceUsage:
    """Measure block and inode usage of the file system mounted at ``fs_file``."""
    st = os.statvfs(fs_file)
    usage = DeviceUsage(fs_spec=fs_spec, fs_file=fs_file, fs_vfstype=fs_vfstype)

    used = st.f_blocks - st.f_bfree
    usage.blocks_all = st.f_frsize * st.f_blocks
    usage.blocks_used = st.f_frsize * used
    usage.blocks_free = st.f_frsize * st.f_bavail
    if st.f_blocks == 0:
        usage.blocks_used_percent = 100.0
    elif used + st.f_bavail == 0:
        usage.blocks_used_percent = math.nan
    else:
        usage.blocks_used_percent = used * 100.0 / (used + st.f_bavail)
    usage.blocks_free_percent = 100.0 - usage.blocks_used_percent

    usage.inodes_all = st.f_files
    usage.inodes_free = st.f_ffree
    usage.inodes_used = st.f_files - st.f_ffree
    if st.f_files == 0:
        usage.inodes_used_percent = 100.0
    else:
        usage.inodes_used_percent = usage.inodes_used * 100.0 / usage.inodes_all
    usage.inodes_free_percent = 100.0 - usage.inodes_used_percent
    return usage


def parse_disk_stats(text: str) -> list[DiskStats]:
    """Parse diskstats text, skipping devices with no reads and other line layouts.

    Raises ValueError on a malformed number.
    """
    result: list[DiskStats] = []
    for line in text.split("\n"):
        fields = line.split()
        if len(fields) < 4 or fields[3] == "0":
            continue
        if len(fields) != 14:
            continue
        counters = [_uint(value) for value in fields[3:]]
        result.append(DiskStats(_int(fields[0]), _int(fields[1]), fields[2], *counters))
    return result


def list_disk_stats(path: str = DISKSTATS_PATH) -> list[DiskStats]:
    """Read the I/O counters of every active block device."""
    if not files.is_exist(path):
        raise FileNotFoundError(f"{path} not exists")
    with open(path, encoding="utf-8", errors="replace", newline="") as fh:
        return parse_disk_stats(fh.read())