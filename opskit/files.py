"""File system helpers: paths, directories, reading and writing files."""

from __future__ import annotations

import contextlib
import hashlib
import json
import os
import posixpath
import re
import shutil
import sys
import time
import urllib.error
import urllib.request
from typing import Any, BinaryIO

import yaml

_UINT_RE = re.compile(r"[0-9]+")
_INT_RE = re.compile(r"[+-]?[0-9]+")
_UINT64_MAX = 2**64 - 1
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1
_CHUNK = 64 * 1024


def _clean(path: str) -> str:
    """Lexically clean a slash-separated path; an empty path becomes '.'."""
    if not path:
        return "."
    cleaned = posixpath.normpath(path)
    if cleaned.startswith("//"):
        cleaned = "/" + cleaned.lstrip("/")
    return cleaned


def self_path() -> str:
    """Return the absolute path of the running program."""
    return os.path.abspath(sys.argv[0])


def self_dir() -> str:
    """Return the directory holding the running program."""
    return os.path.dirname(self_path())


def real_path(fp: str) -> str:
    """Return ``fp`` unchanged if absolute, else joined to the working directory."""
    if posixpath.isabs(fp):
        return fp
    return _clean(posixpath.join(os.getcwd(), fp))


def basename(fp: str) -> str:
    """Return the last element of a slash-separated path."""
    if not fp:
        return "."
    stripped = fp.rstrip("/")
    if not stripped:
        return "/"
    return stripped.rsplit("/", 1)[-1]


def dirname(fp: str) -> str:
    """Return everything but the last element of a slash-separated path, cleaned."""
    return _clean(fp[: fp.rfind("/") + 1])


def insure_dir(fp: str) -> None:
    """Create the directory ``fp`` and its parents unless the path exists."""
    if is_exist(fp):
        return
    os.makedirs(fp)


def ensure_dir(fp: str) -> None:
    """Create the directory ``fp`` and its parents if missing."""
    os.makedirs(fp, exist_ok=True)


def ensure_dir_rw(data_dir: str) -> None:
    """Create ``data_dir`` if needed and check that files can be written in it."""
    ensure_dir(data_dir)
    check_file = f"{data_dir}/rw.{time.time_ns()}"
    try:
        with open(check_file, "wb"):
            pass
    except PermissionError as exc:
        raise PermissionError(f"open {data_dir}: rw permission denied") from exc
    with contextlib.suppress(OSError):
        os.remove(check_file)


def is_exist(fp: str) -> bool:
    """Return True if a file or directory exists at ``fp``."""
    return os.path.exists(fp)


def is_file(fp: str) -> bool:
    """Return True if ``fp`` exists and is not a directory."""
    try:
        return not os.path.isdir(fp) and os.path.exists(fp)
    except OSError:
        return False


def unlink(fp: str) -> None:
    """Remove ``fp`` if it exists."""
    if not is_exist(fp):
        return
    os.remove(fp)


def file_mtime(fp: str) -> int:
    """Return the modification time of ``fp`` in Unix seconds."""
    return int(os.stat(fp).st_mtime)


def file_size(fp: str) -> int:
    """Return the size of ``fp`` in bytes."""
    return os.stat(fp).st_size


def _entries(dir_path: str) -> list[os.DirEntry[str]]:
    if not is_exist(dir_path):
        return []
    with os.scandir(dir_path) as it:
        return sorted(it, key=lambda entry: entry.name)


def dirs_under(dir_path: str) -> list[str]:
    """List the names of the directories directly under ``dir_path``, sorted."""
    return [
        entry.name
        for entry in _entries(dir_path)
        if entry.is_dir(follow_symlinks=False) and entry.name not in (".", "..")
    ]


def files_under(dir_path: str) -> list[str]:
    """List the names of the non-directories directly under ``dir_path``, sorted."""
    return [entry.name for entry in _entries(dir_path) if not entry.is_dir(follow_symlinks=False)]


def read_bytes(path: str) -> bytes:
    """Read a whole regular file."""
    if not is_exist(path):
        raise FileNotFoundError(f"{path} not exists")
    if not is_file(path):
        raise IsADirectoryError(f"{path} not file")
    with open(path, "rb") as fh:
        return fh.read()


def read_string(path: str) -> str:
    """Read a whole regular file as UTF-8 text."""
    return read_bytes(path).decode("utf-8", errors="replace")


def read_string_trim(path: str) -> str:
    """Read a whole regular file as text with surrounding whitespace removed."""
    return read_string(path).strip()


def _read_for_parse(path: str) -> bytes:
    try:
        return read_bytes(path)
    except OSError as exc:
        raise OSError(f"cannot read {path}: {exc}") from exc


def read_yaml(path: str) -> Any:
    """Parse a YAML file and return its content."""
    data = _read_for_parse(path)
    try:
        return yaml.safe_load(data)
    except yaml.YAMLError as exc:
        raise ValueError(f"cannot parse {path}: {exc}") from exc


def read_json(path: str) -> Any:
    """Parse a JSON file and return its content."""
    data = _read_for_parse(path)
    try:
        return json.loads(data)
    except (ValueError, UnicodeDecodeError) as exc:
        raise ValueError(f"cannot parse {path}: {exc}") from exc


def write_bytes(path: str, data: bytes) -> int:
    """Write ``data`` to ``path``, creating parent directories; return bytes written."""
    with contextlib.suppress(OSError):
        os.makedirs(dirname(path), exist_ok=True)
    with open(path, "wb") as fh:
        return fh.write(data)


def write_string(path: str, text: str) -> int:
    """Write ``text`` as UTF-8 to ``path``; return bytes written."""
    return write_bytes(path, text.encode("utf-8"))


def download(to_file: str, url: str) -> None:
    """Fetch ``url`` and store the response body in ``to_file``."""
    with open(to_file, "wb") as out:
        try:
            response = urllib.request.urlopen(url)
        except urllib.error.HTTPError as exc:
            response = exc
        with response:
            shutil.copyfileobj(response, out)


def md5(path: str) -> str:
    """Return the hex MD5 digest of a file's content."""
    digest = hashlib.md5()
    with open(path, "rb") as fh:
        for chunk in iter(lambda: fh.read(_CHUNK), b""):
            digest.update(chunk)
    return digest.hexdigest()


def open_log_file(fp: str) -> BinaryIO:
    """Open ``fp`` for appending in binary mode, creating it if needed."""
    fd = os.open(fp, os.O_CREAT | os.O_WRONLY | os.O_APPEND, 0o666)
    return os.fdopen(fd, "ab")


def to_trim_string(path: str) -> str:
    """Read a file as text with surrounding whitespace removed."""
    with open(path, "rb") as fh:
        return fh.read().decode("utf-8", errors="replace").strip()


def to_uint64(path: str) -> int:
    """Read a file holding one unsigned 64-bit decimal integer."""
    content = to_trim_string(path)
    if not _UINT_RE.fullmatch(content):
        raise ValueError(f"invalid unsigned integer {content!r}")
    value = int(content)
    if value > _UINT64_MAX:
        raise ValueError(f"value out of range {content!r}")
    return value


def to_int64(path: str) -> int:
    """Read a file holding one signed 64-bit decimal integer."""
    content = to_trim_string(path)
    if not _INT_RE.fullmatch(content):
        raise ValueError(f"invalid integer {content!r}")
    value = int(content)
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise ValueError(f"value out of range {content!r}")
    return value