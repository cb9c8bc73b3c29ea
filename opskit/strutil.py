"""String helpers: parsing lists, encoding, validation and random strings."""

from __future__ import annotations

import base64
import binascii
import hashlib
import random
import re
import string
from collections.abc import Iterable, Mapping

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1
_INT_RE = re.compile(r"[+-]?[0-9]+\Z")

LETTERS = string.ascii_lowercase + string.ascii_uppercase + string.digits
DIGITS = string.digits

IP_RE = re.compile(r"^\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3}\Z", re.ASCII)
MAIL_RE = re.compile(r"\w[-._\w]*@\w[-._\w]*\.\w+", re.ASCII)

DEFAULT_IDENTIFIER_PATTERN = r"^[a-zA-Z0-9\-_.]+\Z"

_DANGEROUS_TOKENS = ("<", ">", "&", "'", '"', "file://", "../")

_EN_SYMBOLS = str.maketrans({"，": ",", "（": "(", "）": ")", "：": ":", "。": "."})


def base64_encode(text: str) -> str:
    """Encode the UTF-8 bytes of ``text`` as standard padded base64."""
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def base64_decode(text: str) -> str:
    """Decode standard padded base64; raise ValueError on malformed input."""
    try:
        raw = base64.b64decode(text, validate=True)
    except binascii.Error as exc:
        raise ValueError(f"illegal base64 data: {exc}") from exc
    return raw.decode("utf-8", errors="replace")


def _parse_int64(text: str) -> int | None:
    if not _INT_RE.match(text):
        return None
    value = int(text)
    if not _INT64_MIN <= value <= _INT64_MAX:
        return None
    return value


def ids_int64(ids: str) -> list[int]:
    """Parse a comma separated list of integers, skipping invalid entries."""
    if not ids:
        return []
    parsed = (_parse_int64(part) for part in ids.split(",") if part)
    return [value for value in parsed if value is not None]


def ids_string(ids: Iterable[int]) -> str:
    """Join integers with commas."""
    return ",".join(str(i) for i in ids)


def keys_of_map(mapping: Mapping[str, object]) -> list[str]:
    """Return the keys of ``mapping`` in sorted order."""
    return sorted(mapping)


def md5(text: str) -> str:
    """Return the hex MD5 digest of the UTF-8 bytes of ``text``."""
    return hashlib.md5(text.encode("utf-8")).hexdigest()


def parse_lines(lines: str) -> list[str]:
    """Split text on any whitespace, returning distinct words in order."""
    normalized = lines.replace("\n\r", "\n").replace("\r", "\n")
    return list(dict.fromkeys(normalized.split()))


def parse_comma(text: str) -> list[str]:
    """Split on ASCII or full-width commas, returning distinct parts in order."""
    return list(dict.fromkeys(text.replace("，", ",").split(",")))


def parse_comma_trim(text: str) -> list[str]:
    """Split on commas, skipping parts that are blank once trimmed.

    Duplicates are detected by the trimmed value against the parts already
    kept; the parts themselves are kept as written.
    """
    seen: set[str] = set()
    result: list[str] = []
    for part in text.replace("，", ",").split(","):
        trimmed = part.strip()
        if not trimmed or trimmed in seen:
            continue
        seen.add(part)
        result.append(part)
    return result


def map_to_list(mapping: Mapping[str, object]) -> list[str]:
    """Return the keys of ``mapping`` as a list."""
    return list(mapping)


def rand_letters(n: int) -> str:
    """Return ``n`` random ASCII letters and digits."""
    return "".join(random.choices(LETTERS, k=n))


def rand_digits(n: int) -> str:
    """Return ``n`` random decimal digits."""
    return "".join(random.choices(DIGITS, k=n))


def is_match(text: str, pattern: str) -> bool:
    """Return True if ``pattern`` matches anywhere in ``text``.

    An invalid pattern never matches.
    """
    try:
        return re.search(pattern, text, re.ASCII) is not None
    except re.error:
        return False


def is_identifier(text: str, pattern: str | None = None) -> bool:
    """Return True if ``text`` is made of letters, digits, '-', '_' and '.'."""
    return is_match(text, pattern if pattern is not None else DEFAULT_IDENTIFIER_PATTERN)


def is_mail(text: str) -> bool:
    """Return True if ``text`` contains something shaped like an e-mail address."""
    return MAIL_RE.search(text) is not None


def is_phone(text: str) -> bool:
    """Return True for 11 digits, or '+' followed by 13 digits."""
    if text.startswith("+"):
        return is_match(text[1:], r"^\d{13}\Z")
    return is_match(text, r"^\d{11}\Z")


def is_ip(text: str) -> bool:
    """Return True if ``text`` looks like a dotted IPv4 address."""
    return IP_RE.match(text) is not None


def dangerous(text: str) -> bool:
    """Return True if ``text`` holds markup or path-traversal characters."""
    return any(token in text for token in _DANGEROUS_TOKENS)


def to_en_symbol(raw: str) -> str:
    """Replace full-width punctuation with its ASCII counterpart."""
    return raw.translate(_EN_SYMBOLS)


def trim_string_slice(raw: Iterable[str] | None) -> list[str]:
    """Strip each string and drop the ones left empty."""
    if raw is None:
        return []
    return [item for item in (s.strip() for s in raw) if item]