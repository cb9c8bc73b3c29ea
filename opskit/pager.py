"""Pagination over a counted result set, with links built from the request URI."""

from __future__ import annotations

import math
import re
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from opskit import conv

DEFAULT_PER_PAGE = 10
WINDOW = 9

_INT_RE = re.compile(r"[+-]?[0-9]+")


class Paginator:
    """Work out pages for ``nums`` items shown ``per_page_nums`` at a time.

    The current page comes from the ``page`` query parameter of ``request_uri``.
    """

    def __init__(self, request_uri: str, per_page_nums: int = DEFAULT_PER_PAGE, nums=0, max_pages: int = 0) -> None:
        self.request_uri = request_uri
        self.per_page_nums = per_page_nums
        self.max_pages = max_pages
        self._nums = 0
        self._page_range: list[int] | None = None
        self._page_nums = 0
        self._page = 0
        self.set_nums(nums)

    @property
    def nums(self) -> int:
        return self._nums

    def set_nums(self, nums) -> None:
        """Set the item count; a value that is not a number counts as zero."""
        try:
            self._nums = conv.to_int64(nums)
        except (TypeError, ValueError):
            self._nums = 0

    def page_nums(self) -> int:
        """Return the number of pages, capped at ``max_pages`` when that is positive."""
        if self._page_nums != 0:
            return self._page_nums
        count = math.ceil(self._nums / self.per_page_nums)
        if self.max_pages > 0:
            count = min(count, self.max_pages)
        self._page_nums = int(count)
        return self._page_nums

    def _query(self) -> list[tuple[str, str]]:
        return parse_qsl(urlsplit(self.request_uri).query, keep_blank_values=True)

    def page(self) -> int:
        """Return the current page, kept between 1 and the number of pages."""
        if self._page != 0:
            return self._page
        raw = next((value for key, value in self._query() if key == "page"), "")
        page = int(raw) if _INT_RE.fullmatch(raw) else 0
        if page > self.page_nums():
            page = self.page_nums()
        if page <= 0:
            page = 1
        self._page = page
        return page

    def pages(self) -> list[int]:
        """Return up to nine page numbers around the current page."""
        if self._page_range is None and self._nums > 0:
            count = self.page_nums()
            page = self.page()
            if page >= count - 4 and count > WINDOW:
                start = count - WINDOW + 1
                pages = list(range(start, start + WINDOW))
            elif page >= 5 and count > WINDOW:
                start = page - 5 + 1
                pages = list(range(start, start + min(WINDOW, page + 4 + 1)))
            else:
                pages = list(range(1, min(WINDOW, count) + 1))
            self._page_range = pages
        return list(self._page_range or [])

    def page_link(self, page: int) -> str:
        """Return the request URI pointing at ``page``; page 1 drops the parameter."""
        parts = urlsplit(self.request_uri)
        values: dict[str, list[str]] = {}
        for key, value in parse_qsl(parts.query, keep_blank_values=True):
            values.setdefault(key, []).append(value)
        if page == 1:
            values.pop("page", None)
        else:
            values["page"] = [str(page)]
        query = urlencode([(key, values[key]) for key in sorted(values)], doseq=True)
        return urlunsplit((parts.scheme, parts.netloc, parts.path, query, ""))

    def page_link_prev(self) -> str:
        return self.page_link(self.page() - 1) if self.has_prev() else ""

    def page_link_next(self) -> str:
        return self.page_link(self.page() + 1) if self.has_next() else ""

    def page_link_first(self) -> str:
        return self.page_link(1)

    def page_link_last(self) -> str:
        return self.page_link(self.page_nums())

    def has_prev(self) -> bool:
        return self.page() > 1

    def has_next(self) -> bool:
        return self.page() < self.page_nums()

    def is_active(self, page: int) -> bool:
        return self.page() == page

    def offset(self) -> int:
        """Return the index of the first item on the current page."""
        return (self.page() - 1) * self.per_page_nums

    def has_pages(self) -> bool:
        return self.page_nums() > 1


def new_paginator(request_uri: str, per: int, nums) -> Paginator:
    """Build a paginator; ``per`` of zero or less means ten per page."""
    if per <= 0:
        per = DEFAULT_PER_PAGE
    return Paginator(request_uri, per, nums)