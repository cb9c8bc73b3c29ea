from urllib.parse import parse_qs, urlsplit

import pytest

from opskit import pager


def test_default_per_page():
    p = pager.new_paginator("/list", 0, 30)
    assert p.per_page_nums == pager.DEFAULT_PER_PAGE


@pytest.mark.parametrize("nums", [1, 9, 10, 11, 95, 100, 101])
def test_page_nums_covers_items(nums):
    p = pager.new_paginator("/list", 10, nums)
    count = p.page_nums()
    assert count * 10 >= nums > (count - 1) * 10


def test_max_pages_caps_count():
    p = pager.Paginator("/list", 10, 500, max_pages=3)
    assert p.page_nums() == 3


def test_page_from_query_and_clamping():
    assert pager.new_paginator("/list?page=2", 10, 50).page() == 2
    high = pager.new_paginator("/list?page=999", 10, 50)
    assert high.page() == high.page_nums()
    assert pager.new_paginator("/list?page=abc", 10, 50).page() == 1
    assert pager.new_paginator("/list", 10, 50).page() == 1


def test_pages_small_range():
    p = pager.new_paginator("/list", 10, 30)
    assert p.pages() == list(range(1, p.page_nums() + 1))


@pytest.mark.parametrize("page", [5, 7, 12, 16, 20])
def test_pages_window(page):
    p = pager.new_paginator(f"/list?page={page}", 10, 200)
    pages = p.pages()
    assert len(pages) == pager.WINDOW
    assert pages == list(range(pages[0], pages[0] + pager.WINDOW))
    assert p.page() in pages
    assert 1 <= pages[0] and pages[-1] <= p.page_nums()


def test_pages_empty_without_items():
    p = pager.new_paginator("/list", 10, 0)
    assert p.pages() == []
    assert not p.has_pages()


def test_page_link_first_drops_page():
    p = pager.new_paginator("/list?page=3&q=x", 10, 100)
    assert p.page_link_first() == "/list?q=x"


def test_page_link_sets_page():
    p = pager.new_paginator("/list?q=x&page=3", 10, 100)
    link = p.page_link(4)
    parts = urlsplit(link)
    assert parts.path == "/list"
    assert parse_qs(parts.query) == {"page": ["4"], "q": ["x"]}


def test_prev_and_next_links():
    p = pager.new_paginator("/list?page=3", 10, 100)
    assert parse_qs(urlsplit(p.page_link_prev()).query)["page"] == [str(p.page() - 1)]
    assert parse_qs(urlsplit(p.page_link_next()).query)["page"] == [str(p.page() + 1)]
    assert parse_qs(urlsplit(p.page_link_last()).query)["page"] == [str(p.page_nums())]


def test_first_page_has_no_prev():
    p = pager.new_paginator("/list", 10, 100)
    assert not p.has_prev()
    assert p.page_link_prev() == ""
    assert p.has_next()


def test_last_page_has_no_next():
    p = pager.new_paginator("/list?page=999", 10, 100)
    assert not p.has_next()
    assert p.page_link_next() == ""


def test_offset_and_active():
    p = pager.new_paginator("/list?page=3", 25, 100)
    assert p.offset() == (p.page() - 1) * p.per_page_nums
    assert p.is_active(3)
    assert not p.is_active(2)


def test_set_nums_resets_count():
    p = pager.new_paginator("/list", 10, 0)
    p.set_nums(30)
    assert p.nums == 30