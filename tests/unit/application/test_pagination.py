"""Unit tests for pagination primitives."""

from __future__ import annotations

import pytest

from table_export.application.pagination import MAX_PAGE_SIZE, CursorPage, Page, PageRequest


# ---------------------------------------------------------------------------
# PageRequest
# ---------------------------------------------------------------------------


class TestPageRequest:
    def test_defaults(self) -> None:
        pr = PageRequest()
        assert pr.page == 1
        assert pr.size == 100

    def test_offset(self) -> None:
        assert PageRequest(page=3, size=10).offset == 20  # (3-1)*10

    def test_page_zero_raises(self) -> None:
        with pytest.raises(ValueError):
            PageRequest(page=0)

    def test_size_zero_raises(self) -> None:
        with pytest.raises(ValueError):
            PageRequest(size=0)

    def test_size_max_raises(self) -> None:
        with pytest.raises(ValueError):
            PageRequest(size=MAX_PAGE_SIZE + 1)

    def test_next_keeps_size(self) -> None:
        nxt = PageRequest(page=2, size=5).next()
        assert nxt == PageRequest(page=3, size=5)


# ---------------------------------------------------------------------------
# Page
# ---------------------------------------------------------------------------


class TestPage:
    def test_of_slices_items(self) -> None:
        page = Page.of(list(range(100)), PageRequest(page=2, size=10))
        assert page.items == list(range(10, 20))
        assert page.total == 100
        assert page.page == 2

    def test_total_pages(self) -> None:
        assert Page.of(list(range(25)), PageRequest(page=1, size=10)).total_pages == 3

    def test_total_pages_exact_division(self) -> None:
        assert Page.of(list(range(20)), PageRequest(page=1, size=10)).total_pages == 2

    def test_has_next(self) -> None:
        assert Page.of(list(range(25)), PageRequest(page=1, size=10)).has_next

    def test_no_next_on_last_page(self) -> None:
        assert not Page.of(list(range(25)), PageRequest(page=3, size=10)).has_next

    def test_has_previous(self) -> None:
        assert Page.of(list(range(25)), PageRequest(page=2, size=10)).has_previous
        assert not Page.of(list(range(25)), PageRequest(page=1, size=10)).has_previous

    def test_empty(self) -> None:
        page = Page.of([], PageRequest())
        assert page.items == []
        assert page.total_pages == 0
        assert not page.has_next

    def test_unknown_total_full_page_has_next(self) -> None:
        page = Page(items=[1, 2, 3], page=1, size=3)
        assert page.total_pages is None
        assert page.has_next

    def test_unknown_total_short_page_is_last(self) -> None:
        assert not Page(items=[1, 2], page=4, size=3).has_next


# ---------------------------------------------------------------------------
# CursorPage
# ---------------------------------------------------------------------------


class TestCursorPage:
    def test_defaults(self) -> None:
        page = CursorPage(items=[1, 2])
        assert page.next_cursor is None
        assert page.has_more is False

    def test_with_cursor(self) -> None:
        page = CursorPage(items=[1], next_cursor="abc", has_more=True)
        assert page.next_cursor == "abc"
        assert page.has_more
