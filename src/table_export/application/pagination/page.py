"""Application pagination – Page and CursorPage, the shapes page fetchers return."""
from __future__ import annotations

import dataclasses
import math
from typing import Generic, Sequence, TypeVar

from table_export.application.pagination.page_request import PageRequest

T = TypeVar("T")


@dataclasses.dataclass(frozen=True)
class Page(Generic[T]):
    """One offset page of records.

    ``total`` may be ``None`` when the backing query does not count rows.
    Such a page is assumed to have a successor whenever it is full.
    """

    items: Sequence[T]
    page: int = 1
    size: int = 100
    total: int | None = None

    @property
    def total_pages(self) -> int | None:
        if self.total is None:
            return None
        if self.total <= 0 or self.size <= 0:
            return 0
        return math.ceil(self.total / self.size)

    @property
    def has_next(self) -> bool:
        if self.total is None:
            return len(self.items) >= self.size
        return self.page * self.size < self.total

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @classmethod
    def of(cls, all_items: Sequence[T], request: PageRequest) -> "Page[T]":
        """Slice an in-memory sequence with *request* (tests, small tables)."""
        start = request.offset
        return cls(
            items=list(all_items[start:start + request.size]),
            page=request.page,
            size=request.size,
            total=len(all_items),
        )


@dataclasses.dataclass(frozen=True)
class CursorPage(Generic[T]):
    """One cursor page; ``next_cursor`` is opaque to the exporter."""

    items: Sequence[T]
    next_cursor: str | None = None
    has_more: bool = False


__all__ = ["CursorPage", "Page"]
