"""Application pagination – PageRequest."""
from __future__ import annotations

import dataclasses

MAX_PAGE_SIZE = 1000


@dataclasses.dataclass(frozen=True)
class PageRequest:
    """Offset-based pagination parameters handed to a page fetcher."""
    page: int = 1
    size: int = 100

    def __post_init__(self) -> None:
        if self.page < 1:
            raise ValueError("page must be >= 1")
        if self.size < 1 or self.size > MAX_PAGE_SIZE:
            raise ValueError(f"size must be between 1 and {MAX_PAGE_SIZE}")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.size

    def next(self) -> "PageRequest":
        return dataclasses.replace(self, page=self.page + 1)


__all__ = ["MAX_PAGE_SIZE", "PageRequest"]
