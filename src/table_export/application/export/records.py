"""Application export – record sources (in-memory, paginated, cursor-based).

Every source is consumed through :func:`iter_records`, an iterator that
pulls lazily and releases the underlying cursor on every exit path:
exhaustion, an error, or ``close()`` from a cancelled download.
"""
from __future__ import annotations

import dataclasses
from typing import Any, Callable, Generic, Iterable, Iterator, TypeVar

from table_export.application.pagination import MAX_PAGE_SIZE, CursorPage, Page, PageRequest
from table_export.kernel.errors import ConfigurationError
from table_export.observability.logging import get_logger

__all__ = ["CursorPaginator", "Paginator", "RecordIterator", "iter_records"]

T = TypeVar("T")

logger = get_logger(__name__)


class _ClosingSource:
    """Mixin: run ``on_close`` at most once."""

    on_close: Callable[[], None] | None
    _closed: bool

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self.on_close is not None:
            self.on_close()


@dataclasses.dataclass
class Paginator(_ClosingSource, Generic[T]):
    """Offset paginator: ``fetch(PageRequest) -> Page`` called page by page.

    ``on_close`` is invoked once iteration ends for any reason, e.g. to
    close a database session or server-side cursor.
    """

    fetch: Callable[[PageRequest], Page[T]]
    page_size: int = 100
    start_page: int = 1
    on_close: Callable[[], None] | None = None
    _closed: bool = dataclasses.field(default=False, init=False, repr=False)

    def __post_init__(self) -> None:
        if not 1 <= self.page_size <= MAX_PAGE_SIZE:
            raise ConfigurationError(
                f"page_size must be between 1 and {MAX_PAGE_SIZE}",
                field="page_size",
                value=self.page_size,
            )
        if self.start_page < 1:
            raise ConfigurationError("start_page must be >= 1", field="start_page", value=self.start_page)

    def __iter__(self) -> Iterator[T]:
        request = PageRequest(page=self.start_page, size=self.page_size)
        try:
            while True:
                page = self.fetch(request)
                logger.debug("records.page_fetched", page=request.page, items=len(page.items))
                yield from page.items
                if not page.items or not page.has_next:
                    return
                request = request.next()
        finally:
            self.close()


@dataclasses.dataclass
class CursorPaginator(_ClosingSource, Generic[T]):
    """Cursor paginator: ``fetch(cursor | None) -> CursorPage``."""

    fetch: Callable[[str | None], CursorPage[T]]
    on_close: Callable[[], None] | None = None
    _closed: bool = dataclasses.field(default=False, init=False, repr=False)

    def __iter__(self) -> Iterator[T]:
        cursor: str | None = None
        try:
            while True:
                page = self.fetch(cursor)
                yield from page.items
                if not page.has_more or page.next_cursor is None:
                    return
                cursor = page.next_cursor
        finally:
            self.close()


class RecordIterator(Iterator[Any]):
    """Lazy iterator over a record source with idempotent :meth:`close`.

    Closing releases the source even when no record was pulled yet, which a
    bare generator cannot guarantee.
    """

    def __init__(self, source: Any) -> None:
        self._source = source
        items: Iterable[Any] = ()
        if isinstance(source, Page):
            items = source.items
        elif source is not None:
            items = source
        self._iterator: Iterator[Any] | None = iter(items)
        self.pulled = 0

    def __iter__(self) -> "RecordIterator":
        return self

    def __next__(self) -> Any:
        if self._iterator is None:
            raise StopIteration
        record = next(self._iterator)
        self.pulled += 1
        return record

    @property
    def closed(self) -> bool:
        return self._iterator is None

    def close(self) -> None:
        if self._iterator is None:
            return
        iterator, self._iterator = self._iterator, None
        close = getattr(iterator, "close", None)
        if close is not None:
            close()
        source_close = getattr(self._source, "close", None)
        if source_close is not None and self._source is not iterator:
            source_close()
        logger.debug("records.closed", pulled=self.pulled)


def iter_records(source: Any) -> RecordIterator:
    """Iterate any supported record source.

    Accepts a :class:`Page`, a :class:`Paginator`, a
    :class:`CursorPaginator` or any other iterable.  ``None`` is an empty
    source.
    """
    return RecordIterator(source)
