"""Application pagination – page and cursor primitives used by record sources."""
from table_export.application.pagination.page_request import MAX_PAGE_SIZE, PageRequest
from table_export.application.pagination.page import CursorPage, Page

__all__ = ["MAX_PAGE_SIZE", "CursorPage", "Page", "PageRequest"]
