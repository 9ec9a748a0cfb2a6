"""Export pipeline errors.

Every failure of a single export surfaces as exactly one of these. None of
them is retried internally.
"""

from __future__ import annotations

from typing import Any

from table_export.kernel.errors.base import BaseError


class ExportError(BaseError):
    """Base class for all export pipeline failures."""

    default_code = "export_error"


class ConfigurationError(ExportError):
    """The export request is invalid (format, orientation, paper, file name).

    Raised eagerly, before any record is pulled or any byte is written.
    """

    default_code = "export_configuration"

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        value: Any = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.field = field
        self.value = value
        if field is not None:
            self.detail.setdefault("field", field)


class ProjectionError(ExportError):
    """Requested columns cannot be resolved (unknown or duplicate names)."""

    default_code = "export_projection"

    def __init__(self, message: str, *, names: list[str] | None = None, **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.names: list[str] = names or []
        if self.names:
            self.detail.setdefault("names", self.names)


class MaterializationError(ExportError):
    """A column extractor failed for a record; the whole export is aborted."""

    default_code = "export_materialization"

    def __init__(self, column: str, row_index: int, **kwargs: Any) -> None:
        super().__init__(
            f"Failed to evaluate column '{column}' for row {row_index}",
            **kwargs,
        )
        self.column = column
        self.row_index = row_index
        self.detail.setdefault("column", column)
        self.detail.setdefault("row_index", row_index)


class EncodingError(ExportError):
    """A writer, template or PDF back-end failed while producing the file."""

    default_code = "export_encoding"

    def __init__(self, message: str, *, format: str | None = None, **kwargs: Any) -> None:  # noqa: A002
        super().__init__(message, **kwargs)
        self.format = format
        if format is not None:
            self.detail.setdefault("format", format)


class TransportError(ExportError):
    """The receiving side went away mid-stream.

    Treated as cancellation by :meth:`ExportStream.write_to`, never reported.
    """

    default_code = "export_transport"


__all__ = [
    "ConfigurationError",
    "EncodingError",
    "ExportError",
    "MaterializationError",
    "ProjectionError",
    "TransportError",
]
