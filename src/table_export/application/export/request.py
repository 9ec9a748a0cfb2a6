"""Application export – ExportRequest, ExportFormat, PageOrientation."""
from __future__ import annotations

import dataclasses
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Sequence

from table_export.application.export.columns import Column, ColumnSource
from table_export.application.export.columns import additional_columns as _normalise_additional
from table_export.config.settings import ExportSettings
from table_export.config.settings.export import PAPER_SIZES
from table_export.kernel.errors import ConfigurationError

__all__ = ["ExportFormat", "ExportRequest", "PageOrientation"]

_CONTENT_TYPES = {
    "csv": "text/csv",
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "pdf": "application/pdf",
}


class ExportFormat(str, Enum):
    """Supported download formats."""

    CSV = "csv"
    XLSX = "xlsx"
    PDF = "pdf"

    @property
    def label(self) -> str:
        return self.value.upper()

    @property
    def content_type(self) -> str:
        return _CONTENT_TYPES[self.value]

    @property
    def is_tabular(self) -> bool:
        return self is not ExportFormat.PDF

    @classmethod
    def parse(cls, value: "ExportFormat | str") -> "ExportFormat":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ConfigurationError(
                f"Unsupported export format: {value!r}", field="format", value=value
            ) from None

    @classmethod
    def options(cls) -> dict[str, str]:
        """``{tag: label}`` in display order (XLSX first, like the form)."""
        return {f.value: f.label for f in (cls.XLSX, cls.CSV, cls.PDF)}


class PageOrientation(str, Enum):
    PORTRAIT = "portrait"
    LANDSCAPE = "landscape"

    @property
    def label(self) -> str:
        return self.value.title()

    @classmethod
    def parse(cls, value: "PageOrientation | str") -> "PageOrientation":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ConfigurationError(
                f"Unsupported page orientation: {value!r}", field="page_orientation", value=value
            ) from None

    @classmethod
    def options(cls) -> dict[str, str]:
        return {o.value: o.label for o in cls}


@dataclasses.dataclass(frozen=True)
class ExportRequest:
    """Everything one export needs, fixed before the pipeline starts.

    ``data`` is any iterable of records, a
    :class:`~table_export.application.pagination.Page`, or a
    :class:`~table_export.application.export.records.Paginator` /
    :class:`~table_export.application.export.records.CursorPaginator`.
    Use the ``with_*`` methods to derive a modified copy.
    """

    file_name: str
    format: ExportFormat = ExportFormat.XLSX
    page_orientation: PageOrientation = PageOrientation.PORTRAIT
    columns: ColumnSource | Sequence[Column] = ()
    filtered_columns: frozenset[str] = frozenset()
    additional_columns: tuple[Column, ...] = ()
    show_hidden_columns: bool = False
    data: Any = ()
    extra_view_data: Mapping[str, Any] = dataclasses.field(default_factory=dict)
    use_alternate_pdf_backend: bool = False
    paper_size: str = "A4"

    def __post_init__(self) -> None:
        name = (self.file_name or "").strip()
        if not name:
            raise ConfigurationError("File name must not be empty", field="file_name", value=self.file_name)
        paper = str(self.paper_size).upper()
        if paper not in PAPER_SIZES:
            raise ConfigurationError(
                f"Unsupported paper size: {self.paper_size!r}", field="paper_size", value=self.paper_size
            )

        object.__setattr__(self, "file_name", name)
        object.__setattr__(self, "format", ExportFormat.parse(self.format))
        object.__setattr__(self, "page_orientation", PageOrientation.parse(self.page_orientation))
        object.__setattr__(self, "paper_size", paper)
        object.__setattr__(self, "filtered_columns", frozenset(self.filtered_columns or ()))
        object.__setattr__(self, "additional_columns", _normalise_additional(self.additional_columns))
        object.__setattr__(self, "extra_view_data", MappingProxyType(dict(self.extra_view_data or {})))

    @classmethod
    def make(
        cls,
        settings: ExportSettings | None = None,
        *,
        now: datetime | None = None,
        **fields: Any,
    ) -> "ExportRequest":
        """Start from the configured defaults: a timestamped file name, the
        default format and orientation, and the configured PDF back-end."""
        settings = settings or ExportSettings()
        values: dict[str, Any] = {
            "file_name": (now or datetime.now()).strftime(settings.time_format),
            "format": settings.default_format,
            "page_orientation": settings.default_page_orientation,
            "use_alternate_pdf_backend": settings.use_alternate_pdf_backend,
            "paper_size": settings.paper_size,
        }
        values.update(fields)
        return cls(**values)

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    @property
    def output_file_name(self) -> str:
        return f"{self.file_name}.{self.format.value}"

    @property
    def content_type(self) -> str:
        return self.format.content_type

    # ------------------------------------------------------------------
    # Copy-on-write builders
    # ------------------------------------------------------------------

    def with_file_name(self, file_name: str) -> "ExportRequest":
        return dataclasses.replace(self, file_name=file_name)

    def with_format(self, format: ExportFormat | str) -> "ExportRequest":  # noqa: A002
        return dataclasses.replace(self, format=format)

    def with_page_orientation(self, orientation: PageOrientation | str) -> "ExportRequest":
        return dataclasses.replace(self, page_orientation=orientation)

    def with_columns(self, columns: ColumnSource | Sequence[Column]) -> "ExportRequest":
        return dataclasses.replace(self, columns=columns)

    def with_filtered_columns(self, names: Iterable[str]) -> "ExportRequest":
        return dataclasses.replace(self, filtered_columns=frozenset(names))

    def with_additional_columns(self, columns: Mapping[str, Any] | Iterable[Column]) -> "ExportRequest":
        return dataclasses.replace(self, additional_columns=_normalise_additional(columns))

    def with_hidden_columns(self, show: bool = True) -> "ExportRequest":
        return dataclasses.replace(self, show_hidden_columns=show)

    def with_data(self, data: Any) -> "ExportRequest":
        return dataclasses.replace(self, data=data)

    def with_extra_view_data(self, data: Mapping[str, Any]) -> "ExportRequest":
        return dataclasses.replace(self, extra_view_data=data)

    def with_alternate_pdf_backend(self, enabled: bool = True) -> "ExportRequest":
        return dataclasses.replace(self, use_alternate_pdf_backend=enabled)
