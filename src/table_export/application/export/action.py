"""Application export – ExportAction, the user-facing export form flow.

An action owns the per-table configuration (column source, file name
prefix, extra template data, switches from :class:`ExportSettings`) and
turns submitted form data into an :class:`ExportRequest`.  Rendering the
form itself is left to the host UI; :meth:`ExportAction.form_fields`
only describes it.
"""
from __future__ import annotations

import dataclasses
import re
from datetime import datetime
from typing import Any, Callable, Mapping, Sequence

from table_export.application.export.columns import Column, ColumnSource
from table_export.application.export.projection import available_columns
from table_export.application.export.request import ExportFormat, ExportRequest, PageOrientation
from table_export.application.export.service import ExportResult, ExportService
from table_export.config.settings import ExportSettings
from table_export.kernel.errors import ConfigurationError

__all__ = ["FILE_NAME_RULE", "ExportAction", "FormField"]

FILE_NAME_RULE = re.compile(r"[a-zA-Z0-9\s_.\-():]")


@dataclasses.dataclass(frozen=True)
class FormField:
    """UI-neutral description of one export form field."""

    name: str
    default: Any = None
    options: Mapping[str, str] | None = None
    hidden: bool = False
    required: bool = False
    rule: str | None = None
    visible_when: Mapping[str, Any] | None = None


class ExportAction:
    """Header/bulk export action bound to one table."""

    def __init__(
        self,
        columns: ColumnSource | Sequence[Column],
        settings: ExportSettings | None = None,
        *,
        file_name_prefix: str | None = None,
        extra_view_data: Mapping[str, Any] | None = None,
        show_hidden_columns: bool = False,
        service: ExportService | None = None,
        now: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.columns = columns
        self.settings = settings or (service.settings if service is not None else ExportSettings())
        self.file_name_prefix = file_name_prefix
        self.extra_view_data = dict(extra_view_data or {})
        self.show_hidden_columns = show_hidden_columns
        self.service = service or ExportService(self.settings)
        self._now = now

    # ------------------------------------------------------------------
    # Form
    # ------------------------------------------------------------------

    def default_file_name(self) -> str:
        stamp = self._now().strftime(self.settings.time_format)
        if self.file_name_prefix and not self.settings.disable_file_name_prefix:
            return f"{self.file_name_prefix}-{stamp}"
        return stamp

    def column_options(self) -> dict[str, str]:
        """``{name: label}`` for every column the user may pick."""
        return {c.name: c.label for c in available_columns(self.columns, self.show_hidden_columns)}

    def form_fields(self) -> dict[str, FormField]:
        column_options = self.column_options()
        settings = self.settings
        return {
            "file_name": FormField(
                "file_name",
                default=self.default_file_name(),
                hidden=settings.disable_file_name,
                required=True,
                rule=FILE_NAME_RULE.pattern,
            ),
            "format": FormField(
                "format",
                default=settings.default_format,
                options=ExportFormat.options(),
            ),
            "page_orientation": FormField(
                "page_orientation",
                default=settings.default_page_orientation,
                options=PageOrientation.options(),
                visible_when={"format": ExportFormat.PDF.value},
            ),
            "filter_columns": FormField(
                "filter_columns",
                default=list(column_options),
                options=column_options,
                hidden=settings.disable_filter_columns,
            ),
            "additional_columns": FormField(
                "additional_columns",
                default={},
                hidden=settings.disable_additional_columns,
            ),
        }

    def default_form_data(self) -> dict[str, Any]:
        return {name: field.default for name, field in self.form_fields().items()}

    @staticmethod
    def validate_file_name(name: str) -> str:
        if not name or not FILE_NAME_RULE.search(name):
            raise ConfigurationError(
                f"Invalid file name: {name!r}", field="file_name", value=name
            )
        return name

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------

    def build_request(self, records: Any, form_data: Mapping[str, Any] | None = None) -> ExportRequest:
        """Turn submitted form data into a request.

        Values for disabled fields are ignored; missing values fall back to
        the configured defaults.
        """
        data = dict(form_data or {})
        settings = self.settings

        file_name = self.default_file_name()
        if not settings.disable_file_name and data.get("file_name"):
            file_name = str(data["file_name"])

        filtered: Sequence[str] = ()
        if not settings.disable_filter_columns:
            filtered = data.get("filter_columns") or ()

        additional: Mapping[str, Any] = {}
        if not settings.disable_additional_columns:
            additional = data.get("additional_columns") or {}

        return ExportRequest(
            file_name=self.validate_file_name(file_name),
            format=data.get("format") or settings.default_format,
            page_orientation=data.get("page_orientation") or settings.default_page_orientation,
            columns=self.columns,
            filtered_columns=frozenset(filtered),
            additional_columns=additional,
            show_hidden_columns=self.show_hidden_columns,
            data=records,
            extra_view_data=self.extra_view_data,
            use_alternate_pdf_backend=settings.use_alternate_pdf_backend,
            paper_size=settings.paper_size,
        )

    def download(self, records: Any, form_data: Mapping[str, Any] | None = None) -> ExportResult:
        return self.service.export(self.build_request(records, form_data))

    def preview(self, records: Any, form_data: Mapping[str, Any] | None = None) -> str:
        if self.settings.disable_preview:
            raise ConfigurationError("Preview is disabled", field="table_view")
        return self.service.preview_html(self.build_request(records, form_data))
