"""Application export – ExportService, the caller-facing entry point."""
from __future__ import annotations

import dataclasses
import time
from typing import Any, Iterator

from table_export.application.export.columns import Column
from table_export.application.export.encoder import ExportEncoder
from table_export.application.export.materializer import Row, materialize
from table_export.application.export.pdf import PdfBackend
from table_export.application.export.projection import resolve
from table_export.application.export.records import RecordIterator, iter_records
from table_export.application.export.request import ExportRequest
from table_export.application.export.stream import ExportStream
from table_export.application.export.templates import TemplateRenderer
from table_export.config.settings import ExportSettings
from table_export.kernel.errors import ExportError
from table_export.observability.logging import get_logger

__all__ = ["ExportResult", "ExportService"]

logger = get_logger(__name__)


@dataclasses.dataclass(frozen=True)
class ExportResult:
    """A finished export handed to the transport: name, type and body."""

    file_name: str
    content_type: str
    stream: ExportStream


class ExportService:
    """Runs one export: resolve columns → materialize rows → encode.

    The service holds no per-export state; one instance can serve any
    number of concurrent requests.
    """

    def __init__(
        self,
        settings: ExportSettings | None = None,
        templates: TemplateRenderer | None = None,
        standard_pdf_backend: PdfBackend | None = None,
        alternate_pdf_backend: PdfBackend | None = None,
    ) -> None:
        self._settings = settings or ExportSettings()
        self._encoder = ExportEncoder(
            self._settings,
            templates=templates,
            standard_pdf_backend=standard_pdf_backend,
            alternate_pdf_backend=alternate_pdf_backend,
        )

    @property
    def settings(self) -> ExportSettings:
        return self._settings

    def resolve_projection(self, request: ExportRequest) -> tuple[Column, ...]:
        return resolve(
            request.columns,
            request.filtered_columns,
            request.additional_columns,
            show_hidden=request.show_hidden_columns,
        )

    def rows(self, request: ExportRequest) -> Iterator[Row]:
        """Lazy materialized rows for *request* (single forward pass)."""
        return materialize(iter_records(request.data), self.resolve_projection(request))

    def export(self, request: ExportRequest) -> ExportResult:
        """Build the download for *request*.

        Column resolution happens now, so a :class:`ProjectionError` is
        raised before any record is pulled.  Everything else happens while
        the returned stream is read.
        """
        projection = self.resolve_projection(request)
        records = iter_records(request.data)
        log = logger.bind(
            export_file=request.output_file_name,
            export_format=request.format.value,
            columns=len(projection),
        )

        stream = self._encoder.encode(
            projection,
            materialize(records, projection),
            request,
            on_close=records.close,
        )
        log.info("export.started")
        return ExportResult(
            file_name=request.output_file_name,
            content_type=request.content_type,
            stream=ExportStream(
                self._observed(stream, records, log),
                on_close=stream.close,
            ),
        )

    def preview_html(self, request: ExportRequest) -> str:
        """Printable HTML table of every row (the print view)."""
        projection = self.resolve_projection(request)
        records = iter_records(request.data)
        try:
            rows = list(materialize(records, projection))
        finally:
            records.close()
        return self._encoder.render_markup(self._settings.print_template, projection, rows, request)

    @staticmethod
    def _observed(stream: ExportStream, records: RecordIterator, log: Any) -> Iterator[bytes]:
        started = time.monotonic()
        try:
            yield from stream
        except ExportError as exc:
            log.error("export.failed", rows=records.pulled, **exc.log_fields())
            raise
        log.info(
            "export.completed",
            rows=records.pulled,
            bytes=stream.bytes_sent,
            duration_ms=round((time.monotonic() - started) * 1000, 2),
        )
