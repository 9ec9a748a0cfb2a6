"""Application export – ExportEncoder dispatches rows to the format encoders."""
from __future__ import annotations

import io
from typing import Any, Callable, Iterable, Iterator, Mapping, Sequence

from table_export.application.export.columns import Column
from table_export.application.export.pdf import PdfBackend, PdfDocument, ReportLabBackend, WeasyPrintBackend
from table_export.application.export.request import ExportFormat, ExportRequest
from table_export.application.export.stream import ExportStream
from table_export.application.export.templates import Jinja2TemplateRenderer, TemplateRenderer
from table_export.application.export.writers import open_writer
from table_export.config.settings import ExportSettings
from table_export.kernel.errors import ConfigurationError, EncodingError, ExportError

__all__ = ["ExportEncoder"]

Row = Mapping[str, str]
ChunkEncoder = Callable[[Sequence[Column], Iterable[Row], ExportRequest], Iterator[bytes]]


class ExportEncoder:
    """Serialises a projection plus materialized rows into an :class:`ExportStream`.

    ``csv`` and ``xlsx`` go through a streaming :class:`TabularWriter`;
    ``pdf`` renders the ``pdf`` template and hands it to the standard or the
    alternate :class:`PdfBackend`.
    """

    def __init__(
        self,
        settings: ExportSettings | None = None,
        templates: TemplateRenderer | None = None,
        standard_pdf_backend: PdfBackend | None = None,
        alternate_pdf_backend: PdfBackend | None = None,
    ) -> None:
        self._settings = settings or ExportSettings()
        self._templates = templates or Jinja2TemplateRenderer(self._settings.templates_dir or None)
        self._standard_pdf = standard_pdf_backend or WeasyPrintBackend()
        self._alternate_pdf = alternate_pdf_backend or ReportLabBackend()
        self._encoders: dict[ExportFormat, ChunkEncoder] = {
            ExportFormat.CSV: self._tabular_chunks,
            ExportFormat.XLSX: self._tabular_chunks,
            ExportFormat.PDF: self._pdf_chunks,
        }

    @property
    def templates(self) -> TemplateRenderer:
        return self._templates

    def encode(
        self,
        projection: Sequence[Column],
        rows: Iterable[Row],
        request: ExportRequest,
        *,
        on_close: Callable[[], None] | None = None,
    ) -> ExportStream:
        """Return a lazy stream; nothing is pulled from *rows* until it is read."""
        encoder = self._encoders.get(request.format)
        if encoder is None:
            raise ConfigurationError(
                f"No encoder registered for {request.format!r}", field="format", value=request.format
            )
        chunks = self._guarded(encoder, projection, rows, request)
        return ExportStream(chunks, on_close=on_close)

    def render_markup(
        self,
        template_name: str,
        projection: Sequence[Column],
        rows: Sequence[Row],
        request: ExportRequest,
    ) -> str:
        """Render *template_name* with ``file_name``, ``columns`` and ``rows``;
        ``request.extra_view_data`` is merged last and wins on collisions."""
        context: dict[str, Any] = {
            "file_name": request.file_name,
            "columns": list(projection),
            "rows": rows,
        }
        context.update(request.extra_view_data)
        return self._templates.render(template_name, context)

    # ------------------------------------------------------------------
    # Encoders
    # ------------------------------------------------------------------

    def _guarded(
        self,
        encoder: ChunkEncoder,
        projection: Sequence[Column],
        rows: Iterable[Row],
        request: ExportRequest,
    ) -> Iterator[bytes]:
        try:
            yield from encoder(projection, rows, request)
        except ExportError:
            raise
        except Exception as exc:
            raise EncodingError(
                f"Failed to encode {request.output_file_name}: {exc}",
                format=request.format.value,
                cause=exc,
            ) from exc
        finally:
            close = getattr(rows, "close", None)
            if close is not None:
                close()

    def _tabular_chunks(
        self,
        projection: Sequence[Column],
        rows: Iterable[Row],
        request: ExportRequest,
    ) -> Iterator[bytes]:
        buffer = io.BytesIO()
        writer = open_writer(request.format, buffer, self._settings)

        writer.write_row([column.label for column in projection])
        yield from self._drain(buffer)

        for row in rows:
            writer.write_row([row.get(column.name, "") for column in projection])
            yield from self._drain(buffer)

        writer.close()
        yield from self._drain(buffer)

    def _pdf_chunks(
        self,
        projection: Sequence[Column],
        rows: Iterable[Row],
        request: ExportRequest,
    ) -> Iterator[bytes]:
        materialized = list(rows)
        markup = self.render_markup(self._settings.pdf_template, projection, materialized, request)
        document = PdfDocument(
            markup=markup,
            title=request.file_name,
            headers=tuple(column.label for column in projection),
            rows=tuple(tuple(row.get(column.name, "") for column in projection) for row in materialized),
            paper_size=request.paper_size,
            orientation=request.page_orientation,
        )
        backend = self._alternate_pdf if request.use_alternate_pdf_backend else self._standard_pdf
        data = backend.render(document)

        size = self._settings.chunk_size
        for start in range(0, len(data), size):
            yield data[start:start + size]

    def _drain(self, buffer: io.BytesIO) -> Iterator[bytes]:
        data = buffer.getvalue()
        if not data:
            return
        buffer.seek(0)
        buffer.truncate()
        size = self._settings.chunk_size
        for start in range(0, len(data), size):
            yield data[start:start + size]
