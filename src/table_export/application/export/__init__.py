"""Application export – tabular export pipeline (CSV / XLSX / PDF)."""
from table_export.application.export.columns import (
    Column,
    ColumnKind,
    ColumnSource,
    StaticColumnSource,
    additional_columns,
)
from table_export.application.export.request import ExportFormat, ExportRequest, PageOrientation
from table_export.application.export.projection import resolve
from table_export.application.export.records import CursorPaginator, Paginator, iter_records
from table_export.application.export.materializer import cell_value, materialize
from table_export.application.export.writers import CsvWriter, TabularWriter, XlsxWriter, open_writer
from table_export.application.export.templates import Jinja2TemplateRenderer, TemplateRenderer
from table_export.application.export.pdf import PdfBackend, PdfDocument, ReportLabBackend, WeasyPrintBackend
from table_export.application.export.stream import ExportStream
from table_export.application.export.encoder import ExportEncoder
from table_export.application.export.service import ExportResult, ExportService
from table_export.application.export.action import ExportAction, FormField

__all__ = [
    "Column",
    "ColumnKind",
    "ColumnSource",
    "CsvWriter",
    "CursorPaginator",
    "ExportAction",
    "ExportEncoder",
    "ExportFormat",
    "ExportRequest",
    "ExportResult",
    "ExportService",
    "ExportStream",
    "FormField",
    "Jinja2TemplateRenderer",
    "PageOrientation",
    "Paginator",
    "PdfBackend",
    "PdfDocument",
    "ReportLabBackend",
    "StaticColumnSource",
    "TabularWriter",
    "TemplateRenderer",
    "WeasyPrintBackend",
    "XlsxWriter",
    "additional_columns",
    "cell_value",
    "iter_records",
    "materialize",
    "open_writer",
    "resolve",
]
