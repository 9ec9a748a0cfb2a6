"""Application export – streaming tabular writers (CSV, XLSX)."""
from __future__ import annotations

import csv
import io
from typing import IO, Protocol, Sequence

from openpyxl import Workbook
from openpyxl.cell import WriteOnlyCell
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.styles import Font

from table_export.application.export.request import ExportFormat
from table_export.config.settings import ExportSettings
from table_export.kernel.errors import ConfigurationError

__all__ = ["CsvWriter", "TabularWriter", "XlsxWriter", "open_writer"]

_UTF8_BOM = "\ufeff"


class TabularWriter(Protocol):
    """Port: row-at-a-time writer into a binary destination."""

    def write_row(self, cells: Sequence[str]) -> None: ...

    def close(self) -> None: ...


class CsvWriter:
    """Writes each row straight through to *destination* as UTF-8 CSV."""

    def __init__(
        self,
        destination: IO[bytes],
        delimiter: str = ",",
        quoting: int = csv.QUOTE_MINIMAL,
        *,
        bom: bool = False,
    ) -> None:
        self._destination = destination
        self._buffer = io.StringIO()
        self._writer = csv.writer(self._buffer, delimiter=delimiter, quoting=quoting)
        if bom:
            self._buffer.write(_UTF8_BOM)  # BOM for Excel compatibility

    def write_row(self, cells: Sequence[str]) -> None:
        self._writer.writerow(cells)
        self._flush()

    def close(self) -> None:
        self._flush()

    def _flush(self) -> None:
        text = self._buffer.getvalue()
        if text:
            self._destination.write(text.encode("utf-8"))
            self._buffer.seek(0)
            self._buffer.truncate()


class XlsxWriter:
    """Writes rows into a write-only openpyxl workbook.

    Rows are spooled by openpyxl, not kept in memory; the finished workbook
    is written to *destination* on :meth:`close`.  The first row written is
    treated as the header and rendered bold.  Every cell is stored as text,
    never as a formula, with worksheet-illegal control characters removed.
    """

    def __init__(self, destination: IO[bytes], sheet_title: str = "Export") -> None:
        self._destination = destination
        self._workbook = Workbook(write_only=True)
        self._sheet = self._workbook.create_sheet(title=sheet_title[:31])
        self._header_written = False
        self._closed = False

    def write_row(self, cells: Sequence[str]) -> None:
        row = [self._text_cell(value) for value in cells]
        if not self._header_written:
            for cell in row:
                cell.font = Font(bold=True)
            self._header_written = True
        self._sheet.append(row)

    def _text_cell(self, value: str) -> WriteOnlyCell:
        # Worksheets reject XML control characters; a leading "=" must stay text.
        cell = WriteOnlyCell(self._sheet, value=ILLEGAL_CHARACTERS_RE.sub("", value))
        if cell.data_type == "f":
            cell.data_type = "s"
        return cell

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._workbook.save(self._destination)


def open_writer(
    format: ExportFormat | str,  # noqa: A002
    destination: IO[bytes],
    settings: ExportSettings | None = None,
) -> TabularWriter:
    """Return the writer for a tabular *format*.

    Raises
    ------
    ConfigurationError
        For formats that are not tabular (``pdf``) or unknown.
    """
    settings = settings or ExportSettings()
    fmt = ExportFormat.parse(format)
    if fmt is ExportFormat.CSV:
        return CsvWriter(destination, settings.csv_delimiter, bom=settings.csv_bom)
    if fmt is ExportFormat.XLSX:
        return XlsxWriter(destination, settings.xlsx_sheet_title)
    raise ConfigurationError(f"{fmt.label} is not a tabular format", field="format", value=fmt.value)
