"""Unit tests for the streaming tabular writers."""

from __future__ import annotations

import csv
import io

import pytest
from openpyxl import load_workbook

from table_export.application.export import CsvWriter, XlsxWriter, open_writer
from table_export.config.settings import ExportSettings
from table_export.kernel.errors import ConfigurationError


def _csv_rows(data: bytes) -> list[list[str]]:
    return list(csv.reader(io.StringIO(data.decode("utf-8-sig"))))


def _xlsx_rows(data: bytes) -> list[tuple]:
    workbook = load_workbook(io.BytesIO(data), read_only=True)
    return list(workbook.worksheets[0].iter_rows(values_only=True))


# ---------------------------------------------------------------------------
# CsvWriter
# ---------------------------------------------------------------------------


class TestCsvWriter:
    def test_round_trip(self) -> None:
        out = io.BytesIO()
        writer = CsvWriter(out)
        writer.write_row(["ID", "Email"])
        writer.write_row(["1", "a@x.com"])
        writer.write_row(["2", 'quoted "b", with comma'])
        writer.close()
        assert _csv_rows(out.getvalue()) == [
            ["ID", "Email"],
            ["1", "a@x.com"],
            ["2", 'quoted "b", with comma'],
        ]

    def test_writes_through_per_row(self) -> None:
        out = io.BytesIO()
        writer = CsvWriter(out)
        writer.write_row(["ID"])
        assert out.getvalue() == b"ID\r\n"

    def test_utf8(self) -> None:
        out = io.BytesIO()
        CsvWriter(out).write_row(["Zoë", "日本"])
        assert out.getvalue().decode("utf-8") == "Zoë,日本\r\n"

    def test_bom(self) -> None:
        out = io.BytesIO()
        CsvWriter(out, bom=True).write_row(["ID"])
        assert out.getvalue().startswith(b"\xef\xbb\xbf")

    def test_delimiter(self) -> None:
        out = io.BytesIO()
        CsvWriter(out, delimiter=";").write_row(["a", "b"])
        assert out.getvalue() == b"a;b\r\n"


# ---------------------------------------------------------------------------
# XlsxWriter
# ---------------------------------------------------------------------------


class TestXlsxWriter:
    def test_round_trip(self) -> None:
        out = io.BytesIO()
        writer = XlsxWriter(out, "Users")
        writer.write_row(["ID", "Email"])
        writer.write_row(["1", "a@x.com"])
        writer.close()
        assert _xlsx_rows(out.getvalue()) == [("ID", "Email"), ("1", "a@x.com")]

    def test_header_only(self) -> None:
        out = io.BytesIO()
        writer = XlsxWriter(out)
        writer.write_row(["ID", "Email"])
        writer.close()
        assert _xlsx_rows(out.getvalue()) == [("ID", "Email")]

    def test_sheet_title_and_bold_header(self) -> None:
        out = io.BytesIO()
        writer = XlsxWriter(out, "Users")
        writer.write_row(["ID"])
        writer.write_row(["1"])
        writer.close()
        sheet = load_workbook(io.BytesIO(out.getvalue()))["Users"]
        assert sheet["A1"].font.bold
        assert not sheet["A2"].font.bold

    def test_close_is_idempotent(self) -> None:
        out = io.BytesIO()
        writer = XlsxWriter(out)
        writer.write_row(["ID"])
        writer.close()
        size = len(out.getvalue())
        writer.close()
        assert len(out.getvalue()) == size

    def test_formula_like_text_stays_text(self) -> None:
        out = io.BytesIO()
        writer = XlsxWriter(out)
        writer.write_row(["=Label"])
        writer.write_row(["=SUM(1,2)"])
        writer.close()
        sheet = load_workbook(io.BytesIO(out.getvalue()), data_only=True).worksheets[0]
        assert sheet["A1"].value == "=Label"
        assert sheet["A2"].value == "=SUM(1,2)"
        assert sheet["A2"].data_type == "s"

    def test_control_characters_are_dropped(self) -> None:
        out = io.BytesIO()
        writer = XlsxWriter(out)
        writer.write_row(["Note"])
        writer.write_row(["line\x0bbreak\x00"])
        writer.close()
        assert _xlsx_rows(out.getvalue()) == [("Note",), ("linebreak",)]


# ---------------------------------------------------------------------------
# open_writer
# ---------------------------------------------------------------------------


class TestOpenWriter:
    def test_csv_uses_settings(self) -> None:
        out = io.BytesIO()
        writer = open_writer("csv", out, ExportSettings(csv_delimiter="\t"))
        assert isinstance(writer, CsvWriter)
        writer.write_row(["a", "b"])
        assert out.getvalue() == b"a\tb\r\n"

    def test_xlsx(self) -> None:
        assert isinstance(open_writer("xlsx", io.BytesIO()), XlsxWriter)

    def test_pdf_is_not_tabular(self) -> None:
        with pytest.raises(ConfigurationError):
            open_writer("pdf", io.BytesIO())
