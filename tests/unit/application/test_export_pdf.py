"""Unit tests for the PDF back-ends and the bundled templates."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest
from reportlab.lib.pagesizes import A4, LETTER, landscape

from table_export.application.export import (
    Column,
    Jinja2TemplateRenderer,
    PageOrientation,
    PdfDocument,
    ReportLabBackend,
    WeasyPrintBackend,
)
from table_export.application.export.pdf import page_css
from table_export.kernel.errors import EncodingError


def _weasyprint_available() -> bool:
    try:
        import weasyprint  # noqa: F401, PLC0415
    except (ImportError, OSError):
        return False
    return True


def _document(**overrides) -> PdfDocument:
    values = {
        "markup": "<html><body><table><tr><th>ID</th></tr><tr><td>1</td></tr></table></body></html>",
        "title": "users",
        "headers": ("ID", "Email"),
        "rows": (("1", "a@x.com"), ("2", "b & <c>@x.com")),
    }
    values.update(overrides)
    return PdfDocument(**values)


class TestPageCss:
    def test_portrait(self) -> None:
        assert page_css("a4", PageOrientation.PORTRAIT) == "@page { size: A4 portrait; margin: 12mm; }"

    def test_landscape_from_string(self) -> None:
        assert "LETTER landscape" in page_css("LETTER", "landscape")  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# ReportLab (alternate)
# ---------------------------------------------------------------------------


class TestReportLabBackend:
    def test_renders_pdf(self) -> None:
        data = ReportLabBackend().render(_document())
        assert data.startswith(b"%PDF")

    def test_header_only(self) -> None:
        assert ReportLabBackend().render(_document(rows=())).startswith(b"%PDF")

    def test_empty_projection(self) -> None:
        assert ReportLabBackend().render(_document(headers=(), rows=())).startswith(b"%PDF")

    def test_many_rows_span_pages(self) -> None:
        rows = tuple((str(i), f"user{i}@x.com") for i in range(400))
        assert ReportLabBackend().render(_document(rows=rows)).startswith(b"%PDF")

    def test_page_size(self) -> None:
        backend = ReportLabBackend()
        assert backend._page_size(_document(orientation=PageOrientation.LANDSCAPE)) == landscape(A4)
        assert backend._page_size(_document(paper_size="letter")) == LETTER


# ---------------------------------------------------------------------------
# WeasyPrint (standard)
# ---------------------------------------------------------------------------


class TestWeasyPrintBackend:
    @pytest.mark.skipif(not _weasyprint_available(), reason="WeasyPrint native libraries not installed")
    def test_renders_pdf(self) -> None:
        assert WeasyPrintBackend().render(_document()).startswith(b"%PDF")

    def test_missing_library_message(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setitem(sys.modules, "weasyprint", None)
        with pytest.raises(ImportError, match="alternate back-end"):
            WeasyPrintBackend().render(_document())


# ---------------------------------------------------------------------------
# Templates
# ---------------------------------------------------------------------------


class TestJinja2TemplateRenderer:
    def _context(self) -> dict:
        return {
            "file_name": "users",
            "columns": [Column("id", "ID"), Column("email", "Email")],
            "rows": [{"id": "1", "email": "<a@x.com>"}],
        }

    def test_bundled_pdf_template(self) -> None:
        html = Jinja2TemplateRenderer().render("pdf", self._context())
        assert "<th>ID</th>" in html
        assert "<td>&lt;a@x.com&gt;</td>" in html
        assert "<title>users</title>" in html

    def test_bundled_print_template(self) -> None:
        html = Jinja2TemplateRenderer().render("print", self._context())
        assert "window.print()" in html
        assert "<th>Email</th>" in html

    def test_zero_rows(self) -> None:
        context = self._context() | {"rows": []}
        html = Jinja2TemplateRenderer().render("pdf", context)
        assert "<th>ID</th>" in html
        assert "<td>" not in html

    def test_user_directory_overrides_bundled(self, tmp_path: Path) -> None:
        (tmp_path / "pdf.html.j2").write_text("custom {{ file_name }}", encoding="utf-8")
        assert Jinja2TemplateRenderer(tmp_path).render("pdf", self._context()) == "custom users"
        assert "window.print()" in Jinja2TemplateRenderer(tmp_path).render("print", self._context())

    def test_missing_template(self) -> None:
        with pytest.raises(EncodingError, match="nope"):
            Jinja2TemplateRenderer().render("nope", {})

    def test_syntax_error(self, tmp_path: Path) -> None:
        (tmp_path / "broken.html.j2").write_text("{% for %}", encoding="utf-8")
        with pytest.raises(EncodingError):
            Jinja2TemplateRenderer(tmp_path).render("broken", {})
