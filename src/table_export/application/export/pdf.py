"""Application export – PDF back-ends.

Two interchangeable back-ends sit behind :class:`PdfBackend`:

* :class:`WeasyPrintBackend` (standard) renders the HTML produced by the
  ``pdf`` template.
* :class:`ReportLabBackend` (alternate) lays the same table out with
  ReportLab platypus, without an HTML engine.
"""
from __future__ import annotations

import dataclasses
from io import BytesIO
from typing import Any, Protocol, Sequence

from markupsafe import escape
from reportlab.lib import colors
from reportlab.lib.pagesizes import A3, A4, A5, LEGAL, LETTER, landscape, portrait
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from table_export.application.export.request import PageOrientation

__all__ = [
    "PAGE_SIZES",
    "PdfBackend",
    "PdfDocument",
    "ReportLabBackend",
    "WeasyPrintBackend",
    "page_css",
]

PAGE_SIZES: dict[str, tuple[float, float]] = {
    "A3": A3,
    "A4": A4,
    "A5": A5,
    "LETTER": LETTER,
    "LEGAL": LEGAL,
}

_HEADER_BG = colors.HexColor("#F1F5F9")
_BORDER = colors.HexColor("#CBD5E1")
_MARGIN = 12 * mm


@dataclasses.dataclass(frozen=True)
class PdfDocument:
    """What a back-end needs to produce one PDF."""

    markup: str
    title: str
    headers: tuple[str, ...]
    rows: tuple[tuple[str, ...], ...]
    paper_size: str = "A4"
    orientation: PageOrientation = PageOrientation.PORTRAIT


class PdfBackend(Protocol):
    """Port: turn a :class:`PdfDocument` into PDF bytes."""

    def render(self, document: PdfDocument) -> bytes: ...


def page_css(paper_size: str, orientation: PageOrientation) -> str:
    """CSS ``@page`` rule fixing the physical page format."""
    return f"@page {{ size: {paper_size.upper()} {PageOrientation.parse(orientation).value}; margin: 12mm; }}"


def _require_weasyprint() -> Any:
    try:
        import weasyprint  # noqa: PLC0415
    except (ImportError, OSError) as exc:
        raise ImportError(
            "WeasyPrint (and its Pango libraries) is required for the standard PDF back-end. "
            "Install it with: pip install weasyprint, or enable the alternate back-end"
        ) from exc
    return weasyprint


class WeasyPrintBackend:
    """Standard back-end: HTML markup → PDF through WeasyPrint."""

    def __init__(self, base_url: str | None = None) -> None:
        self._base_url = base_url

    def render(self, document: PdfDocument) -> bytes:
        weasyprint = _require_weasyprint()
        html = weasyprint.HTML(string=document.markup, base_url=self._base_url)
        stylesheet = weasyprint.CSS(string=page_css(document.paper_size, document.orientation))
        return html.write_pdf(stylesheets=[stylesheet])


class ReportLabBackend:
    """Alternate back-end: header + rows drawn as a ReportLab table."""

    def __init__(self, font_size: float = 8) -> None:
        self._styles = getSampleStyleSheet()
        self._cell_style = self._styles["BodyText"].clone("ExportCell", fontSize=font_size, leading=font_size + 2)
        self._header_style = self._cell_style.clone("ExportHeader", fontName="Helvetica-Bold")

    def _page_size(self, document: PdfDocument) -> tuple[float, float]:
        size = PAGE_SIZES[document.paper_size.upper()]
        if PageOrientation.parse(document.orientation) is PageOrientation.LANDSCAPE:
            return landscape(size)
        return portrait(size)

    def _paragraphs(self, cells: Sequence[str], style: Any) -> list[Paragraph]:
        return [Paragraph(str(escape(cell)).replace("\n", "<br/>"), style) for cell in cells]

    def render(self, document: PdfDocument) -> bytes:
        buffer = BytesIO()
        pagesize = self._page_size(document)
        doc = SimpleDocTemplate(
            buffer,
            pagesize=pagesize,
            leftMargin=_MARGIN,
            rightMargin=_MARGIN,
            topMargin=_MARGIN,
            bottomMargin=_MARGIN,
            title=document.title,
        )
        story: list[Any] = [
            Paragraph(str(escape(document.title)), self._styles["Heading2"]),
            Spacer(1, 4 * mm),
        ]

        if document.headers:
            data = [self._paragraphs(document.headers, self._header_style)]
            data.extend(self._paragraphs(row, self._cell_style) for row in document.rows)
            width = (pagesize[0] - 2 * _MARGIN) / len(document.headers)
            table = Table(data, colWidths=[width] * len(document.headers), repeatRows=1)
            table.setStyle(TableStyle([
                ("BACKGROUND", (0, 0), (-1, 0), _HEADER_BG),
                ("GRID", (0, 0), (-1, -1), 0.5, _BORDER),
                ("VALIGN", (0, 0), (-1, -1), "TOP"),
            ]))
            story.append(table)

        doc.build(story)
        return buffer.getvalue()
