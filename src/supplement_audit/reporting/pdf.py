"""PDF rendering of laid-out report documents using ReportLab."""

import logging
from io import BytesIO
from pathlib import Path

from reportlab.lib.colors import HexColor
from reportlab.pdfgen import canvas

from .layout import ReportDocument
from .table import CellInstruction

logger = logging.getLogger(__name__)


class PdfRenderer:
    """
    Draws a ReportDocument onto a ReportLab canvas.

    Layout coordinates are measured downward from the page top; ReportLab
    measures upward from the bottom, so every y is flipped here.
    """

    def __init__(self, title: str | None = None, author: str | None = None) -> None:
        self.title = title
        self.author = author

    def _draw_cell(self, c: canvas.Canvas, cell: CellInstruction, page_height: float) -> None:
        bottom = page_height - (cell.y + cell.height)
        if cell.fill_color:
            c.setFillColor(HexColor(cell.fill_color))
            c.rect(cell.x, bottom, cell.width, cell.height, fill=1, stroke=0)

        c.setFont(cell.font_name, cell.font_size)
        c.setFillColor(HexColor(cell.text_color))
        for index, line in enumerate(cell.lines):
            if not line:
                continue
            baseline = page_height - (
                cell.y + cell.padding + index * cell.line_height + cell.font_size
            )
            if cell.align == "right":
                c.drawRightString(cell.x + cell.width - cell.padding, baseline, line)
            elif cell.align == "center":
                c.drawCentredString(cell.x + cell.width / 2, baseline, line)
            else:
                c.drawString(cell.x + cell.padding, baseline, line)

    def render(self, document: ReportDocument, path: str | Path | None = None) -> bytes:
        """
        Render the document to PDF.

        Args:
            document: A finished document from the layout engine
            path: Optional file path to also write the PDF to

        Returns:
            The PDF file content
        """
        geo = document.geometry
        buffer = BytesIO()
        c = canvas.Canvas(buffer, pagesize=(geo.width, geo.height))
        if self.title:
            c.setTitle(self.title)
        if self.author:
            c.setAuthor(self.author)

        for page in document.pages:
            for block in page.blocks:
                for cell in block.cells:
                    self._draw_cell(c, cell, geo.height)
            c.showPage()
        c.save()

        content = buffer.getvalue()
        if path is not None:
            Path(path).write_bytes(content)
            logger.info("Wrote %d-page report to %s", document.page_count, path)
        return content
