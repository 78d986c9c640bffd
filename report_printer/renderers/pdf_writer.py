"""
PDF output for paginated reports.

Pages are painted one at a time, straight from the render trees produced
by ``PaginatingRenderer``. Render trees are y-down (origin at the top-left
corner of the page); the canvas is flipped once per page and text and
images are flipped back locally so they are not mirrored.
"""

from __future__ import annotations

import logging
from io import BytesIO
from pathlib import Path
from typing import BinaryIO, Optional, Union

from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas as pdf_canvas

from ..engine.render_tree import (
    DrawOp,
    EllipseDraw,
    ImageDraw,
    LineDraw,
    RectangleDraw,
    RenderNode,
    TextDraw,
)
from ..exceptions import RenderingError
from ..layout.paginator import DocumentPage, PaginatingRenderer
from ..version import __version__
from .render_utils import to_color

logger = logging.getLogger(__name__)

CanvasTarget = Union[str, Path, BytesIO, BinaryIO]


class PdfReportWriter:
    """Writes every page of a paginating renderer into one PDF file."""

    def __init__(
        self,
        output: CanvasTarget,
        *,
        title: Optional[str] = None,
        author: Optional[str] = None,
        subject: Optional[str] = None,
    ) -> None:
        self.output = output
        self.title = title
        self.author = author
        self.subject = subject

    def write(self, renderer: PaginatingRenderer) -> int:
        """
        Paint all pages of ``renderer`` and save the PDF.

        Args:
            renderer: Paginating renderer to draw

        Returns:
            Number of pages written
        """
        canvas = self._init_canvas(renderer)
        page_count = 0
        for page in renderer.pages():
            self.draw_page(canvas, page)
            canvas.showPage()
            page_count += 1

        canvas.save()
        logger.info(f"PDF written: {page_count} pages -> {self._describe_output()}")
        return page_count

    def draw_page(self, canvas: pdf_canvas.Canvas, page: DocumentPage) -> None:
        width, height = page.size.width, page.size.height
        canvas.setPageSize((width, height))
        canvas.saveState()
        # y-down page coordinates
        canvas.transform(1, 0, 0, -1, 0, height)
        self._draw_node(canvas, page.visual)
        canvas.restoreState()

    # ------------------------------------------------------------------
    # Canvas helpers
    # ------------------------------------------------------------------
    def _init_canvas(self, renderer: PaginatingRenderer) -> pdf_canvas.Canvas:
        page_size = renderer.definition.page_size
        target = self.output if hasattr(self.output, "write") else str(self.output)
        canvas = pdf_canvas.Canvas(target, pagesize=(page_size.width, page_size.height))
        canvas.setCreator(f"report_printer {__version__}")
        if self.title:
            canvas.setTitle(self.title)
        if self.author:
            canvas.setAuthor(self.author)
        if self.subject:
            canvas.setSubject(self.subject)
        return canvas

    def _describe_output(self) -> str:
        if hasattr(self.output, "write"):
            return type(self.output).__name__
        return str(self.output)

    def _draw_node(self, canvas: pdf_canvas.Canvas, node: RenderNode) -> None:
        canvas.saveState()
        if not node.transform.is_identity:
            canvas.transform(*node.transform.as_tuple())
        for op in node.drawings:
            self._draw_op(canvas, op)
        for child in node.children:
            self._draw_node(canvas, child)
        canvas.restoreState()

    def _draw_op(self, canvas: pdf_canvas.Canvas, op: DrawOp) -> None:
        try:
            if isinstance(op, TextDraw):
                self._draw_text(canvas, op)
            elif isinstance(op, RectangleDraw):
                self._draw_shape(canvas, op)
            elif isinstance(op, EllipseDraw):
                self._draw_shape(canvas, op, ellipse=True)
            elif isinstance(op, LineDraw):
                canvas.setStrokeColor(to_color(op.color))
                canvas.setLineWidth(op.width)
                canvas.line(op.start.x, op.start.y, op.end.x, op.end.y)
            elif isinstance(op, ImageDraw):
                self._draw_image(canvas, op)
        except (OSError, TypeError, ValueError, KeyError) as exc:
            raise RenderingError(f"Cannot draw {type(op).__name__}", str(exc)) from exc

    @staticmethod
    def _draw_text(canvas: pdf_canvas.Canvas, op: TextDraw) -> None:
        text = op.text
        if not text.text:
            return
        canvas.saveState()
        canvas.translate(op.origin.x, op.origin.y + text.baseline)
        canvas.scale(1, -1)
        canvas.setFillColor(to_color(text.color))
        canvas.setFont(text.font_name, text.font_size)
        canvas.drawString(0, 0, text.text)
        canvas.restoreState()

    @staticmethod
    def _draw_shape(canvas: pdf_canvas.Canvas, op: Union[RectangleDraw, EllipseDraw], ellipse: bool = False) -> None:
        fill = op.fill is not None
        stroke = op.stroke is not None
        if not (fill or stroke):
            return
        if fill:
            canvas.setFillColor(to_color(op.fill))
        if stroke:
            canvas.setStrokeColor(to_color(op.stroke))
            canvas.setLineWidth(op.stroke_width)
        rect = op.rect
        if ellipse:
            canvas.ellipse(rect.left, rect.top, rect.right, rect.bottom, stroke=int(stroke), fill=int(fill))
        else:
            canvas.rect(rect.x, rect.y, rect.width, rect.height, stroke=int(stroke), fill=int(fill))

    @staticmethod
    def _draw_image(canvas: pdf_canvas.Canvas, op: ImageDraw) -> None:
        image = op.image if isinstance(op.image, ImageReader) else ImageReader(op.image)
        rect = op.rect
        canvas.saveState()
        canvas.translate(rect.left, rect.bottom)
        canvas.scale(1, -1)
        canvas.drawImage(image, 0, 0, width=rect.width, height=rect.height, mask="auto")
        canvas.restoreState()
