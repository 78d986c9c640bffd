"""

Report page layout definition.

Owns the page geometry (page size, margins, header and footer bands,
content area) and the header/footer lines, and renders the header and
footer of any page with page number / page count substitution.

"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, List, Optional, Tuple

from ..engine.geometry import DEFAULT_MARGIN, Margins, Point, Rect, Size
from ..engine.render_tree import DrawingContext, NodeKind, RenderNode
from ..engine.text_metrics import FormattedText, TextMetricsEngine, TypeStyle
from .header_footer import HeaderFooterLine

logger = logging.getLogger(__name__)

# (context, band bounds, zero-based page number)
DrawHeaderOrFooter = Callable[[DrawingContext, Rect, int], None]


class PageLayoutDefinition:
    """

    Page layout definition for a report.

    Header and footer lines are append-only. Every append measures the
    line, grows the band and recomputes the content area, so the geometry
    is always consistent when read.

    ``page_count`` stays 0 until the paginating renderer reads the total
    number of pages on its first page request. Text queried before that
    substitutes "0" for the page count token.

    """

    PAGE_NUMBER_SUBSTITUTION = "{PAGENUMBER}"
    TOTAL_PAGES_SUBSTITUTION = "{PAGECOUNT}"

    def __init__(
        self,
        page_width: float,
        page_height: float,
        left: float = DEFAULT_MARGIN,
        top: float = DEFAULT_MARGIN,
        right: float = DEFAULT_MARGIN,
        bottom: float = DEFAULT_MARGIN,
        *,
        text_metrics: Optional[TextMetricsEngine] = None,
        repeat_table_headers: bool = True,
        draw_header: Optional[DrawHeaderOrFooter] = None,
        draw_footer: Optional[DrawHeaderOrFooter] = None,
    ):
        """

        Args:
        page_width: Physical page width in points
        page_height: Physical page height in points
        left, top, right, bottom: Page margins (default 1 inch)
        text_metrics: Engine used to measure header/footer text
        repeat_table_headers: Repeat a table's header row on continuation pages
        draw_header: Optional custom drawing for the header band (logos etc.)
        draw_footer: Optional custom drawing for the footer band

        """
        self.text_metrics = text_metrics or TextMetricsEngine()
        self.repeat_table_headers = repeat_table_headers
        self.draw_header = draw_header
        self.draw_footer = draw_footer
        self.report_time = datetime.now()
        self.page_count = 0

        self.page_size = Size(float(page_width), float(page_height))
        self.margins = Margins(top=float(top), bottom=float(bottom), left=float(left), right=float(right))
        self.header_height = 0.0
        self.footer_height = 0.0

        self._header_lines: List[HeaderFooterLine] = []
        self._footer_lines: List[HeaderFooterLine] = []

        self._update_geometry()

    @property
    def header_lines(self) -> Tuple[HeaderFooterLine, ...]:
        return tuple(self._header_lines)

    @property
    def footer_lines(self) -> Tuple[HeaderFooterLine, ...]:
        return tuple(self._footer_lines)

    @property
    def content_rect(self) -> Rect:
        return Rect.from_origin(self.content_origin, self.content_size)

    def _update_geometry(self) -> None:
        self.content_size = Size(
            self.page_size.width - self.margins.horizontal,
            self.page_size.height - (self.margins.vertical + self.header_height + self.footer_height),
        )
        self.content_origin = Point(self.margins.left, self.margins.top + self.header_height)
        self.header_rect = Rect(
            self.margins.left, self.margins.top,
            self.content_size.width, self.header_height,
        )
        self.footer_rect = Rect(
            self.margins.left, self.content_origin.y + self.content_size.height,
            self.content_size.width, self.footer_height,
        )

    def add_header_line(self, header_line: HeaderFooterLine) -> None:
        """

        Appends a line to the header and grows the header band.

        Args:
        header_line: The header line layout definition

        """
        self._header_lines.append(header_line)
        header_line.top_offset = self.header_height
        self.header_height += self.measure_line_height(header_line)
        self._update_geometry()
        logger.debug(
            f"Header line {len(self._header_lines)} added at offset {header_line.top_offset:.2f}; "
            f"header height={self.header_height:.2f}, content={self.content_size.width:.2f}x{self.content_size.height:.2f}"
        )

    def add_footer_line(self, footer_line: HeaderFooterLine) -> None:
        """

        Appends a line to the footer and grows the footer band.

        Args:
        footer_line: The footer line layout definition

        """
        self._footer_lines.append(footer_line)
        footer_line.top_offset = self.footer_height
        self.footer_height += self.measure_line_height(footer_line)
        self._update_geometry()
        logger.debug(
            f"Footer line {len(self._footer_lines)} added at offset {footer_line.top_offset:.2f}; "
            f"footer height={self.footer_height:.2f}, content={self.content_size.width:.2f}x{self.content_size.height:.2f}"
        )

    def measure_line_height(self, line: HeaderFooterLine) -> float:
        """Tallest populated segment of the line; empty lines measure 0."""
        height = 0.0
        for _alignment, segment in line.segments():
            measured = self.get_text(segment.type_style, segment.font_size, segment.text, 0)
            height = max(height, measured.line_height + measured.height)
        return height

    def substitute(self, text: str, page_number: int = 0) -> str:
        if self.TOTAL_PAGES_SUBSTITUTION in text and self.page_count == 0:
            logger.debug("Page count substituted before pagination started; using 0")
        return (
            text
            .replace(self.PAGE_NUMBER_SUBSTITUTION, str(page_number + 1))
            .replace(self.TOTAL_PAGES_SUBSTITUTION, str(self.page_count))
        )

    def get_text(self, type_style: TypeStyle, font_size: float, text: str, page_number: int = 0) -> FormattedText:
        """

        Useful for custom drawing into the header/footer, this produces
        measured text with the substitution tokens replaced.

        Args:
        type_style: Type style for the text
        font_size: Font size for the text
        text: The text to render
        page_number: Zero-based page number being rendered

        Returns:
        FormattedText in black, left-to-right

        """
        return self.text_metrics.format_text(self.substitute(text, page_number), type_style, font_size)

    def create_header(self, page_number: int) -> RenderNode:
        return self._create_band(page_number, self._header_lines, self.header_rect, self.draw_header)

    def create_footer(self, page_number: int) -> RenderNode:
        return self._create_band(page_number, self._footer_lines, self.footer_rect, self.draw_footer)

    def _create_band(
        self,
        page_number: int,
        lines: List[HeaderFooterLine],
        band: Rect,
        custom_draw: Optional[DrawHeaderOrFooter],
    ) -> RenderNode:
        visual = RenderNode(NodeKind.DRAWING)
        with visual.render_open() as context:
            for line in lines:
                self._draw_line(context, line, band, page_number)
            if custom_draw is not None:
                custom_draw(context, band, page_number)
        return visual

    def _draw_line(self, context: DrawingContext, line: HeaderFooterLine, band: Rect, page_number: int) -> None:
        top = band.top + line.top_offset
        for alignment, segment in line.segments():
            section = self.get_text(segment.type_style, segment.font_size, segment.text, page_number)
            if alignment == "left":
                left = band.left
            elif alignment == "center":
                left = self.page_size.width / 2 - section.width / 2
            else:
                left = band.right - section.width
            context.draw_text(section, Point(left, top))
