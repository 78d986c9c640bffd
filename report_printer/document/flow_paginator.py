"""

FlowDocumentPaginator - cuts a FlowDocument into page render trees.

Layout is done once per page size:
- paragraphs are broken into lines (greedy, word by word) and may split
  across pages between lines,
- table rows are atomic; a row that does not fit starts a new page.

Every ``get_page`` call builds a fresh render tree::

    container (page)
      section (body, offset by the page padding)
        paragraph            key=("paragraph", block index)
        table                key=("table", block index)
          row
            cell

On the page where a table starts, the table node's first row is the
table's first row (the header row).

"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field, replace
from typing import Any, List, Optional, Set, Tuple

from ..engine.geometry import Point, Rect, Size
from ..engine.render_tree import NodeKind, RenderNode, Transform
from ..engine.text_metrics import FormattedText, TextMetricsEngine, TypeStyle
from ..exceptions import FontError, LayoutError
from .base import DocumentPaginator
from .flow_document import FlowDocument, Paragraph, Table

logger = logging.getLogger(__name__)

FALLBACK_FONT_FAMILY = "Helvetica"


@dataclass(frozen=True, slots=True)
class _TextProps:
    """Resolved (inherited) text formatting."""

    font_family: str
    font_size: float
    bold: bool = False
    italic: bool = False
    color: str = "black"
    alignment: str = "left"

    def override(self, **values: Any) -> "_TextProps":
        return replace(self, **{key: value for key, value in values.items() if value is not None})


@dataclass(slots=True)
class _Piece:
    text: FormattedText
    x: float


@dataclass(slots=True)
class _Line:
    pieces: List[_Piece]
    width: float
    height: float
    background: Optional[str] = None
    space_after: float = 0.0


@dataclass(slots=True)
class _Cell:
    x: float
    width: float
    padding: float
    lines: List[_Line] = field(default_factory=list)
    background: Optional[str] = None


@dataclass(slots=True)
class _Row:
    cells: List[_Cell]
    height: float
    border_width: float = 0.0
    border_color: str = "black"


@dataclass(slots=True)
class _Placed:
    """Line or row placed on a page at ``y`` (relative to the body)."""

    block_index: int
    y: float
    item: Any
    width: float = 0.0


class FlowDocumentPaginator(DocumentPaginator):
    """Paginator for FlowDocument."""

    def __init__(self, document: FlowDocument, text_metrics: Optional[TextMetricsEngine] = None):
        self._document = document
        self._metrics = text_metrics or TextMetricsEngine()
        self._page_size = Size(document.page_width, document.page_height)
        self._pages: Optional[List[List[_Placed]]] = None
        self._missing_fonts: Set[str] = set()

    @property
    def page_size(self) -> Size:
        return self._page_size

    @page_size.setter
    def page_size(self, value: Size) -> None:
        self._page_size = value
        self._pages = None

    @property
    def page_count(self) -> int:
        return len(self._ensure_layout())

    @property
    def is_page_count_valid(self) -> bool:
        return self._pages is not None

    @property
    def source(self) -> FlowDocument:
        return self._document

    def get_page(self, page_number: int) -> RenderNode:
        pages = self._ensure_layout()
        if not 0 <= page_number < len(pages):
            raise LayoutError("Page number out of range", f"{page_number} not in 0..{len(pages) - 1}")

        padding = self._document.page_padding
        root = RenderNode(NodeKind.CONTAINER)
        body = root.add_child(RenderNode(NodeKind.SECTION, transform=Transform.translate(padding.left, padding.top)))

        for block_index, placed_items in self._group_by_block(pages[page_number]):
            block = self._document.blocks[block_index]
            if isinstance(block, Table):
                body.add_child(self._build_table_node(block_index, placed_items))
            else:
                body.add_child(self._build_paragraph_node(block_index, placed_items))
        return root

    ###########################################################################
    # Layout
    ###########################################################################

    def _content_width(self) -> float:
        padding = self._document.page_padding
        width = self._page_size.width - padding.horizontal
        column_width = self._document.column_width
        if column_width is not None and not math.isinf(column_width):
            width = min(width, column_width)
        return width

    def _content_height(self) -> float:
        return self._page_size.height - self._document.page_padding.vertical

    def _ensure_layout(self) -> List[List[_Placed]]:
        if self._pages is None:
            self._pages = self._format()
        return self._pages

    def _format(self) -> List[List[_Placed]]:
        document = self._document
        width = self._content_width()
        limit = self._content_height()
        base = _TextProps(font_family=document.font_family, font_size=document.font_size)

        pages: List[List[_Placed]] = [[]]
        cursor = 0.0

        def place(block_index: int, item: Any, height: float, space_after: float = 0.0) -> None:
            nonlocal cursor
            if pages[-1] and cursor + height > limit:
                pages.append([])
                cursor = 0.0
            pages[-1].append(_Placed(block_index=block_index, y=cursor, item=item, width=width))
            cursor += height + space_after

        for block_index, block in enumerate(document.blocks):
            if isinstance(block, Table):
                for row in self._layout_table(block, base, width):
                    place(block_index, row, row.height)
            else:
                for line in self._layout_paragraph(block, base, width):
                    place(block_index, line, line.height, line.space_after)

        logger.debug(
            f"Flow document formatted: {len(document.blocks)} blocks -> {len(pages)} pages "
            f"({width:.2f}x{limit:.2f} content)"
        )
        return pages

    def _type_style(self, props: _TextProps) -> TypeStyle:
        style = TypeStyle(
            family=props.font_family,
            weight="bold" if props.bold else "normal",
            style="italic" if props.italic else "normal",
        )
        try:
            self._metrics.resolve_font(style)
        except FontError:
            if props.font_family not in self._missing_fonts:
                self._missing_fonts.add(props.font_family)
                logger.warning(f"Font {props.font_family!r} not available, using {FALLBACK_FONT_FAMILY}")
            style = replace(style, family=FALLBACK_FONT_FAMILY)
        return style

    def _layout_paragraph(self, paragraph: Paragraph, inherited: _TextProps, max_width: float) -> List[_Line]:
        props = inherited.override(
            font_family=paragraph.font_family,
            font_size=paragraph.font_size,
            bold=paragraph.bold,
            italic=paragraph.italic,
            color=paragraph.color,
            alignment=paragraph.text_alignment,
        )
        empty = self._metrics.format_text("", self._type_style(props), props.font_size)
        empty_height = empty.line_height + empty.height

        lines: List[_Line] = []
        pieces: List[_Piece] = []
        cursor = 0.0
        for run in paragraph.inlines:
            run_props = props.override(
                font_family=run.font_family,
                font_size=run.font_size,
                bold=run.bold,
                italic=run.italic,
                color=run.color,
            )
            style = self._type_style(run_props)
            for word in run.text.split():
                text = self._metrics.format_text(word, style, run_props.font_size, run_props.color)
                gap = self._metrics.measure_width(" ", text.font_name, text.font_size) if pieces else 0.0
                if pieces and cursor + gap + text.width > max_width:
                    lines.append(self._finish_line(pieces, cursor, max_width, props.alignment, empty_height))
                    pieces, cursor, gap = [], 0.0, 0.0
                pieces.append(_Piece(text=text, x=cursor + gap))
                cursor += gap + text.width

        if pieces or not lines:
            lines.append(self._finish_line(pieces, cursor, max_width, props.alignment, empty_height))

        for line in lines:
            line.background = paragraph.background
        lines[-1].space_after = paragraph.spacing_after
        return lines

    @staticmethod
    def _finish_line(pieces: List[_Piece], width: float, max_width: float, alignment: str, empty_height: float) -> _Line:
        alignment = (alignment or "left").lower()
        shift = 0.0
        if alignment == "center":
            shift = (max_width - width) / 2
        elif alignment == "right":
            shift = max_width - width
        if shift > 0:
            for piece in pieces:
                piece.x += shift
        height = max((piece.text.line_height + piece.text.height for piece in pieces), default=empty_height)
        return _Line(pieces=list(pieces), width=width, height=height)

    @staticmethod
    def _column_widths(table: Table, available: float) -> List[float]:
        span_count = max((sum(cell.column_span for cell in row.cells) for row in table.rows), default=1)
        columns = list(table.columns)
        if len(columns) < span_count:
            columns.extend([None] * (span_count - len(columns)))
        fixed = sum(width for width in columns if width is not None)
        auto_count = sum(1 for width in columns if width is None)
        share = max(available - fixed, 0.0) / auto_count if auto_count else 0.0
        return [share if width is None else float(width) for width in columns]

    def _layout_table(self, table: Table, inherited: _TextProps, available: float) -> List[_Row]:
        widths = self._column_widths(table, available)
        table_props = inherited.override(alignment=table.text_alignment)

        rows: List[_Row] = []
        for group in table.row_groups:
            group_props = table_props.override(font_size=group.font_size, bold=group.bold, italic=group.italic)
            for row in group.rows:
                cells: List[_Cell] = []
                column = 0
                x = 0.0
                height = 0.0
                for cell in row.cells:
                    span = max(min(cell.column_span, len(widths) - column), 1)
                    width = sum(widths[column:column + span])
                    measured = _Cell(
                        x=x,
                        width=width,
                        padding=cell.padding,
                        background=cell.background or group.background,
                    )
                    inner_width = max(width - 2 * cell.padding, 0.0)
                    for paragraph in cell.blocks:
                        measured.lines.extend(self._layout_paragraph(paragraph, group_props, inner_width))
                    content = sum(line.height + line.space_after for line in measured.lines)
                    height = max(height, content + 2 * cell.padding)
                    cells.append(measured)
                    column += span
                    x += width
                rows.append(_Row(cells=cells, height=height, border_width=table.border_width, border_color=table.border_color))
        return rows

    ###########################################################################
    # Render trees
    ###########################################################################

    @staticmethod
    def _group_by_block(placed: List[_Placed]) -> List[Tuple[int, List[_Placed]]]:
        groups: List[Tuple[int, List[_Placed]]] = []
        for item in placed:
            if groups and groups[-1][0] == item.block_index:
                groups[-1][1].append(item)
            else:
                groups.append((item.block_index, [item]))
        return groups

    @staticmethod
    def _build_paragraph_node(block_index: int, placed: List[_Placed]) -> RenderNode:
        top = placed[0].y
        node = RenderNode(NodeKind.PARAGRAPH, transform=Transform.translate(0.0, top), key=("paragraph", block_index))
        with node.render_open() as context:
            for item in placed:
                line: _Line = item.item
                y = item.y - top
                if line.background:
                    context.draw_rectangle(Rect(0.0, y, item.width, line.height), fill=line.background)
                for piece in line.pieces:
                    context.draw_text(piece.text, Point(piece.x, y))
        return node

    def _build_table_node(self, block_index: int, placed: List[_Placed]) -> RenderNode:
        top = placed[0].y
        table = RenderNode(NodeKind.TABLE, transform=Transform.translate(0.0, top), key=("table", block_index))
        for item in placed:
            table.add_child(self._build_row_node(item.item, item.y - top))
        return table

    @staticmethod
    def _build_row_node(row: _Row, y: float) -> RenderNode:
        row_node = RenderNode(NodeKind.ROW, transform=Transform.translate(0.0, y))
        for cell in row.cells:
            cell_node = row_node.add_child(RenderNode(NodeKind.CELL, transform=Transform.translate(cell.x, 0.0)))
            with cell_node.render_open() as context:
                if cell.background:
                    context.draw_rectangle(Rect(0.0, 0.0, cell.width, row.height), fill=cell.background)
                line_top = cell.padding
                inner_width = max(cell.width - 2 * cell.padding, 0.0)
                for line in cell.lines:
                    if line.background:
                        context.draw_rectangle(Rect(cell.padding, line_top, inner_width, line.height), fill=line.background)
                    for piece in line.pieces:
                        context.draw_text(piece.text, Point(cell.padding + piece.x, line_top))
                    line_top += line.height + line.space_after
                if row.border_width > 0:
                    context.draw_rectangle(
                        Rect(0.0, 0.0, cell.width, row.height),
                        stroke=row.border_color,
                        stroke_width=row.border_width,
                    )
        return row_node
