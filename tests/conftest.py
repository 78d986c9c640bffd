"""
Pytest configuration for report_printer
"""

import json
import logging
import sys
from typing import List, Optional

import pytest

from report_printer.document.base import DocumentPaginator, PaginatorSource
from report_printer.engine.geometry import Margins, Rect, Size
from report_printer.engine.render_tree import NodeKind, RenderNode, Transform
from report_printer.engine.text_metrics import FormattedText, TextMetricsEngine, TypeStyle
from report_printer.layout.page_definition import PageLayoutDefinition


@pytest.fixture(autouse=True)
def configure_logging():
    """Configure logging for tests to avoid file handler issues."""
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(logging.Formatter('%(name)s - %(levelname)s - %(message)s'))

    root_logger.addHandler(console_handler)
    root_logger.setLevel(logging.WARNING)

    yield

    root_logger.handlers.clear()


class FixedMetricsEngine(TextMetricsEngine):
    """
    Deterministic metrics: every character is half the font size wide,
    glyph height equals the font size and the leading is 20% of it.
    """

    def resolve_font(self, type_style: TypeStyle) -> str:
        return "Helvetica"

    def measure_width(self, text: str, font_name: str, font_size: float) -> float:
        return len(text) * font_size * 0.5

    def format_text(self, text, type_style, font_size, color="black") -> FormattedText:
        font_size = float(font_size)
        return FormattedText(
            text=text,
            font_name=self.resolve_font(type_style),
            font_size=font_size,
            width=self.measure_width(text, "Helvetica", font_size),
            height=font_size,
            ascent=font_size * 0.8,
            descent=-font_size * 0.2,
            line_height=font_size * 0.2,
            color=color,
        )


class FakeSource(PaginatorSource):
    """
    Pre-paginated document for pagination tests.

    ``pages`` is a list of pages; every page is a list of items:
    ``["paragraph", height]`` or ``["row", table_index, row_index, height]``.
    """

    def __init__(self, pages: List[list], column_width: Optional[float] = 300.0):
        self.pages = pages
        self.column_width = column_width
        self.page_width = 500.0
        self.page_height = 700.0
        self.page_padding = Margins.uniform(10.0)
        self.load_count = 0

    def save(self) -> str:
        return json.dumps({"pages": self.pages, "column_width": self.column_width})

    @classmethod
    def load(cls, data: str) -> "FakeSource":
        parsed = json.loads(data)
        return cls(parsed["pages"], parsed["column_width"])

    @property
    def document_paginator(self) -> "FakePaginator":
        return FakePaginator(self)


class FakePaginator(DocumentPaginator):
    """Builds a fresh synthetic render tree on every request."""

    def __init__(self, source: FakeSource):
        self._source = source
        self._page_size = Size(source.page_width, source.page_height)
        self.requests: List[int] = []

    @property
    def page_size(self) -> Size:
        return self._page_size

    @page_size.setter
    def page_size(self, value: Size) -> None:
        self._page_size = value

    @property
    def page_count(self) -> int:
        return len(self._source.pages)

    @property
    def is_page_count_valid(self) -> bool:
        return True

    @property
    def source(self) -> FakeSource:
        return self._source

    def get_page(self, page_number: int) -> RenderNode:
        self.requests.append(page_number)
        width = self._page_size.width
        root = RenderNode(NodeKind.CONTAINER)
        body = root.add_child(RenderNode(NodeKind.SECTION))
        y = 0.0
        table = None
        for item in self._source.pages[page_number]:
            if item[0] == "paragraph":
                table = None
                node = body.add_child(RenderNode(NodeKind.PARAGRAPH, transform=Transform.translate(0, y)))
                with node.render_open() as context:
                    context.draw_rectangle(Rect(0, 0, width, item[1]), fill="white")
                y += item[1]
                continue

            _, table_index, row_index, height = item
            if table is None or table.key != ("table", table_index):
                table = body.add_child(
                    RenderNode(NodeKind.TABLE, transform=Transform.translate(0, y), key=("table", table_index))
                )
                table_top = y
            row = table.add_child(RenderNode(NodeKind.ROW, transform=Transform.translate(0, y - table_top)))
            row.key = ("row", table_index, row_index)
            with row.render_open() as context:
                context.draw_rectangle(Rect(0, 0, width, height), fill="lightgray")
            y += height
        return root


def rows(table_index: int, start: int, stop: int, height: float = 20.0) -> list:
    return [["row", table_index, index, height] for index in range(start, stop)]


@pytest.fixture
def fixed_metrics():
    return FixedMetricsEngine()


@pytest.fixture
def definition(fixed_metrics):
    """US Letter definition with default margins and no header/footer lines."""
    return PageLayoutDefinition(612, 792, text_metrics=fixed_metrics)


@pytest.fixture
def temp_dir(tmp_path):
    return tmp_path
