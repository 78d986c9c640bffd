"""
Tests for PaginatingRenderer and the table continuation detection.
"""

import math

import pytest

from report_printer.engine.geometry import Margins, Point, Rect, Size
from report_printer.engine.render_tree import NodeKind, RenderNode, Transform
from report_printer.layout.header_footer import HeaderFooterLine, TextSegment
from report_printer.layout.page_definition import PageLayoutDefinition
from report_printer.layout.paginator import (
    DocumentPage,
    PaginatingRenderer,
    page_ends_with_table,
    page_starts_with_table,
)
from tests.conftest import FakeSource, rows


def continued_table_source():
    """One table running over three pages, framed by paragraphs."""
    return FakeSource([
        [["paragraph", 30]] + rows(0, 0, 5),
        rows(0, 5, 10),
        rows(0, 10, 12) + [["paragraph", 20]],
    ])


def repeated_header_wrapper(page: DocumentPage):
    children = page.visual.children
    return children[3] if len(children) > 3 else None


class TestTreeInspection:
    """Test cases for page_starts_with_table / page_ends_with_table."""

    def build_page(self, *items):
        return FakeSource([list(items)]).document_paginator.get_page(0)

    def test_starts_with_table(self):
        page = self.build_page(*rows(3, 0, 2))

        table = page_starts_with_table(page)

        assert table.kind is NodeKind.TABLE
        assert table.key == ("table", 3)

    def test_does_not_start_with_table(self):
        page = self.build_page(["paragraph", 10], *rows(0, 0, 2))

        assert page_starts_with_table(page) is None

    def test_empty_page(self):
        assert page_starts_with_table(RenderNode()) is None
        assert page_ends_with_table(RenderNode()) is None

    def test_ends_with_table_returns_first_row(self):
        page = self.build_page(["paragraph", 10], *rows(0, 0, 3))

        table, header = page_ends_with_table(page)

        assert table.key == ("table", 0)
        assert header is table.first_child
        assert header.key == ("row", 0, 0)

    def test_trailing_empty_containers_are_skipped(self):
        page = self.build_page(*rows(0, 0, 2))
        page.add_child(RenderNode(NodeKind.CONTAINER))
        page.add_child(RenderNode(NodeKind.CONTAINER))

        table, _header = page_ends_with_table(page)

        assert table.key == ("table", 0)

    def test_non_container_only_follows_last_child(self):
        paragraph = RenderNode(NodeKind.PARAGRAPH)
        table = paragraph.add_child(RenderNode(NodeKind.TABLE))
        table.add_child(RenderNode(NodeKind.ROW))
        paragraph.add_child(RenderNode(NodeKind.DRAWING))

        assert page_ends_with_table(paragraph) is None

    def test_ends_with_paragraph(self):
        page = self.build_page(*rows(0, 0, 2), ["paragraph", 10])

        assert page_ends_with_table(page) is None


class TestSnapshot:
    """Test cases for the document copy used by the renderer."""

    def test_original_document_untouched(self, definition):
        source = continued_table_source()

        renderer = PaginatingRenderer(source, definition)

        assert source.column_width == 300.0
        assert source.page_width == 500.0
        assert source.page_padding == Margins.uniform(10.0)
        assert renderer.source is not source

    def test_copy_is_formatted_to_content_area(self, definition):
        renderer = PaginatingRenderer(continued_table_source(), definition)

        copy = renderer.source
        assert math.isinf(copy.column_width)
        assert copy.page_width == definition.content_size.width
        assert copy.page_height == definition.content_size.height
        assert copy.page_padding == Margins.uniform(0.0)
        assert renderer.page_size == definition.content_size

    def test_forwarded_properties(self, definition):
        renderer = PaginatingRenderer(continued_table_source(), definition)

        assert renderer.page_count == 3
        assert renderer.is_page_count_valid
        renderer.page_size = Size(100, 100)
        assert renderer.page_size == Size(100, 100)


class TestComposition:
    """Test cases for the composed page."""

    def test_page_layers(self, definition):
        renderer = PaginatingRenderer(continued_table_source(), definition)

        page = renderer.get_page(0)

        content, header, footer = page.visual.children
        assert content.transform == Transform.translate(72, 72)
        assert content.first_child.kind is NodeKind.CONTAINER
        assert header.kind is NodeKind.DRAWING
        assert footer.kind is NodeKind.DRAWING
        assert page.size == Size(612, 792)
        assert page.bounds == Rect(0, 0, 612, 792)
        assert page.content_bounds == definition.content_rect

    def test_page_count_latched_on_first_request(self, definition):
        definition.add_footer_line(HeaderFooterLine(right=TextSegment("Page {PAGENUMBER} of {PAGECOUNT}")))
        renderer = PaginatingRenderer(continued_table_source(), definition)
        assert definition.page_count == 0

        page = renderer.get_page(0)

        assert definition.page_count == 3
        footer = page.visual.children[2]
        assert footer.drawings[0].text.text == "Page 1 of 3"

    def test_page_count_latch_is_written_once(self, definition):
        renderer = PaginatingRenderer(continued_table_source(), definition)
        definition.page_count = 99

        renderer.get_page(0)

        assert definition.page_count == 99

    def test_pages_generator(self, definition):
        renderer = PaginatingRenderer(continued_table_source(), definition)

        pages = list(renderer.pages())

        assert len(pages) == 3
        assert all(isinstance(page, DocumentPage) for page in pages)


class TestTableContinuation:
    """Test cases for repeating table headers on continuation pages."""

    def test_header_repeated_on_continuation_page(self, definition):
        renderer = PaginatingRenderer(continued_table_source(), definition)

        first = renderer.get_page(0)
        header = renderer.pending_table_header
        assert header.key == ("row", 0, 0)
        assert repeated_header_wrapper(first) is None

        second = renderer.get_page(1)

        wrapper = repeated_header_wrapper(second)
        assert wrapper is not None
        assert wrapper.first_child is header
        assert header.parent is wrapper

    def test_repeated_header_lands_on_content_top(self, definition):
        definition.add_header_line(HeaderFooterLine(left=TextSegment("Report", font_size=10)))
        renderer = PaginatingRenderer(continued_table_source(), definition)
        renderer.get_page(0)
        header = renderer.pending_table_header
        header_bounds = header.bounds()

        page = renderer.get_page(1)

        origin = definition.content_origin
        wrapper = repeated_header_wrapper(page)
        assert wrapper.transform == Transform.translate(origin.x, origin.y - header_bounds.top)
        placed = wrapper.transform.apply_rect(header.bounds())
        assert placed.top == pytest.approx(origin.y)
        assert placed.left == pytest.approx(origin.x)

    def test_content_is_scaled_below_header(self, definition):
        renderer = PaginatingRenderer(continued_table_source(), definition)
        renderer.get_page(0)

        page = renderer.get_page(1)

        content_height = definition.content_size.height
        origin = definition.content_origin
        expected = Transform.group(
            Transform.scale(1, (content_height - 20) / content_height),
            Transform.translate(origin.x, origin.y + 20),
        )
        content = page.visual.children[0]
        assert content.transform.as_tuple() == pytest.approx(expected.as_tuple())
        assert content.transform.apply(Point(0, 0)).y == pytest.approx(origin.y + 20)
        assert content.transform.apply(Point(0, content_height)).y == pytest.approx(origin.y + content_height)

    def test_header_moves_from_previous_page(self, definition):
        renderer = PaginatingRenderer(continued_table_source(), definition)
        first = renderer.get_page(0)
        body = first.visual.children[0].first_child.first_child
        table = body.last_child

        renderer.get_page(1)

        assert table.first_child.key == ("row", 0, 1)

    def test_same_table_keeps_header(self, definition):
        renderer = PaginatingRenderer(continued_table_source(), definition)
        renderer.get_page(0)
        header = renderer.pending_table_header

        renderer.get_page(1)
        assert renderer.pending_table_header is header

        third = renderer.get_page(2)
        assert repeated_header_wrapper(third).first_child is header
        # Page 3 ends with a paragraph
        assert renderer.pending_table_header is None

    def test_no_repeat_when_previous_page_did_not_end_with_table(self, definition):
        source = FakeSource([
            rows(0, 0, 3) + [["paragraph", 40]],
            rows(1, 3, 6),
        ])
        renderer = PaginatingRenderer(source, definition)

        renderer.get_page(0)
        page = renderer.get_page(1)

        assert repeated_header_wrapper(page) is None
        assert page.visual.children[0].transform == Transform.translate(72, 72)

    def test_no_repeat_when_page_starts_with_paragraph(self, definition):
        source = FakeSource([
            rows(0, 0, 3),
            [["paragraph", 40]] + rows(1, 0, 3),
        ])
        renderer = PaginatingRenderer(source, definition)
        renderer.get_page(0)

        page = renderer.get_page(1)

        assert repeated_header_wrapper(page) is None
        assert renderer.pending_table_header.key == ("row", 1, 0)

    def test_new_table_at_page_end_replaces_header(self, definition):
        source = FakeSource([
            rows(0, 0, 3),
            rows(0, 3, 5) + [["paragraph", 10]] + rows(1, 0, 2),
            rows(1, 2, 4),
        ])
        renderer = PaginatingRenderer(source, definition)
        renderer.get_page(0)

        second = renderer.get_page(1)
        assert repeated_header_wrapper(second).first_child.key == ("row", 0, 0)
        assert renderer.pending_table_header.key == ("row", 1, 0)

        third = renderer.get_page(2)
        assert repeated_header_wrapper(third).first_child.key == ("row", 1, 0)

    def test_disabled_flag(self, definition):
        definition.repeat_table_headers = False
        renderer = PaginatingRenderer(continued_table_source(), definition)

        pages = list(renderer.pages())

        assert all(len(page.visual.children) == 3 for page in pages)
        assert renderer.pending_table_header is None

    def test_first_page_requested_twice(self, definition):
        definition.add_header_line(HeaderFooterLine(left=TextSegment("Report {PAGENUMBER}")))
        definition.add_footer_line(HeaderFooterLine(right=TextSegment("Page {PAGENUMBER} of {PAGECOUNT}")))
        renderer = PaginatingRenderer(continued_table_source(), definition)

        first = renderer.get_page(0)
        again = renderer.get_page(0)

        def drawn(node):
            return [(op.text.text, op.origin) for op in node.drawings]

        assert len(first.visual.children) == len(again.visual.children) == 3
        assert first.visual.children[0].transform == again.visual.children[0].transform
        assert drawn(first.visual.children[1]) == drawn(again.visual.children[1]) == [("Report 1", Point(72, 72))]
        assert drawn(first.visual.children[2]) == drawn(again.visual.children[2])
        assert drawn(again.visual.children[2])[0][0] == "Page 1 of 3"

    def test_skipped_page_drops_pending_header(self, definition):
        renderer = PaginatingRenderer(continued_table_source(), definition)
        renderer.get_page(0)

        page = renderer.get_page(2)

        assert repeated_header_wrapper(page) is None

    def test_empty_header_row(self, definition):
        source = FakeSource([rows(0, 0, 2, height=0), rows(0, 2, 4)])
        renderer = PaginatingRenderer(source, definition)
        renderer.get_page(0)

        page = renderer.get_page(1)

        assert page.visual.children[0].transform.as_tuple() == pytest.approx(
            Transform.translate(72, 72).as_tuple()
        )

    def test_zero_height_content_area(self, fixed_metrics):
        definition = PageLayoutDefinition(612, 144, text_metrics=fixed_metrics)
        assert definition.content_size.height == 0
        renderer = PaginatingRenderer(FakeSource([rows(0, 0, 2), rows(0, 2, 4)]), definition)
        renderer.get_page(0)

        page = renderer.get_page(1)

        assert repeated_header_wrapper(page) is not None
        assert page.visual.children[0].transform.d == pytest.approx(1.0)

    def test_trailing_paragraph_ends_the_run(self, definition):
        source = FakeSource([
            rows(0, 0, 3) + [["paragraph", 10]],
            rows(1, 0, 3),
        ])
        renderer = PaginatingRenderer(source, definition)

        renderer.get_page(0)
        assert renderer.pending_table_header is None

        page = renderer.get_page(1)
        assert repeated_header_wrapper(page) is None
