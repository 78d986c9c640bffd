"""
Tests for the flow document model and its JSON format.
"""

import json
import math

import pytest

from report_printer.document.flow_document import (
    FORMAT_NAME,
    FlowDocument,
    Paragraph,
    Run,
    Table,
    TableCell,
    TableRow,
    TableRowGroup,
)
from report_printer.document.flow_paginator import FlowDocumentPaginator
from report_printer.engine.geometry import Margins
from report_printer.exceptions import DocumentFormatError


def sample_document():
    document = FlowDocument(font_family="Arial", font_size=11, page_padding=Margins.uniform(36))
    intro = Paragraph(text_alignment="center", spacing_after=6)
    intro.add("Quarterly")
    intro.add(Run(" totals", bold=True, color="#336699"))
    document.add(intro)
    document.add(Table(
        columns=[80.0, None],
        row_groups=[
            TableRowGroup(rows=[TableRow(cells=[TableCell(blocks=[Paragraph([Run("Name")])])])], bold=True),
            TableRowGroup(rows=[TableRow(cells=[TableCell(blocks=[Paragraph([Run("x")])], column_span=2)])]),
        ],
        border_width=0.5,
    ))
    return document


class TestModel:
    """Test cases for the document model classes."""

    def test_paragraph_add(self):
        paragraph = Paragraph()
        run = paragraph.add("plain")
        paragraph.add(Run(" bold", bold=True))

        assert isinstance(run, Run)
        assert paragraph.text == "plain bold"
        assert paragraph.inlines[1].bold is True

    def test_table_rows_flatten_groups(self):
        table = Table(row_groups=[
            TableRowGroup(rows=[TableRow(), TableRow()]),
            TableRowGroup(rows=[TableRow()]),
        ])

        assert len(table.rows) == 3

    def test_document_defaults(self):
        document = FlowDocument()

        assert document.page_width == pytest.approx(612)
        assert document.page_height == pytest.approx(792)
        assert document.page_padding == Margins.uniform(0)
        assert document.column_width is None

    def test_document_paginator(self):
        paginator = sample_document().document_paginator

        assert isinstance(paginator, FlowDocumentPaginator)


class TestSerialization:
    """Test cases for save/load."""

    def test_save_load_preserves_content(self):
        document = sample_document()

        loaded = FlowDocument.load(document.save())

        assert loaded.to_dict() == document.to_dict()
        assert loaded.blocks[0].inlines[1].color == "#336699"
        assert loaded.blocks[1].row_groups[1].rows[0].cells[0].column_span == 2
        assert loaded.page_padding == Margins.uniform(36)

    def test_infinite_column_width(self):
        document = FlowDocument(column_width=math.inf)

        data = document.to_dict()

        assert data["column_width"] is None
        assert json.loads(document.save())["format"] == FORMAT_NAME

    def test_load_is_independent_copy(self):
        document = sample_document()
        loaded = FlowDocument.load(document.save())

        loaded.blocks[0].add("more")
        loaded.page_width = 10

        assert document.blocks[0].text == "Quarterly totals"
        assert document.page_width == pytest.approx(612)

    def test_invalid_json(self):
        with pytest.raises(DocumentFormatError, match="not valid JSON"):
            FlowDocument.load("{not json")

    def test_top_level_must_be_object(self):
        with pytest.raises(DocumentFormatError):
            FlowDocument.load("[1, 2]")

    def test_unknown_format(self):
        with pytest.raises(DocumentFormatError, match="Unsupported document format"):
            FlowDocument.from_dict({"format": "something/else"})

    def test_unknown_block_type(self):
        with pytest.raises(DocumentFormatError, match="Unknown block type"):
            FlowDocument.from_dict({"blocks": [{"type": "image"}]})

    def test_invalid_block(self):
        with pytest.raises(DocumentFormatError, match="Invalid block"):
            FlowDocument.from_dict({"blocks": [{"type": "paragraph", "font_size": "large"}]})

    def test_invalid_properties(self):
        with pytest.raises(DocumentFormatError, match="Invalid document properties"):
            FlowDocument.from_dict({"page_width": "wide"})

    def test_minimal_document(self):
        document = FlowDocument.from_dict({"blocks": [{"type": "paragraph", "inlines": [{"text": "hi"}]}]})

        assert document.blocks[0].text == "hi"
        assert document.font_family == "Times New Roman"
