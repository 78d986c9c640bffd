#!/usr/bin/env python3
"""
Example: printing a long table with repeated header rows.

Builds a small invoice-like document, adds a page header and footer and
writes it to ``sample_report.pdf``.
"""

import sys
from pathlib import Path

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from report_printer import (
    FlowDocument,
    HeaderFooterLine,
    PageLayoutDefinition,
    Paragraph,
    Run,
    Table,
    TableCell,
    TableRow,
    TableRowGroup,
    TextSegment,
    TypeStyle,
    print_report,
)
from report_printer.utils.logger import configure_logging


def cell(text, **options):
    return TableCell(blocks=[Paragraph([Run(text)], **options)])


def build_document():
    document = FlowDocument(font_family="Helvetica", font_size=10)
    document.add(Paragraph([Run("Order history")], font_size=16, bold=True, spacing_after=8))

    table = Table(columns=[60.0, None, 80.0], border_width=0.25)
    table.row_groups.append(TableRowGroup(
        rows=[TableRow(cells=[
            cell("Order", background="lightgray"),
            cell("Description", background="lightgray"),
            cell("Amount", background="lightgray", text_alignment="right"),
        ])],
        bold=True,
    ))
    body = TableRowGroup()
    for number in range(1, 121):
        body.rows.append(TableRow(cells=[
            cell(f"#{number:04d}"),
            cell(f"Item {number} shipped to customer {number % 17}"),
            cell(f"{number * 12.5:.2f}", text_alignment="right"),
        ]))
    table.row_groups.append(body)
    document.add(table)
    return document


def main():
    configure_logging("INFO")

    definition = PageLayoutDefinition(612, 792, 54, 54, 54, 54)
    regular = TypeStyle(family="Helvetica")
    definition.add_header_line(HeaderFooterLine(
        left=TextSegment("ACME Corp.", TypeStyle(family="Helvetica", weight="bold"), 12),
        right=TextSegment(definition.report_time.strftime("%d %b %Y"), regular, 9),
    ))
    definition.add_footer_line(HeaderFooterLine.centered(
        TextSegment("Page {PAGENUMBER} of {PAGECOUNT}", regular, 9),
    ))

    output = Path(__file__).parent / "sample_report.pdf"
    pages = print_report(build_document(), definition, output, title="Order history")
    print(f"Wrote {pages} pages to {output}")


if __name__ == "__main__":
    main()
