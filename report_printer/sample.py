"""
Sample report: a long two-column table with a header row that is repeated
on every continuation page, a two-line page header and a page footer with
small logos drawn through the custom-draw hooks.
"""

from __future__ import annotations

from typing import List

from PIL import Image, ImageDraw

from .document.flow_document import FlowDocument, Paragraph, Run, Table, TableCell, TableRow, TableRowGroup
from .engine.geometry import DEFAULT_MARGIN, Rect
from .engine.render_tree import DrawingContext
from .engine.text_metrics import TypeStyle
from .layout.header_footer import HeaderFooterLine, TextSegment
from .layout.page_definition import PageLayoutDefinition

SAMPLE_TITLE = "Sample Report Printer"
LOGO_SIZE = 24.0
LOGO_HEADER_OFFSET = 110.0

SAMPLE_TEXT = (
    "Lorem ipsum dolor sit amet consectetur adipiscing elit sed do eiusmod tempor "
    "incididunt ut labore et dolore magna aliqua Ut enim ad minim veniam quis "
    "nostrud exercitation ullamco laboris nisi ut aliquip ex ea commodo consequat "
    "Duis aute irure dolor in reprehenderit in voluptate velit esse cillum dolore "
    "eu fugiat nulla pariatur Excepteur sint occaecat cupidatat non proident sunt "
    "in culpa qui officia deserunt mollit anim id est laborum"
)


def make_logo(pixels: int = 96) -> Image.Image:
    """Small round logo used by the sample header and footer."""
    image = Image.new("RGBA", (pixels, pixels), (255, 255, 255, 0))
    draw = ImageDraw.Draw(image)
    draw.ellipse((0, 0, pixels - 1, pixels - 1), fill=(31, 78, 121, 255))
    inset = pixels // 4
    draw.rectangle((inset, inset, pixels - inset, pixels - inset), fill=(255, 255, 255, 255))
    draw.line((inset, pixels // 2, pixels - inset, pixels // 2), fill=(31, 78, 121, 255), width=max(pixels // 16, 1))
    return image


def word_pairs(repeat: int = 10) -> List[str]:
    words = SAMPLE_TEXT.split(" ")
    lines = []
    for _ in range(repeat):
        for i in range(0, len(words) - 1, 2):
            lines.append(f"{words[i]} {words[i + 1]}")
    return lines


def _cell(text: str, **paragraph_options) -> TableCell:
    return TableCell(blocks=[Paragraph(inlines=[Run(text)], **paragraph_options)])


def build_sample_document(repeat: int = 10) -> FlowDocument:
    lines = word_pairs(repeat)
    document = FlowDocument()
    table = Table(columns=[None, None], text_alignment="justify")

    # Backgrounds go on the cell paragraphs, the repeated header row keeps them
    header = TableRowGroup(bold=True, font_size=12)
    header.rows.append(TableRow(cells=[
        _cell("Row Number", background="lightgray"),
        _cell("Some Text", background="lightgray"),
    ]))

    body = TableRowGroup(font_size=10)
    for number, line in enumerate(lines, start=1):
        body.rows.append(TableRow(cells=[_cell(str(number)), _cell(line)]))

    summary = TableRowGroup(font_size=12, italic=True)
    summary_paragraph = Paragraph(inlines=[Run("Total Rows:"), Run(str(len(lines)))])
    summary.rows.append(TableRow(cells=[TableCell(blocks=[summary_paragraph], column_span=2)]))

    table.row_groups.extend([header, body, summary])
    document.add(table)
    return document


def build_sample_definition(
    page_width: float,
    page_height: float,
    margin: float = DEFAULT_MARGIN,
    repeat_table_headers: bool = True,
) -> PageLayoutDefinition:
    normal = TypeStyle(family="Times New")
    bold = TypeStyle(family="Times New", weight="bold")
    logo = make_logo()

    def draw_header(context: DrawingContext, bounds: Rect, page_number: int) -> None:
        context.draw_image(logo, Rect(bounds.left + LOGO_HEADER_OFFSET, bounds.top, LOGO_SIZE, LOGO_SIZE))

    def draw_footer(context: DrawingContext, bounds: Rect, page_number: int) -> None:
        context.draw_image(logo, Rect(bounds.left, bounds.top, LOGO_SIZE, LOGO_SIZE))

    definition = PageLayoutDefinition(
        page_width,
        page_height,
        margin,
        margin,
        margin,
        margin,
        repeat_table_headers=repeat_table_headers,
        draw_header=draw_header,
        draw_footer=draw_footer,
    )
    report_time = definition.report_time.strftime("%Y-%m-%d %H:%M:%S")
    page_text = f"Page {PageLayoutDefinition.PAGE_NUMBER_SUBSTITUTION}"
    page_of_text = f"{page_text} of {PageLayoutDefinition.TOTAL_PAGES_SUBSTITUTION}"

    definition.add_header_line(HeaderFooterLine(
        left=TextSegment(report_time, normal, 10),
        right=TextSegment(page_text, normal, 10),
    ))
    definition.add_header_line(HeaderFooterLine.centered(TextSegment(SAMPLE_TITLE, bold, 18)))
    definition.add_footer_line(HeaderFooterLine(right=TextSegment(page_of_text, normal, 10)))
    return definition
