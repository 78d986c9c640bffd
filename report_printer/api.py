"""
High-level API for report_printer.

Example:
    >>> from report_printer import FlowDocument, PageLayoutDefinition, print_report
    >>> from report_printer.layout.header_footer import HeaderFooterLine, TextSegment
    >>>
    >>> definition = PageLayoutDefinition(612, 792)
    >>> definition.add_footer_line(HeaderFooterLine(right=TextSegment("Page {PAGENUMBER} of {PAGECOUNT}")))
    >>> print_report(document, definition, "report.pdf", title="Monthly report")
"""

from __future__ import annotations

import logging
from typing import Optional

from .document.base import PaginatorSource
from .layout.page_definition import PageLayoutDefinition
from .layout.paginator import PaginatingRenderer
from .renderers.pdf_writer import CanvasTarget, PdfReportWriter

logger = logging.getLogger(__name__)

__all__ = ["print_report"]


def print_report(
    document: PaginatorSource,
    definition: PageLayoutDefinition,
    output: CanvasTarget,
    title: Optional[str] = None,
    author: Optional[str] = None,
) -> int:
    """
    Paginate ``document`` with ``definition`` and write it as a PDF.

    Args:
        document: Document to print (left untouched, a copy is paginated)
        definition: Page layout definition
        output: Path or binary file object receiving the PDF
        title: Optional PDF title
        author: Optional PDF author

    Returns:
        Number of pages printed
    """
    renderer = PaginatingRenderer(document, definition)
    writer = PdfReportWriter(output, title=title, author=author)
    page_count = writer.write(renderer)
    logger.info(f"Report printed: {page_count} pages")
    return page_count
