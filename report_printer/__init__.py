"""
report_printer - paginated report printing.

Prints a re-flowable document onto fixed-size pages with:

- header and footer bands made of left / center / right aligned text lines,
- page number and page count substitution ({PAGENUMBER}, {PAGECOUNT}),
- optional custom drawing into the header and footer (logos etc.),
- the header row of a table repeated on every page the table continues on.

Main Components:
- PageLayoutDefinition: page geometry plus header and footer lines
- PaginatingRenderer: composes the pages of a document
- FlowDocument: default document model (paragraphs and tables)
- PdfReportWriter / print_report: PDF output through ReportLab
"""

from .api import print_report
from .document.base import DocumentPaginator, PaginatorSource
from .document.flow_document import FlowDocument, Paragraph, Run, Table, TableCell, TableRow, TableRowGroup
from .engine.geometry import Margins, Point, Rect, Size
from .engine.text_metrics import FormattedText, TextMetricsEngine, TypeStyle
from .exceptions import DocumentFormatError, FontError, LayoutError, RenderingError, ReportPrinterError
from .layout.header_footer import HeaderFooterLine, TextSegment
from .layout.page_definition import PageLayoutDefinition
from .layout.paginator import DocumentPage, PaginatingRenderer
from .renderers.pdf_writer import PdfReportWriter
from .version import __version__

__all__ = [
    "__version__",
    "print_report",
    "PageLayoutDefinition",
    "PaginatingRenderer",
    "DocumentPage",
    "HeaderFooterLine",
    "TextSegment",
    "TypeStyle",
    "FormattedText",
    "TextMetricsEngine",
    "DocumentPaginator",
    "PaginatorSource",
    "FlowDocument",
    "Paragraph",
    "Run",
    "Table",
    "TableCell",
    "TableRow",
    "TableRowGroup",
    "PdfReportWriter",
    "Margins",
    "Point",
    "Rect",
    "Size",
    "ReportPrinterError",
    "LayoutError",
    "RenderingError",
    "FontError",
    "DocumentFormatError",
]
