"""Page layout definition and the paginating renderer."""

from .header_footer import HeaderFooterLine, TextSegment
from .page_definition import PageLayoutDefinition
from .paginator import DocumentPage, PaginatingRenderer, page_ends_with_table, page_starts_with_table

__all__ = [
    "HeaderFooterLine",
    "TextSegment",
    "PageLayoutDefinition",
    "DocumentPage",
    "PaginatingRenderer",
    "page_starts_with_table",
    "page_ends_with_table",
]
