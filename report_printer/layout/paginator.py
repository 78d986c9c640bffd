"""

Paginating renderer for reports.

Wraps the paginator of a document snapshot and composes every page from:
- the document content, translated into the content area,
- the header and footer bands of the page definition,
- a repeated table header row when a table continues from the previous
  page.

Pages must be requested in increasing order, each one only after the
previous page has been consumed: the table header detected at the bottom
of page N is moved onto page N+1.

"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Iterator, Optional, Tuple

from ..document.base import DocumentPaginator, PaginatorSource
from ..engine.geometry import Margins, Rect, Size
from ..engine.render_tree import NodeKind, RenderNode, Transform
from .page_definition import PageLayoutDefinition

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class DocumentPage:
    """One composed page: render tree, physical size, page bounds and content bounds."""

    visual: RenderNode
    size: Size
    bounds: Rect
    content_bounds: Rect


def page_starts_with_table(element: RenderNode) -> Optional[RenderNode]:
    """

    Finds the table whose row opens the page.

    Follows the first child from ``element`` down until a row is found.

    Returns:
    The table (the row's parent) or None

    """
    if element.kind is NodeKind.ROW:
        return element.parent
    child = element.first_child
    if child is not None:
        return page_starts_with_table(child)
    return None


def page_ends_with_table(element: RenderNode) -> Optional[Tuple[RenderNode, RenderNode]]:
    """

    Finds the table whose row closes the page.

    A page may end with empty grouping containers after the last row, so
    pure containers are searched from their last child backwards; any
    other node only descends into its last child.

    Returns:
    (table, header row) or None. The header row is the table's first child.

    """
    if element.kind is NodeKind.ROW:
        table = element.parent
        return table, table.first_child

    if element.kind is NodeKind.CONTAINER:
        for child in reversed(element.children):
            found = page_ends_with_table(child)
            if found is not None:
                return found
    elif element.child_count > 0:
        return page_ends_with_table(element.last_child)
    return None


class PaginatingRenderer(DocumentPaginator):
    """

    Document paginator for reports.

    The source document is copied through ``save``/``load`` and the copy is
    reformatted to the content area (single column, no padding), so the
    caller's document is never modified.

    """

    def __init__(self, document: PaginatorSource, definition: PageLayoutDefinition):
        """

        Args:
        document: The document to print
        definition: Page layout definition

        """
        copy = type(document).load(document.save())
        copy.column_width = math.inf
        copy.page_width = definition.content_size.width
        copy.page_height = definition.content_size.height
        copy.page_padding = Margins.uniform(0.0)

        self._paginator = copy.document_paginator
        self._paginator.page_size = definition.content_size
        self._definition = definition
        self._column_headers: Optional[RenderNode] = None
        self._last_page_number: Optional[int] = None

        logger.debug(
            f"PaginatingRenderer initialized: content {definition.content_size.width:.2f}x"
            f"{definition.content_size.height:.2f} at ({definition.content_origin.x:.2f}, {definition.content_origin.y:.2f})"
        )

    @property
    def definition(self) -> PageLayoutDefinition:
        return self._definition

    @property
    def is_page_count_valid(self) -> bool:
        return self._paginator.is_page_count_valid

    @property
    def page_count(self) -> int:
        return self._paginator.page_count

    @property
    def page_size(self) -> Size:
        return self._paginator.page_size

    @page_size.setter
    def page_size(self, value: Size) -> None:
        self._paginator.page_size = value

    @property
    def source(self) -> Any:
        return self._paginator.source

    @property
    def pending_table_header(self) -> Optional[RenderNode]:
        """Header row that will be repeated if the next page starts with a row."""
        return self._column_headers

    def pages(self) -> Iterator[DocumentPage]:
        """Yields every page in order."""
        page_number = 0
        while page_number < self.page_count:
            yield self.get_page(page_number)
            page_number += 1

    def get_page(self, page_number: int) -> DocumentPage:
        """

        Gets the composed page for the zero-based ``page_number``.

        Args:
        page_number: Zero-based page number

        Returns:
        DocumentPage with the composed visual

        """
        definition = self._definition
        if definition.page_count == 0:
            definition.page_count = self._paginator.page_count
            logger.debug(f"Page count latched: {definition.page_count}")

        # A header is only carried over from the page right before this one
        expected = 0 if self._last_page_number is None else self._last_page_number + 1
        if page_number != expected and self._column_headers is not None:
            logger.debug(f"Page {page_number + 1} requested out of order; dropping pending table header")
            self._column_headers = None
        self._last_page_number = page_number

        # Backend page, already formatted to the content size
        original_page = self._paginator.get_page(page_number)

        visual = RenderNode(NodeKind.CONTAINER)
        page_visual = RenderNode(
            NodeKind.CONTAINER,
            transform=Transform.translate(definition.content_origin.x, definition.content_origin.y),
        )
        page_visual.add_child(original_page)
        visual.add_child(page_visual)

        visual.add_child(definition.create_header(page_number))
        visual.add_child(definition.create_footer(page_number))

        if definition.repeat_table_headers:
            table = page_starts_with_table(original_page)
            if table is not None and self._column_headers is not None:
                # The table started on a previous page, so its header goes
                # on top of the content area and the content is squeezed
                # below it.
                self._repeat_header(visual, page_visual, page_number)

            found = page_ends_with_table(original_page)
            if found is not None:
                new_table, new_header = found
                same_table = table is not None and new_table.identity == table.identity
                if not (same_table and self._column_headers is not None):
                    self._column_headers = new_header
            else:
                self._column_headers = None

        logger.debug(f"Page {page_number + 1}/{definition.page_count} composed")
        return DocumentPage(
            visual=visual,
            size=definition.page_size,
            bounds=Rect(0.0, 0.0, definition.page_size.width, definition.page_size.height),
            content_bounds=definition.content_rect,
        )

    def _repeat_header(self, visual: RenderNode, page_visual: RenderNode, page_number: int) -> None:
        definition = self._definition
        header = self._column_headers
        header_bounds = header.bounds() or Rect(0.0, 0.0, 0.0, 0.0)

        table_header_visual = RenderNode(
            NodeKind.CONTAINER,
            transform=Transform.translate(
                definition.content_origin.x,
                definition.content_origin.y - header_bounds.top,
            ),
        )

        content_height = definition.content_size.height
        # A zero-height content area has nothing to squeeze
        y_scale = (content_height - header_bounds.height) / content_height if content_height else 1.0
        page_visual.transform = Transform.group(
            Transform.scale(1.0, y_scale),
            Transform.translate(definition.content_origin.x, definition.content_origin.y + header_bounds.height),
        )

        header.detach()
        table_header_visual.add_child(header)
        visual.add_child(table_header_visual)
        logger.info(
            f"Page {page_number + 1}: repeated table header ({header_bounds.height:.2f}pt), content scaled by {y_scale:.4f}"
        )
