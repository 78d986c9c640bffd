"""
Capabilities the paginating renderer needs from a document.

A ``PaginatorSource`` is a re-formattable document: it can be copied via
``save``/``load``, resized, and hands out a ``DocumentPaginator`` that cuts
it into page render trees.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from ..engine.geometry import Margins, Size
from ..engine.render_tree import RenderNode


class DocumentPaginator(ABC):
    """Page-by-page formatter for one document."""

    @property
    @abstractmethod
    def page_size(self) -> Size:
        """Size of each generated page."""

    @page_size.setter
    @abstractmethod
    def page_size(self, value: Size) -> None:
        ...

    @property
    @abstractmethod
    def page_count(self) -> int:
        """Total number of pages (formats the document if needed)."""

    @property
    @abstractmethod
    def is_page_count_valid(self) -> bool:
        """Whether ``page_count`` is final without further formatting."""

    @property
    @abstractmethod
    def source(self) -> Any:
        """The document being paginated."""

    @abstractmethod
    def get_page(self, page_number: int) -> RenderNode:
        """Render tree of the zero-based page ``page_number``."""


class PaginatorSource(ABC):
    """Document that can be snapshotted and paginated."""

    column_width: float
    page_width: float
    page_height: float
    page_padding: Margins

    @abstractmethod
    def save(self) -> str:
        """Serialize the whole document, preserving formatting."""

    @classmethod
    @abstractmethod
    def load(cls, data: str) -> "PaginatorSource":
        """Rebuild a document from ``save()`` output."""

    @property
    @abstractmethod
    def document_paginator(self) -> DocumentPaginator:
        ...
