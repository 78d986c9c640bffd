"""
Flow document model.

A minimal re-flowable document of paragraphs and tables. Formatting
properties left as None are inherited from the enclosing element
(document -> table -> row group -> paragraph -> run).

Documents round-trip through JSON with ``save``/``load``; the paginating
renderer relies on that to work on a private copy.
"""

from __future__ import annotations

import json
import logging
import math
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Union

from reportlab.lib.pagesizes import LETTER

from ..engine.geometry import Margins
from ..exceptions import DocumentFormatError
from .base import DocumentPaginator, PaginatorSource

logger = logging.getLogger(__name__)

FORMAT_NAME = "report-printer/flow-document"
FORMAT_VERSION = 1


@dataclass
class Run:
    """Piece of text with optional character formatting."""

    text: str = ""
    font_family: Optional[str] = None
    font_size: Optional[float] = None
    bold: Optional[bool] = None
    italic: Optional[bool] = None
    color: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Run":
        return cls(
            text=str(data.get("text", "")),
            font_family=data.get("font_family"),
            font_size=_optional_float(data.get("font_size")),
            bold=data.get("bold"),
            italic=data.get("italic"),
            color=data.get("color"),
        )


@dataclass
class Paragraph:
    inlines: List[Run] = field(default_factory=list)
    font_family: Optional[str] = None
    font_size: Optional[float] = None
    bold: Optional[bool] = None
    italic: Optional[bool] = None
    color: Optional[str] = None
    text_alignment: Optional[str] = None
    background: Optional[str] = None
    spacing_after: float = 0.0

    def add(self, inline: Union[str, Run]) -> Run:
        """Append a run (plain strings become unformatted runs)."""
        run = inline if isinstance(inline, Run) else Run(text=str(inline))
        self.inlines.append(run)
        return run

    @property
    def text(self) -> str:
        return "".join(run.text for run in self.inlines)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["type"] = "paragraph"
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Paragraph":
        return cls(
            inlines=[Run.from_dict(item) for item in data.get("inlines", [])],
            font_family=data.get("font_family"),
            font_size=_optional_float(data.get("font_size")),
            bold=data.get("bold"),
            italic=data.get("italic"),
            color=data.get("color"),
            text_alignment=data.get("text_alignment"),
            background=data.get("background"),
            spacing_after=float(data.get("spacing_after", 0.0)),
        )


@dataclass
class TableCell:
    blocks: List[Paragraph] = field(default_factory=list)
    column_span: int = 1
    background: Optional[str] = None
    padding: float = 2.0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TableCell":
        return cls(
            blocks=[Paragraph.from_dict(item) for item in data.get("blocks", [])],
            column_span=max(int(data.get("column_span", 1)), 1),
            background=data.get("background"),
            padding=float(data.get("padding", 2.0)),
        )


@dataclass
class TableRow:
    cells: List[TableCell] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TableRow":
        return cls(cells=[TableCell.from_dict(item) for item in data.get("cells", [])])


@dataclass
class TableRowGroup:
    rows: List[TableRow] = field(default_factory=list)
    background: Optional[str] = None
    font_size: Optional[float] = None
    bold: Optional[bool] = None
    italic: Optional[bool] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TableRowGroup":
        return cls(
            rows=[TableRow.from_dict(item) for item in data.get("rows", [])],
            background=data.get("background"),
            font_size=_optional_float(data.get("font_size")),
            bold=data.get("bold"),
            italic=data.get("italic"),
        )


@dataclass
class Table:
    """

    Table made of row groups.

    ``columns`` holds one entry per column: a fixed width in points, or
    None to share the remaining width equally. The first row of the first
    group is the header row.

    """

    columns: List[Optional[float]] = field(default_factory=list)
    row_groups: List[TableRowGroup] = field(default_factory=list)
    text_alignment: Optional[str] = None
    border_width: float = 0.0
    border_color: str = "black"

    @property
    def rows(self) -> List[TableRow]:
        return [row for group in self.row_groups for row in group.rows]

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["type"] = "table"
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Table":
        return cls(
            columns=[_optional_float(value) for value in data.get("columns", [])],
            row_groups=[TableRowGroup.from_dict(item) for item in data.get("row_groups", [])],
            text_alignment=data.get("text_alignment"),
            border_width=float(data.get("border_width", 0.0)),
            border_color=data.get("border_color", "black"),
        )


Block = Union[Paragraph, Table]

_BLOCK_TYPES = {
    "paragraph": Paragraph,
    "table": Table,
}


class FlowDocument(PaginatorSource):
    """Re-flowable document of paragraphs and tables."""

    def __init__(
        self,
        blocks: Optional[List[Block]] = None,
        *,
        font_family: str = "Times New Roman",
        font_size: float = 12.0,
        page_width: float = LETTER[0],
        page_height: float = LETTER[1],
        page_padding: Optional[Margins] = None,
        column_width: Optional[float] = None,
    ):
        self.blocks: List[Block] = list(blocks or [])
        self.font_family = font_family
        self.font_size = float(font_size)
        self.page_width = float(page_width)
        self.page_height = float(page_height)
        self.page_padding = page_padding if page_padding is not None else Margins.uniform(0.0)
        self.column_width = column_width

    def add(self, block: Block) -> Block:
        self.blocks.append(block)
        return block

    @property
    def document_paginator(self) -> DocumentPaginator:
        from .flow_paginator import FlowDocumentPaginator

        return FlowDocumentPaginator(self)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "format": FORMAT_NAME,
            "version": FORMAT_VERSION,
            "font_family": self.font_family,
            "font_size": self.font_size,
            "page_width": self.page_width,
            "page_height": self.page_height,
            "page_padding": asdict(self.page_padding),
            # JSON has no infinity; None means "no column limit"
            "column_width": None if self.column_width is None or math.isinf(self.column_width) else self.column_width,
            "blocks": [block.to_dict() for block in self.blocks],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FlowDocument":
        if not isinstance(data, dict):
            raise DocumentFormatError("Invalid document", "top-level JSON value must be an object")
        if data.get("format", FORMAT_NAME) != FORMAT_NAME:
            raise DocumentFormatError("Unsupported document format", str(data.get("format")))

        blocks: List[Block] = []
        for index, item in enumerate(data.get("blocks", [])):
            block_type = item.get("type") if isinstance(item, dict) else None
            block_cls = _BLOCK_TYPES.get(block_type)
            if block_cls is None:
                raise DocumentFormatError("Unknown block type", f"block {index}: {block_type!r}")
            try:
                blocks.append(block_cls.from_dict(item))
            except (AttributeError, TypeError, ValueError) as exc:
                raise DocumentFormatError("Invalid block", f"block {index}: {exc}") from exc

        padding = data.get("page_padding") or {}
        try:
            return cls(
                blocks,
                font_family=data.get("font_family", "Times New Roman"),
                font_size=float(data.get("font_size", 12.0)),
                page_width=float(data.get("page_width", LETTER[0])),
                page_height=float(data.get("page_height", LETTER[1])),
                page_padding=Margins(**{key: float(value) for key, value in padding.items()}),
                column_width=_optional_float(data.get("column_width")),
            )
        except (AttributeError, TypeError, ValueError) as exc:
            raise DocumentFormatError("Invalid document properties", str(exc)) from exc

    def save(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def load(cls, data: str) -> "FlowDocument":
        try:
            parsed = json.loads(data)
        except json.JSONDecodeError as exc:
            raise DocumentFormatError("Document is not valid JSON", str(exc)) from exc
        document = cls.from_dict(parsed)
        logger.debug(f"Loaded flow document with {len(document.blocks)} blocks")
        return document


def _optional_float(value: Any) -> Optional[float]:
    if value is None:
        return None
    return float(value)
