"""Header and footer line definitions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Optional, Tuple

from ..engine.text_metrics import TypeStyle


@dataclass(frozen=True, slots=True)
class TextSegment:
    """

    One aligned piece of a header or footer line.

    ``text`` may contain the page number / page count substitution tokens
    defined on ``PageLayoutDefinition``.

    """

    text: str
    type_style: TypeStyle = field(default_factory=TypeStyle)
    font_size: float = 10.0


class HeaderFooterLine:
    """

    One line of a header or footer with optional left, center and right
    aligned segments.

    ``top_offset`` is assigned by the page definition when the line is
    appended: the height of the band above this line.

    """

    ALIGNMENTS = ("left", "center", "right")

    def __init__(
        self,
        left: Optional[TextSegment] = None,
        center: Optional[TextSegment] = None,
        right: Optional[TextSegment] = None,
    ):
        self.left = left
        self.center = center
        self.right = right
        self.top_offset = 0.0

    @classmethod
    def centered(cls, segment: TextSegment) -> "HeaderFooterLine":
        """Line with center-aligned text only."""
        return cls(center=segment)

    def segments(self) -> Iterator[Tuple[str, TextSegment]]:
        for alignment in self.ALIGNMENTS:
            segment = getattr(self, alignment)
            if segment is not None:
                yield alignment, segment

    def __repr__(self) -> str:
        texts = ", ".join(f"{alignment}={segment.text!r}" for alignment, segment in self.segments())
        return f"HeaderFooterLine({texts}, top_offset={self.top_offset})"
