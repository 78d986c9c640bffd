"""

TextMetricsEngine - measuring single-line text for headers, footers and
document content.

Uses ReportLab font metrics and produces ``FormattedText`` objects that
carry both the (already substituted) text and its measured extent.

"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict

from reportlab.pdfbase import pdfmetrics  # type: ignore

from ..exceptions import FontError
from .utils.font_utils import is_font_available, resolve_font_variant

logger = logging.getLogger(__name__)

BOLD_WEIGHTS = {"semibold", "demibold", "bold", "extrabold", "ultrabold", "black", "heavy"}
ITALIC_STYLES = {"italic", "oblique"}

DEFAULT_LINE_SPACING = 1.2


@dataclass(frozen=True, slots=True)
class TypeStyle:
    """Font family plus weight, style and stretch."""

    family: str = "Courier New"
    weight: str = "normal"
    style: str = "normal"
    stretch: str = "normal"

    @property
    def bold(self) -> bool:
        weight = str(self.weight).lower()
        if weight.isdigit():
            return int(weight) >= 600
        return weight in BOLD_WEIGHTS

    @property
    def italic(self) -> bool:
        return str(self.style).lower() in ITALIC_STYLES


@dataclass(slots=True)
class FormattedText:
    """Measured single line of text, ready to be drawn."""

    text: str
    font_name: str
    font_size: float
    width: float
    height: float
    ascent: float
    descent: float
    line_height: float = 0.0
    color: str = "black"
    flow_direction: str = "ltr"

    @property
    def baseline(self) -> float:
        """Distance from the top of the text box to the baseline."""
        return self.ascent


class TextMetricsEngine:
    """

    Engine for measuring text.

    ``height`` of a measured text is the glyph extent (ascent - descent);
    ``line_height`` is the leading that tops it up to
    ``font_size * line_spacing``. Their sum is the vertical pitch of one
    line.

    """

    def __init__(self, line_spacing: float = DEFAULT_LINE_SPACING):
        self.line_spacing = line_spacing
        self._font_cache: Dict[str, str] = {}

    def resolve_font(self, type_style: TypeStyle) -> str:
        """

        Maps a type style to a ReportLab font name.

        Raises:
        FontError: if the resolved font is neither a standard font nor registered

        """
        cache_key = f"{type_style.family}|{type_style.bold}|{type_style.italic}"
        cached = self._font_cache.get(cache_key)
        if cached is not None:
            return cached

        font_name = resolve_font_variant(type_style.family, type_style.bold, type_style.italic)
        if not is_font_available(font_name):
            raise FontError("Font is not available", f"{type_style.family!r} resolved to {font_name!r}")
        self._font_cache[cache_key] = font_name
        logger.debug(f"Resolved font {type_style.family!r} (bold={type_style.bold}, italic={type_style.italic}) -> {font_name}")
        return font_name

    def measure_width(self, text: str, font_name: str, font_size: float) -> float:
        if not text:
            return 0.0
        return pdfmetrics.stringWidth(text, font_name, font_size)

    def format_text(
        self,
        text: str,
        type_style: TypeStyle,
        font_size: float,
        color: str = "black",
    ) -> FormattedText:
        """

        Measures text in the given style.

        Args:
        text: Text to measure (no substitution is performed here)
        type_style: Type style of the text
        font_size: Font size in points
        color: Fill color used when the text is drawn

        Returns:
        FormattedText with width, height and line height

        """
        font_name = self.resolve_font(type_style)
        font_size = float(font_size)
        ascent, descent = pdfmetrics.getAscentDescent(font_name, font_size)
        height = ascent - descent
        line_height = max(font_size * self.line_spacing - height, 0.0)
        return FormattedText(
            text=text,
            font_name=font_name,
            font_size=font_size,
            width=self.measure_width(text, font_name, font_size),
            height=height,
            ascent=ascent,
            descent=descent,
            line_height=line_height,
            color=color,
        )
