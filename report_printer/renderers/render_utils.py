"""Utility helpers shared by the PDF writer and the command line."""

from __future__ import annotations

from typing import Iterable, Union

from reportlab.lib import colors
from reportlab.lib.colors import Color, HexColor
from reportlab.lib.pagesizes import A4, LEGAL, LETTER, landscape

from ..engine.geometry import Size

PAGE_SIZES = {
    "A4": A4,
    "LETTER": LETTER,
    "LEGAL": LEGAL,
}


def ensure_page_size(page_size: Union[str, Size, Iterable[float]], orientation: str = "portrait") -> Size:
    """
    Resolve a page size preset name, Size or (width, height) pair.

    Args:
        page_size: Preset name (A4, LETTER, LEGAL), Size or two numbers in points
        orientation: "portrait" or "landscape"

    Returns:
        Size in points
    """
    if isinstance(page_size, Size):
        width, height = page_size.width, page_size.height
    elif isinstance(page_size, str):
        preset = PAGE_SIZES.get(page_size.upper())
        if not preset:
            raise ValueError(f"Unsupported page size preset: {page_size}")
        width, height = preset
    else:
        values = list(page_size)
        if len(values) != 2:
            raise ValueError("Page size iterable must contain exactly two values")
        width, height = values

    if orientation == "landscape":
        width, height = landscape((width, height))
    return Size(float(width), float(height))


COLOR_MAP = {
    "black": "#000000",
    "blue": "#0000FF",
    "cyan": "#00FFFF",
    "darkblue": "#00008B",
    "darkgray": "#A9A9A9",
    "darkgrey": "#A9A9A9",
    "darkgreen": "#006400",
    "darkred": "#8B0000",
    "gold": "#FFD700",
    "gray": "#808080",
    "grey": "#808080",
    "green": "#008000",
    "lightblue": "#ADD8E6",
    "lightgray": "#D3D3D3",
    "lightgrey": "#D3D3D3",
    "lightgreen": "#90EE90",
    "lightyellow": "#FFFFE0",
    "magenta": "#FF00FF",
    "navy": "#000080",
    "orange": "#FFA500",
    "red": "#FF0000",
    "white": "#FFFFFF",
    "yellow": "#FFFF00",
}


HEX_DIGITS = set("0123456789abcdefABCDEF")


def _normalize_color(value: object, fallback: str) -> Union[str, Color]:
    if isinstance(value, Color):
        return value
    if isinstance(value, (tuple, list)) and len(value) == 3:
        try:
            return colors.Color(*[float(v) for v in value])
        except (TypeError, ValueError):
            return fallback

    token = str(value or "").strip()
    if not token:
        return fallback

    lowered = token.lower()
    if lowered in COLOR_MAP:
        return COLOR_MAP[lowered]

    if token.startswith("#"):
        candidate = token
    elif len(token) in {3, 6} and all(ch in HEX_DIGITS for ch in token):
        candidate = f"#{token}"
    else:
        # Any other ReportLab color name ("steelblue", ...)
        named = getattr(colors, lowered, None)
        return named if isinstance(named, Color) else fallback

    digits = candidate[1:]
    if len(digits) == 3 and all(ch in HEX_DIGITS for ch in digits):
        # Short form: #abc is #aabbcc
        candidate = "#" + "".join(ch * 2 for ch in digits)

    try:
        HexColor(candidate)
        return candidate
    except ValueError:
        return fallback


def to_color(value: object, fallback: str = "#000000") -> Color:
    """Convert a color name, hex string or RGB tuple (0..1) to a ReportLab color."""
    normalized = _normalize_color(value, fallback)
    if isinstance(normalized, Color):
        return normalized
    return HexColor(normalized)
