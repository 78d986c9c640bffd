from __future__ import annotations

from typing import Optional

from reportlab.pdfbase import pdfmetrics  # type: ignore

STANDARD_FONT_VARIANTS = {
    "Helvetica",
    "Helvetica-Bold",
    "Helvetica-Oblique",
    "Helvetica-BoldOblique",
    "Times-Roman",
    "Times-Bold",
    "Times-Italic",
    "Times-BoldItalic",
    "Courier",
    "Courier-Bold",
    "Courier-Oblique",
    "Courier-BoldOblique",
}

FONT_FALLBACKS = {
    "arial": "Helvetica",
    "arial mt": "Helvetica",
    "calibri": "Helvetica",
    "helvetica": "Helvetica",
    "sans-serif": "Helvetica",
    "segoe ui": "Helvetica",
    "tahoma": "Helvetica",
    "verdana": "Helvetica",
    "cambria": "Times-Roman",
    "georgia": "Times-Roman",
    "serif": "Times-Roman",
    "times": "Times-Roman",
    "times new": "Times-Roman",
    "times new roman": "Times-Roman",
    "times-roman": "Times-Roman",
    "consolas": "Courier",
    "courier": "Courier",
    "courier new": "Courier",
    "lucida console": "Courier",
    "monospace": "Courier",
}

_STANDARD_SUFFIXES = {
    "Helvetica": ("Helvetica", "Helvetica-Bold", "Helvetica-Oblique", "Helvetica-BoldOblique"),
    "Times-Roman": ("Times-Roman", "Times-Bold", "Times-Italic", "Times-BoldItalic"),
    "Courier": ("Courier", "Courier-Bold", "Courier-Oblique", "Courier-BoldOblique"),
}


def _normalize_base_font(font_name: Optional[str]) -> str:
    if not font_name:
        return "Helvetica"

    cleaned = font_name.strip()
    if not cleaned:
        return "Helvetica"

    if cleaned in STANDARD_FONT_VARIANTS:
        return cleaned

    return FONT_FALLBACKS.get(cleaned.lower(), cleaned)


def _registered_variant(base: str, bold: bool, italic: bool) -> str:
    # Families registered by the caller (e.g. a TTFont) follow the
    # "<Family>-Bold" / "-Italic" / "-BoldItalic" naming used by ReportLab.
    registered = set(pdfmetrics.getRegisteredFontNames())
    if bold and italic:
        candidates = (f"{base}-BoldItalic", f"{base}-BoldOblique")
    elif bold:
        candidates = (f"{base}-Bold",)
    elif italic:
        candidates = (f"{base}-Italic", f"{base}-Oblique")
    else:
        candidates = ()
    for candidate in candidates:
        if candidate in registered:
            return candidate
    return base


def resolve_font_variant(font_name: Optional[str], bold: bool, italic: bool) -> str:
    base = _normalize_base_font(font_name)

    if base in STANDARD_FONT_VARIANTS and base not in _STANDARD_SUFFIXES:
        # Already encodes weight/style (e.g. Helvetica-Bold).
        return base

    variants = _STANDARD_SUFFIXES.get(base)
    if variants is not None:
        regular, bold_name, italic_name, bold_italic = variants
        if bold and italic:
            return bold_italic
        if bold:
            return bold_name
        if italic:
            return italic_name
        return regular

    return _registered_variant(base, bold, italic)


def is_font_available(font_name: str) -> bool:
    if font_name in STANDARD_FONT_VARIANTS:
        return True
    return font_name in pdfmetrics.getRegisteredFontNames()
