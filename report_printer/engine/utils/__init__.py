"""Font helpers."""
