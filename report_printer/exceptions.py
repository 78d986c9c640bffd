"""Custom exceptions for report_printer."""

from typing import Optional


class ReportPrinterError(Exception):
    """Base exception for report_printer errors."""

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class LayoutError(ReportPrinterError):
    """Exception raised during layout calculation or pagination."""

    pass


class RenderingError(ReportPrinterError):
    """Exception raised while painting pages to an output device."""

    pass


class FontError(ReportPrinterError):
    """Exception raised during font resolution."""

    pass


class DocumentFormatError(ReportPrinterError):
    """Exception raised when a serialized document cannot be loaded."""

    pass
