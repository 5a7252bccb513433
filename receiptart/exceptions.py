"""Exception hierarchy for the bill processing core."""


class ReceiptArtError(Exception):
    """Base class for all errors raised by this package."""


class ImageLoadError(ReceiptArtError):
    """Raised when a bill photo cannot be decoded."""


class OCRUnavailableError(ReceiptArtError):
    """Raised when the OCR engine fails, leaving no text to extract from."""


class CompositeExportError(ReceiptArtError):
    """Raised when a redacted composite cannot be produced or encoded."""
