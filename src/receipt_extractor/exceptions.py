"""Exceptions raised around the parser: text extraction and result storage."""

from pathlib import Path
from typing import Union


class ReceiptError(Exception):
    """Base exception for receipt processing errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class UnsupportedDocumentError(ReceiptError):
    """Raised when no text provider can read a document."""

    def __init__(self, path: Union[str, Path], reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Unsupported document {self.path.name}: {reason}")


class TextExtractionError(ReceiptError):
    """Raised when a text provider fails on a document it should handle."""

    def __init__(self, path: Union[str, Path], reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Text extraction failed for {self.path.name}: {reason}")


class ReceiptNotFoundError(ReceiptError):
    """Raised when a stored receipt id does not exist."""

    def __init__(self, receipt_id: str):
        self.receipt_id = receipt_id
        super().__init__(f"Receipt not found: {receipt_id}")
