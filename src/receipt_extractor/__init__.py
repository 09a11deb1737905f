"""Receipt Extractor - structured fields from noisy receipt OCR text."""

__version__ = "1.0.0"

from .models import ReceiptData, ReceiptResult
from .parse import ReceiptParser, parse
from .keywords import KeywordTables, load_keyword_tables
from .exceptions import (
    ReceiptError,
    ReceiptNotFoundError,
    TextExtractionError,
    UnsupportedDocumentError,
)

__all__ = [
    'ReceiptData',
    'ReceiptResult',
    'ReceiptParser',
    'parse',
    'KeywordTables',
    'load_keyword_tables',
    'ReceiptError',
    'ReceiptNotFoundError',
    'TextExtractionError',
    'UnsupportedDocumentError',
]
