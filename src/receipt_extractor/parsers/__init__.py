"""Receipt field parsers - one focused heuristic per field."""

from .base import BaseParser, ParseResult, ReceiptContext
from .lines import normalize_lines
from .amount_parser import FallbackAmountResolver, KeywordAmountParser, parse_price
from .date_parser import DateParser, DateValidator
from .invoice_parser import InvoiceNumberParser
from .vendor_parser import VendorParser

__all__ = [
    'BaseParser', 'ParseResult', 'ReceiptContext', 'normalize_lines',
    'parse_price', 'KeywordAmountParser', 'FallbackAmountResolver',
    'DateParser', 'DateValidator', 'InvoiceNumberParser', 'VendorParser',
]
