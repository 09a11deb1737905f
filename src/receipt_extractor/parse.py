"""Receipt parsing: runs every field parser over OCR text and assembles the record."""

import logging
from typing import Optional
from .keywords import DEFAULT_KEYWORDS, KeywordTables
from .models import ReceiptData
from .parsers import (
    DateParser,
    DateValidator,
    FallbackAmountResolver,
    InvoiceNumberParser,
    KeywordAmountParser,
    ReceiptContext,
    VendorParser,
)

logger = logging.getLogger(__name__)


class ReceiptParser:
    """
    Best-effort extraction of vendor, date, invoice number and amounts.

    Each field parser runs independently against the same context; the
    max-value fallback only runs when no total keyword was found. A field
    that cannot be found is left as None, parsing itself never fails.

    The parser keeps no state between calls, so one instance can be shared
    across threads.
    """

    def __init__(self,
                 keywords: KeywordTables = DEFAULT_KEYWORDS,
                 date_validator: Optional[DateValidator] = None):
        """
        Initialize with the field parsers configured from keyword tables.

        Args:
            keywords: Keyword tables (defaults, or loaded from a rules file)
            date_validator: Year validator; pin ``current_year`` for reproducible runs
        """
        self.keywords = keywords
        self.vendor_parser = VendorParser(keywords.vendor_exclusions, keywords.address_prefixes)
        self.date_parser = DateParser(date_validator)
        self.invoice_parser = InvoiceNumberParser(keywords.invoice_keywords)
        self.subtotal_parser = KeywordAmountParser('subtotal_amount', keywords.subtotal_keywords)
        self.tax_parser = KeywordAmountParser('tax_amount', keywords.tax_keywords)
        self.total_parser = KeywordAmountParser('amount', keywords.total_keywords)
        self.fallback_resolver = FallbackAmountResolver()

    def parse(self, raw_text: str) -> ReceiptData:
        """
        Parse raw OCR text into a ReceiptData record.

        Args:
            raw_text: Text from OCR or a PDF text layer, any layout

        Returns:
            ReceiptData with raw_text preserved and every field found filled in
        """
        logger.info("Parsing receipt data...")
        context = ReceiptContext(full_text=raw_text)

        vendor = self.vendor_parser.parse(context)
        date = self.date_parser.parse(context)
        invoice = self.invoice_parser.parse(context)
        subtotal = self.subtotal_parser.parse(context)
        tax = self.tax_parser.parse(context)

        total = self.total_parser.parse(context)
        if total is None:
            total = self.fallback_resolver.parse(context)

        data = ReceiptData(
            raw_text=raw_text,
            vendor_name=vendor.value if vendor else None,
            date=date.value if date else None,
            invoice_number=invoice.value if invoice else None,
            amount=total.value if total else None,
            subtotal_amount=subtotal.value if subtotal else None,
            tax_amount=tax.value if tax else None,
        )

        logger.info(f"Parsed receipt: vendor={data.vendor_name}, date={data.date}, "
                    f"invoice={data.invoice_number}, total={data.amount}")
        return data


_default_parser = ReceiptParser()


def parse(raw_text: str) -> ReceiptData:
    """Parse receipt text with the default keyword tables."""
    return _default_parser.parse(raw_text)
