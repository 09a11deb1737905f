"""Invoice/ticket number extraction."""

import re
import logging
from typing import Optional, Sequence
from .base import BaseParser, ParseResult, ReceiptContext
from ..keywords import INVOICE_KEYWORDS

logger = logging.getLogger(__name__)


class InvoiceNumberParser(BaseParser):
    """Document number following a keyword such as 'Invoice #' or 'Folio:'."""

    field_name = "invoice_number"

    def __init__(self, keywords: Sequence[str] = INVOICE_KEYWORDS):
        super().__init__()
        self.keywords = tuple(keywords)

        alternation = '|'.join(re.escape(k) for k in sorted(self.keywords, key=len, reverse=True))
        # Keywords match in any case, the number itself only in upper case
        self.pattern = re.compile(rf'(?i:{alternation})\s*[:#.]?\s*([A-Z0-9-]+)')

    def parse(self, context: ReceiptContext) -> Optional[ParseResult]:
        match = self.pattern.search(context.full_text)
        if not match:
            self._log_result(None)
            return None

        result = ParseResult(
            value=match.group(1),
            source_text=match.group(0),
            metadata={'method': 'keyword'}
        )
        self._log_result(result)
        return result
