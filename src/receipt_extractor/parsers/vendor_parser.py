"""Vendor/business name extraction from receipt headers."""

import re
import logging
from typing import Optional, Sequence
from .base import BaseParser, ParseResult, ReceiptContext
from ..keywords import ADDRESS_PREFIXES, VENDOR_EXCLUSIONS

logger = logging.getLogger(__name__)

MAX_VENDOR_LENGTH = 50


class VendorParser(BaseParser):
    """Picks the first header line that looks like a business name.

    Store names are short and printed above the fiscal block, so the first
    normalized line that is not boilerplate, not an address and not a long
    description wins.
    """

    field_name = "vendor_name"

    def __init__(self,
                 exclusions: Sequence[str] = VENDOR_EXCLUSIONS,
                 address_prefixes: Sequence[str] = ADDRESS_PREFIXES):
        super().__init__()
        self.exclusions = tuple(w.upper() for w in exclusions)
        self.address_prefixes = tuple(p.upper() for p in address_prefixes)

        self.exclusion_pattern = re.compile(
            r'(?<!\w)(?:' + '|'.join(re.escape(w) for w in self.exclusions) + r')(?!\w)'
        )
        # "AV. 6 DE DICIEMBRE", "CALLE 45 #12", "ST: ..."
        self.address_pattern = re.compile(
            r'^(?:' + '|'.join(re.escape(p) for p in self.address_prefixes) + r')[.:,#/\s]'
        )

    def parse(self, context: ReceiptContext) -> Optional[ParseResult]:
        for line_idx, line in enumerate(context.lines):
            if self._is_excluded(line):
                continue

            result = ParseResult(
                value=line,
                source_text=line,
                metadata={'method': 'first_line', 'line_idx': line_idx}
            )
            self._log_result(result)
            return result

        self.logger.warning("No vendor name found")
        return None

    def _is_excluded(self, line: str) -> bool:
        """Check a line against the boilerplate, address and length filters."""
        upper = line.upper()

        if self.exclusion_pattern.search(upper):
            return True

        if self.address_pattern.match(upper):
            return True

        return len(line) >= MAX_VENDOR_LENGTH
