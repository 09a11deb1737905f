"""Date extraction with year validation and OCR year correction."""

import re
import logging
from typing import Optional
from datetime import datetime
from .base import BaseParser, ParseResult, ReceiptContext

logger = logging.getLogger(__name__)

# D/M/Y, Y-M-D, D.M.YY ... separators may differ between the two positions
DATE_PATTERN = re.compile(r'\d{1,4}[-/. ]\d{1,2}[-/. ]\d{2,4}')

MIN_YEAR = 2000

# Years OCR tends to produce for recent receipts (misread 3/5/6/8/9 digits)
SUSPECT_YEARS = re.compile(r'(?<!\d)202[6-9](?!\d)')


class DateValidator:
    """Accepts dates whose year is plausible for a recent receipt."""

    def __init__(self, current_year: Optional[int] = None):
        self._current_year = current_year

    @property
    def current_year(self) -> int:
        return self._current_year or datetime.now().year

    def is_valid(self, candidate: str) -> bool:
        """True if the first 4-digit run in candidate is a year in [2000, current year + 1]."""
        year_match = re.search(r'\d{4}', candidate)
        if not year_match:
            return False
        return MIN_YEAR <= int(year_match.group()) <= self.current_year + 1

    def correct_year(self, candidate: str) -> str:
        """Replace an apparent 2026-2029 year with the current year."""
        return SUSPECT_YEARS.sub(str(self.current_year), candidate, count=1)


class DateParser(BaseParser):
    """Finds the first plausible date anywhere in the raw text."""

    field_name = "date"

    def __init__(self, validator: Optional[DateValidator] = None):
        super().__init__()
        self.validator = validator or DateValidator()

    def parse(self, context: ReceiptContext) -> Optional[ParseResult]:
        """
        Extract the receipt date as written (not canonicalized).

        Scans the unsplit text, since dates often sit inside longer lines.
        When no candidate has a plausible year the first candidate is kept
        with its year corrected.
        """
        candidates = DATE_PATTERN.findall(context.full_text)
        if not candidates:
            self._log_result(None)
            return None

        for candidate in candidates:
            if self.validator.is_valid(candidate):
                result = ParseResult(
                    value=candidate,
                    source_text=candidate,
                    metadata={'method': 'validated'}
                )
                self._log_result(result)
                return result

        corrected = self.validator.correct_year(candidates[0])
        self.logger.warning(f"No date with a plausible year, using corrected candidate: {candidates[0]} → {corrected}")
        return ParseResult(
            value=corrected,
            source_text=candidates[0],
            metadata={'method': 'year_corrected', 'candidates': len(candidates)}
        )
