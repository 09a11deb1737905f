"""Tests for DateValidator and DateParser."""

from datetime import datetime

import pytest
from receipt_extractor.parsers.date_parser import DateParser, DateValidator
from receipt_extractor.parsers.base import ReceiptContext


class TestDateValidator:
    """Test suite for DateValidator."""

    def setup_method(self):
        """Set up test fixtures."""
        self.validator = DateValidator(current_year=2025)

    @pytest.mark.parametrize("candidate", ["2024-01-15", "2000.01.01", "15/01/2025", "01/01/2026"])
    def test_accepts_plausible_years(self, candidate):
        """Years from 2000 up to next year are accepted."""
        assert self.validator.is_valid(candidate)

    @pytest.mark.parametrize("candidate", ["15/01/1999", "01/01/2027", "15/01/24", "1-2-34"])
    def test_rejects_implausible_years(self, candidate):
        """Old years, years past next year, and short years are rejected."""
        assert not self.validator.is_valid(candidate)

    def test_first_four_digit_run_decides(self):
        """Only the first 4-digit run is read as the year."""
        assert not self.validator.is_valid("1999/12/2024")

    def test_defaults_to_clock(self):
        """Without a pinned year the current calendar year is used."""
        validator = DateValidator()
        assert validator.current_year == datetime.now().year
        assert validator.is_valid(f"01/01/{datetime.now().year + 1}")
        assert not validator.is_valid(f"01/01/{datetime.now().year + 2}")

    def test_correct_year(self):
        """Suspect 2026-2029 years are replaced with the current year."""
        assert self.validator.correct_year("15/03/2028") == "15/03/2025"
        assert self.validator.correct_year("2029-03-15") == "2025-03-15"

    def test_correct_year_leaves_other_years(self):
        """Years outside the suspect range are not touched."""
        assert self.validator.correct_year("2024-01-15") == "2024-01-15"
        assert self.validator.correct_year("15/03/24") == "15/03/24"


class TestDateParser:
    """Test suite for DateParser."""

    def setup_method(self):
        """Set up test fixtures."""
        self.parser = DateParser(DateValidator(current_year=2025))

    def test_iso_date(self):
        """Y-M-D date after a label."""
        result = self.parser.parse(ReceiptContext(full_text="Date: 2024-01-15"))

        assert result is not None
        assert result.value == "2024-01-15"
        assert result.metadata['method'] == 'validated'

    def test_date_inside_long_line(self):
        """Dates are found inline, not only on their own line."""
        text = "Ticket 0042 fecha 7-3-2025 hora 10:15 caja 2"
        result = self.parser.parse(ReceiptContext(full_text=text))

        assert result is not None
        assert result.value == "7-3-2025"

    def test_skips_implausible_candidates(self):
        """The first candidate with a plausible year wins."""
        text = "Printed 12/12/1998\nFecha: 05.03.2024"
        result = self.parser.parse(ReceiptContext(full_text=text))

        assert result is not None
        assert result.value == "05.03.2024"

    def test_year_correction_fallback(self):
        """With no plausible candidate the first one is year-corrected."""
        text = "Fecha: 15/03/2028\nVence: 15/04/2029"
        result = self.parser.parse(ReceiptContext(full_text=text))

        assert result is not None
        assert result.value == "15/03/2025"
        assert result.source_text == "15/03/2028"
        assert result.metadata['method'] == 'year_corrected'

    def test_short_year_kept_as_written(self):
        """A two-digit year cannot be validated and is returned unchanged."""
        result = self.parser.parse(ReceiptContext(full_text="Fecha 15/03/24"))

        assert result is not None
        assert result.value == "15/03/24"

    def test_no_date(self):
        """Text without date-shaped tokens gives None."""
        assert self.parser.parse(ReceiptContext(full_text="No dates here, total 88.00")) is None
