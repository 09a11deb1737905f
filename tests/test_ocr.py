"""Tests for text providers and provider selection."""

import pytest
from receipt_extractor.exceptions import TextExtractionError, UnsupportedDocumentError
from receipt_extractor.ocr import (
    SAMPLE_RECEIPT_TEXT,
    MockOCR,
    PDFTextProvider,
    PlainTextProvider,
    TesseractOCR,
    get_text_provider,
)


class TestProviders:
    """Test suite for the individual text providers."""

    def test_mock_returns_sample(self, tmp_path):
        """The mock ignores its input and returns the sample receipt."""
        assert MockOCR().extract_text(tmp_path / "anything.png") == SAMPLE_RECEIPT_TEXT

    def test_plain_text(self, tmp_path):
        """Text files are read as UTF-8."""
        receipt = tmp_path / "ticket.txt"
        receipt.write_text("PANADERÍA\nTOTAL 5,00", encoding='utf-8')

        assert PlainTextProvider().extract_text(receipt) == "PANADERÍA\nTOTAL 5,00"

    def test_plain_text_bad_bytes(self, tmp_path):
        """Undecodable bytes are replaced instead of failing the file."""
        receipt = tmp_path / "ticket.txt"
        receipt.write_bytes(b"ACME \xff STORE")

        assert PlainTextProvider().extract_text(receipt) == "ACME � STORE"

    def test_plain_text_missing(self, tmp_path):
        """Read errors become TextExtractionError."""
        with pytest.raises(TextExtractionError, match="missing.txt"):
            PlainTextProvider().extract_text(tmp_path / "missing.txt")

    def test_pdf_missing(self, tmp_path):
        """pdfminer failures become TextExtractionError."""
        with pytest.raises(TextExtractionError, match="missing.pdf"):
            PDFTextProvider().extract_text(tmp_path / "missing.pdf")

    def test_tesseract_unreadable_image(self, tmp_path):
        """A file that is not an image fails before Tesseract runs."""
        image = tmp_path / "scan.png"
        image.write_bytes(b"not an image")

        with pytest.raises(TextExtractionError, match="scan.png"):
            TesseractOCR().extract_text(image)

    def test_readable_text_check(self):
        """Three real lines and over 50 characters count as a text layer."""
        good = "SUPERMARKET ABC\n123 Main Street\nInvoice #INV-2024-001\nTOTAL: $88.00"
        assert PDFTextProvider.has_readable_text(good)

    def test_readable_text_rejects_noise(self):
        """Short fragments and control characters are not a text layer."""
        assert not PDFTextProvider.has_readable_text("ab\ncd\n")
        assert not PDFTextProvider.has_readable_text("\x01\x02\x03\x04\x05\n" * 20)


class TestGetTextProvider:
    """Test suite for get_text_provider."""

    @pytest.mark.parametrize("filename,provider_type", [
        ("ticket.txt", PlainTextProvider),
        ("ticket.PDF", PDFTextProvider),
        ("scan.jpg", TesseractOCR),
        ("scan.tiff", TesseractOCR),
    ])
    def test_auto_by_suffix(self, filename, provider_type):
        """Auto selection routes on the lower-cased suffix."""
        assert isinstance(get_text_provider('auto', filename), provider_type)

    def test_auto_unsupported_suffix(self):
        """Files no provider can read are rejected."""
        with pytest.raises(UnsupportedDocumentError, match="report.docx"):
            get_text_provider('auto', 'report.docx')

    def test_auto_needs_path(self):
        """Auto selection without a path is a programming error."""
        with pytest.raises(ValueError):
            get_text_provider('auto')

    def test_explicit_provider(self):
        """Explicit names ignore the suffix."""
        assert isinstance(get_text_provider('mock', 'scan.jpg'), MockOCR)
        assert isinstance(get_text_provider('text', 'scan.jpg'), PlainTextProvider)

    def test_tesseract_language(self):
        """The OCR language is passed through."""
        assert get_text_provider('tesseract', lang='spa').lang == 'spa'

    def test_unknown_provider(self):
        """Unknown provider names raise ValueError."""
        with pytest.raises(ValueError, match="Unknown text provider"):
            get_text_provider('azure')
