"""Text providers that turn receipt documents into plain text for the parser."""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Union

from .exceptions import TextExtractionError, UnsupportedDocumentError

logger = logging.getLogger(__name__)

IMAGE_SUFFIXES = ('.png', '.jpg', '.jpeg', '.tif', '.tiff', '.bmp', '.webp')
TEXT_SUFFIXES = ('.txt',)
PDF_SUFFIXES = ('.pdf',)
SUPPORTED_SUFFIXES = TEXT_SUFFIXES + PDF_SUFFIXES + IMAGE_SUFFIXES

PROVIDER_NAMES = ('auto', 'mock', 'text', 'pdf', 'tesseract')

SAMPLE_RECEIPT_TEXT = """SUPERMARKET ABC
    123 Main Street
    Invoice #INV-2024-001
    Date: 2024-01-15

    Item 1: $50.00
    Item 2: $30.00
    ─────────────────
    Subtotal: $80.00
    Tax (10%): $8.00
    ─────────────────
    TOTAL: $88.00

    Thank you for your purchase!"""


class TextProvider(ABC):
    """Produces the raw text of one receipt document."""

    name = ""

    @abstractmethod
    def extract_text(self, file_path: Path) -> str:
        """
        Extract text from a document.

        Args:
            file_path: Path to the receipt document

        Returns:
            Raw text, possibly empty
        """


class MockOCR(TextProvider):
    """Returns a fixed sample receipt, for demos and wiring tests."""

    name = "mock"

    def extract_text(self, file_path: Path) -> str:
        logger.info("Using mock OCR provider")
        return SAMPLE_RECEIPT_TEXT


class PlainTextProvider(TextProvider):
    """Reads text that was already extracted upstream."""

    name = "text"

    def extract_text(self, file_path: Path) -> str:
        try:
            return Path(file_path).read_text(encoding='utf-8', errors='replace')
        except OSError as e:
            raise TextExtractionError(file_path, str(e)) from e


class PDFTextProvider(TextProvider):
    """Extracts the embedded text layer of a PDF with pdfminer."""

    name = "pdf"

    def extract_text(self, file_path: Path) -> str:
        try:
            from pdfminer.high_level import extract_text
            text = extract_text(str(file_path))
        except Exception as e:
            logger.error(f"Failed to extract embedded text from {file_path}: {e}")
            raise TextExtractionError(file_path, str(e)) from e

        if not self.has_readable_text(text):
            logger.warning(f"{Path(file_path).name} has little or poor embedded text; "
                           f"scanned PDFs need OCR upstream")
        return text.strip()

    @staticmethod
    def has_readable_text(text: str) -> bool:
        """
        Check if extracted PDF text looks like real content rather than noise.

        Args:
            text: Text layer of the PDF

        Returns:
            True if there are at least 3 readable lines and 50 characters
        """
        readable_lines = 0
        total_chars = 0

        for line in text.split('\n'):
            line = line.strip()
            if len(line) > 3:
                total_chars += len(line)
                # Control characters and private-use glyphs mean a broken font map
                weird_chars = sum(1 for c in line if ord(c) < 32 or 0xE000 <= ord(c) <= 0xF8FF)
                if weird_chars / len(line) < 0.3:
                    readable_lines += 1

        return readable_lines >= 3 and total_chars > 50


class TesseractOCR(TextProvider):
    """Runs Tesseract over a receipt image."""

    name = "tesseract"

    def __init__(self, lang: str = "eng+spa"):
        """
        Args:
            lang: Tesseract language codes, joined with '+'
        """
        self.lang = lang

    def extract_text(self, file_path: Path) -> str:
        logger.info(f"Image detected. Running Tesseract ({self.lang}) on {Path(file_path).name}...")
        try:
            import pytesseract
            from PIL import Image

            with Image.open(file_path) as image:
                text = pytesseract.image_to_string(image, lang=self.lang)
        except Exception as e:
            logger.error(f"Tesseract failed for {file_path}: {e}")
            raise TextExtractionError(file_path, str(e)) from e

        return text.strip()


def get_text_provider(name: str, file_path: Union[str, Path, None] = None,
                      lang: str = "eng+spa") -> TextProvider:
    """
    Choose a text provider by name, or by file suffix when name is 'auto'.

    Args:
        name: One of 'auto', 'mock', 'text', 'pdf', 'tesseract'
        file_path: Document path, required for 'auto'
        lang: Tesseract languages

    Returns:
        TextProvider instance

    Raises:
        UnsupportedDocumentError: if 'auto' cannot handle the file suffix
    """
    if name == 'auto':
        if file_path is None:
            raise ValueError("file_path is required for automatic provider selection")
        suffix = Path(file_path).suffix.lower()
        if suffix in TEXT_SUFFIXES:
            name = 'text'
        elif suffix in PDF_SUFFIXES:
            name = 'pdf'
        elif suffix in IMAGE_SUFFIXES:
            name = 'tesseract'
        else:
            raise UnsupportedDocumentError(file_path, f"no text provider for '{suffix or 'no suffix'}' files")

    if name == 'mock':
        return MockOCR()
    if name == 'text':
        return PlainTextProvider()
    if name == 'pdf':
        return PDFTextProvider()
    if name == 'tesseract':
        return TesseractOCR(lang=lang)

    raise ValueError(f"Unknown text provider: {name}")
