"""Base classes for receipt field parsers."""

from abc import ABC, abstractmethod
from typing import Optional, Any, Dict, List
from dataclasses import dataclass, field
import logging

from .lines import normalize_lines

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParseResult:
    """Value found by a parser, with the text it came from and how it was found."""
    value: Any
    source_text: str = ""
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass
class ReceiptContext:
    """Raw receipt text plus the normalized lines shared by every parser."""
    full_text: str
    lines: List[str] = None

    def __post_init__(self):
        if self.lines is None:
            self.lines = normalize_lines(self.full_text)


class BaseParser(ABC):
    """Base class for all receipt field parsers.

    Parsers hold configuration only; ``parse`` must not mutate the parser or
    the context so one instance can serve concurrent calls.
    """

    field_name = ""

    def __init__(self):
        self.logger = logging.getLogger(self.__class__.__name__)

    @abstractmethod
    def parse(self, context: ReceiptContext) -> Optional[ParseResult]:
        """
        Parse the specific field from receipt context.

        Args:
            context: Receipt context with raw text and normalized lines

        Returns:
            ParseResult with the field value, or None if nothing was found
        """

    def _log_result(self, result: Optional[ParseResult]):
        """Log parsing result for debugging."""
        if result:
            self.logger.info(f"Parsed {self.field_name}: {result.value!r} ({result.metadata.get('method', 'match')})")
        else:
            self.logger.debug(f"No {self.field_name} found")
