"""Amount parsing: price normalization, keyword-anchored amounts and the max-value fallback."""

import re
import logging
from typing import Optional, Sequence
from .base import BaseParser, ParseResult, ReceiptContext

logger = logging.getLogger(__name__)

# Thousands-grouped digits (1.234 / 1,234,567.89) or plain decimals (50.00 / 12,5).
# Separator-free integers are deliberately not prices: they are usually years,
# quantities, phone or document numbers.
NUMBER_TOKEN = r'\d{1,3}(?:[.,]\d{3})+(?:[.,]\d{1,2})?|\d+[.,]\d{1,2}'

# Text allowed between a keyword and its amount: anything but digits on the
# same line, except rate annotations such as "(10%)" or "19 %"
KEYWORD_FILLER = r'(?:[^\d\n]|\d+(?:[.,]\d+)?\s*%)*'

_NON_NUMERIC = re.compile(r'[^\d.,]')
_TRAILING_SEPARATORS = re.compile(r'[.,]+$')


def parse_price(text: str) -> Optional[float]:
    """
    Convert a price token with ambiguous separators into a float.

    With both '.' and ',' present, whichever comes last is the decimal
    separator. With only one of them, it is a thousands separator when exactly
    three digits follow its last occurrence and a decimal point otherwise.
    A true three-decimal amount ("123.400") therefore reads as 123400.

    Examples:
        >>> parse_price("1.234,56")
        1234.56
        >>> parse_price("$1,234.56")
        1234.56
        >>> parse_price("1.272")
        1272.0
        >>> parse_price("12,5")
        12.5

    Returns:
        The amount, or None when the token holds no parseable number
    """
    cleaned = _NON_NUMERIC.sub('', text)
    cleaned = _TRAILING_SEPARATORS.sub('', cleaned)
    if not cleaned:
        return None

    if '.' in cleaned and ',' in cleaned:
        decimal_sep = '.' if cleaned.rfind('.') > cleaned.rfind(',') else ','
        thousands_sep = ',' if decimal_sep == '.' else '.'
        cleaned = cleaned.replace(thousands_sep, '').replace(decimal_sep, '.')
    elif '.' in cleaned or ',' in cleaned:
        sep = '.' if '.' in cleaned else ','
        if len(cleaned.split(sep)[-1]) == 3:
            cleaned = cleaned.replace(sep, '')
        else:
            cleaned = cleaned.replace(sep, '.')

    try:
        return float(cleaned)
    except ValueError:
        return None


class KeywordAmountParser(BaseParser):
    """Amount that follows one of a set of keywords on the same line.

    One class serves the tax, subtotal and total fields; only the keyword
    set differs.
    """

    def __init__(self, field_name: str, keywords: Sequence[str]):
        super().__init__()
        self.field_name = field_name
        self.keywords = tuple(keywords)

        alternation = '|'.join(re.escape(k) for k in sorted(self.keywords, key=len, reverse=True))
        # Keyword must start a word, so "total" never fires inside "Subtotal"/"Sub-total"
        self.pattern = re.compile(
            rf'(?<![\w-])(?:{alternation}){KEYWORD_FILLER}[:$]?\s*({NUMBER_TOKEN})',
            re.IGNORECASE,
        )

    def parse(self, context: ReceiptContext) -> Optional[ParseResult]:
        match = self.pattern.search(context.full_text)
        if not match:
            self._log_result(None)
            return None

        amount = parse_price(match.group(1))
        if amount is None:
            self._log_result(None)
            return None

        result = ParseResult(
            value=amount,
            source_text=match.group(0).strip(),
            metadata={'method': 'keyword', 'token': match.group(1)}
        )
        self._log_result(result)
        return result


class FallbackAmountResolver(BaseParser):
    """Guess the total as the largest positive price anywhere in the text."""

    field_name = "amount"

    def __init__(self):
        super().__init__()
        self.pattern = re.compile(rf'\b(?:{NUMBER_TOKEN})\b')

    def parse(self, context: ReceiptContext) -> Optional[ParseResult]:
        candidates = []
        for match in self.pattern.finditer(context.full_text):
            amount = parse_price(match.group())
            if amount is not None and amount > 0:
                candidates.append((amount, match.group()))

        if not candidates:
            self._log_result(None)
            return None

        amount, token = max(candidates, key=lambda c: c[0])
        self.logger.info(f"Total keyword not found. Using max value heuristic: {amount}")

        return ParseResult(
            value=amount,
            source_text=token,
            metadata={'method': 'max_value', 'candidates': len(candidates)}
        )
