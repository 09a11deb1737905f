"""Keyword tables used by the field parsers.

Every heuristic that depends on a word list reads it from a ``KeywordTables``
instance, so a locale can be tuned by loading a YAML rules file instead of
editing the parsers.
"""

import logging
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Tuple

import yaml

logger = logging.getLogger(__name__)


# Fiscal/document boilerplate that is never a vendor name
VENDOR_EXCLUSIONS = (
    'INVOICE', 'FACTURA', 'BOLETA', 'RECIBO', 'TICKET',
    'RUC', 'R.U.C', 'NIT', 'RFC', 'NIF', 'CIF', 'RUT', 'TAX ID', 'VAT NO',
    'ORIGINAL', 'COPY', 'COPIA', 'DUPLICADO',
    'CUSTOMER', 'CLIENTE', 'CAJERO', 'CASHIER',
    'WELCOME', 'BIENVENIDO', 'BIENVENIDOS',
)

# Street-type abbreviations that open an address line
ADDRESS_PREFIXES = (
    'AV', 'AVE', 'AVDA', 'AVENIDA', 'CALLE', 'CL', 'CRA', 'CR', 'KR',
    'CARRERA', 'DIAG', 'TV', 'JR', 'ST', 'RD', 'BLVD', 'DIR',
)

INVOICE_KEYWORDS = ('invoice', 'factura', 'ticket', 'folio', 'receipt', 'recibo', 'number')

TAX_KEYWORDS = ('tax', 'iva', 'impuesto', 'itbms', 'vat')
SUBTOTAL_KEYWORDS = ('subtotal', 'sub-total')
TOTAL_KEYWORDS = ('total', 'pagar', 'amount', 'suma')


@dataclass(frozen=True)
class KeywordTables:
    """Immutable set of keyword lists consumed by the parsers."""
    vendor_exclusions: Tuple[str, ...] = VENDOR_EXCLUSIONS
    address_prefixes: Tuple[str, ...] = ADDRESS_PREFIXES
    invoice_keywords: Tuple[str, ...] = INVOICE_KEYWORDS
    tax_keywords: Tuple[str, ...] = TAX_KEYWORDS
    subtotal_keywords: Tuple[str, ...] = SUBTOTAL_KEYWORDS
    total_keywords: Tuple[str, ...] = TOTAL_KEYWORDS


DEFAULT_KEYWORDS = KeywordTables()


def load_keyword_tables(rules_path: Path) -> KeywordTables:
    """
    Load keyword overrides from a YAML rules file.

    Keys present in the file replace the default list for that table;
    missing keys keep their defaults.

    Args:
        rules_path: Path to a YAML mapping of table name to list of words

    Returns:
        KeywordTables with the overrides applied
    """
    with open(rules_path, 'r', encoding='utf-8') as f:
        try:
            rules = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {rules_path}: {e}") from e

    if not isinstance(rules, dict):
        raise ValueError(f"Keyword rules in {rules_path} must be a mapping")

    known = {f.name for f in fields(KeywordTables)}
    unknown = set(rules) - known
    if unknown:
        raise ValueError(f"Unknown keyword tables in {rules_path}: {', '.join(sorted(unknown))}")

    overrides = {}
    for name, words in rules.items():
        if not isinstance(words, list) or not words or not all(isinstance(w, str) and w for w in words):
            raise ValueError(f"Keyword table '{name}' must be a non-empty list of non-empty strings")
        overrides[name] = tuple(words)

    logger.info(f"Loaded {len(overrides)} keyword tables from {rules_path}")
    return replace(DEFAULT_KEYWORDS, **overrides)
