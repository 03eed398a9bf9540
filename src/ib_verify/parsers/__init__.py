"""Parsers for displayed amounts and currencies."""

from .amount_parser import (
    DEFAULT_CURRENCY_SYMBOLS,
    UNKNOWN_CURRENCY,
    extract_currency_code,
    normalize_whitespace,
    parse_amount,
    parse_money,
)

__all__ = [
    "DEFAULT_CURRENCY_SYMBOLS",
    "UNKNOWN_CURRENCY",
    "extract_currency_code",
    "normalize_whitespace",
    "parse_amount",
    "parse_money",
]
