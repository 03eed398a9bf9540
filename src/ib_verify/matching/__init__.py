"""Text normalization and matching."""

from .text_matcher import (
    DEFAULT_DISPLAY_SYMBOLS,
    amounts_equal_ignoring_whitespace,
    build_search_terms,
    find_matching_record,
    format_signed_amount,
    normalize_and_match,
    normalize_text,
    terms_for,
    TransactionMatcher,
)

__all__ = [
    "DEFAULT_DISPLAY_SYMBOLS",
    "amounts_equal_ignoring_whitespace",
    "build_search_terms",
    "find_matching_record",
    "format_signed_amount",
    "normalize_and_match",
    "normalize_text",
    "terms_for",
    "TransactionMatcher",
]
