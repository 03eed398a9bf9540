"""
Text normalization and search-term matching for rendered transaction rows.

The UI concatenates several DOM nodes into one row of text with inconsistent
spacing and line breaks, so rows are compared by substring containment after
normalization rather than by exact equality.
"""

from typing import Any, Iterable, Mapping, Optional, Sequence, Union
import logging
import re

from ..models.verification import ExpectedTransaction, TransactionDirection

logger = logging.getLogger(__name__)

DEFAULT_DISPLAY_SYMBOLS: dict[str, str] = {"EUR": "€"}

_WHITESPACE = re.compile(r"\s+")


def normalize_text(text: str) -> str:
    """
    Normalize text for comparison.

    Collapses all whitespace runs (including non-breaking spaces) to a single
    space, trims, and lower-cases.
    """
    return _WHITESPACE.sub(" ", text.replace("\u00a0", " ")).strip().lower()


def normalize_and_match(raw_text: str, expected_terms: Iterable[str]) -> bool:
    """
    Check that every expected term appears in the rendered text.

    Matching is conjunctive, order-independent and substring based: a short
    term can match inside an unrelated longer token.

    Args:
        raw_text: Text of one rendered row or calendar entry
        expected_terms: Terms that must all be present

    Returns:
        True if every normalized term is a substring of the normalized text
    """
    haystack = normalize_text(raw_text)
    for term in expected_terms:
        needle = normalize_text(term)
        if needle not in haystack:
            logger.debug(f"Term {needle!r} not found in {haystack!r}")
            return False
    return True


def find_matching_record(
    records: Sequence[str], expected_terms: Sequence[str]
) -> Optional[int]:
    """
    Return the index of the first record containing all expected terms.

    Args:
        records: Rendered text of each row, in display order
        expected_terms: Terms that must all be present in one row

    Returns:
        Index of the first matching row, or None
    """
    for idx, record in enumerate(records):
        # Multi-line list items are read as one line
        one_line = " ".join(record.splitlines())
        if normalize_and_match(one_line, expected_terms):
            logger.info(f"Found matching record at row {idx}")
            return idx

    logger.warning(f"No record among {len(records)} matched terms {list(expected_terms)}")
    return None


def format_signed_amount(
    direction: TransactionDirection,
    currency: str,
    amount: str,
    display_symbols: Optional[Mapping[str, str]] = None,
) -> str:
    """Render an amount the way the history panel shows it, e.g. "- € 50.00"."""
    symbols = DEFAULT_DISPLAY_SYMBOLS if display_symbols is None else display_symbols
    currency_label = symbols.get(currency.strip().upper(), currency.strip())
    return f"{direction.sign} {currency_label} {amount.strip()}".strip()


def build_search_terms(
    direction: Union[TransactionDirection, str],
    date: str,
    currency: str,
    amount: str,
    remarks: str = "",
    display_symbols: Optional[Mapping[str, str]] = None,
) -> list[str]:
    """
    Build the terms identifying a transaction in the history panel.

    Args:
        direction: Debit or credit (enum or free text)
        date: Transaction date as displayed
        currency: ISO currency code from test data
        amount: Amount as displayed, e.g. "50.00"
        remarks: Free-text remarks; omitted when empty
        display_symbols: ISO code to display symbol table

    Returns:
        List of search terms
    """
    txn_direction = TransactionDirection.parse(direction)
    terms = [date, format_signed_amount(txn_direction, currency, amount, display_symbols)]
    if remarks and remarks.strip():
        terms.append(remarks)
    return terms


def terms_for(
    expected: ExpectedTransaction,
    display_symbols: Optional[Mapping[str, str]] = None,
) -> list[str]:
    """Search terms for an ExpectedTransaction."""
    return build_search_terms(
        expected.direction,
        expected.date,
        expected.currency,
        expected.amount,
        expected.remarks,
        display_symbols,
    )


def amounts_equal_ignoring_whitespace(displayed: str, expected: Optional[str]) -> bool:
    """Compare two displayed amounts with all whitespace removed."""
    if expected is None:
        return False
    return _WHITESPACE.sub("", displayed) == _WHITESPACE.sub("", expected)


class TransactionMatcher:
    """Locates expected transactions among rendered history rows."""

    def __init__(self, display_symbols: Optional[Mapping[str, str]] = None):
        self.display_symbols = dict(
            DEFAULT_DISPLAY_SYMBOLS if display_symbols is None else display_symbols
        )

    @classmethod
    def from_config(cls, config: Any) -> "TransactionMatcher":
        return cls(config.parsing.display_symbols)

    def search_terms(self, expected: ExpectedTransaction) -> list[str]:
        return terms_for(expected, self.display_symbols)

    def locate(self, records: Sequence[str], expected: ExpectedTransaction) -> Optional[int]:
        """
        Find the row showing an expected transaction.

        Args:
            records: Rendered text of each history row
            expected: Expected date, amount, currency, remarks and direction

        Returns:
            Index of the first matching row, or None
        """
        return find_matching_record(records, self.search_terms(expected))
