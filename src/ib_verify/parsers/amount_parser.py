"""
Currency and amount parser.
Converts rendered balance strings ("MUR 1,098.20", "- € 245,911.10",
"US$ 2.00") into Decimal values and currency codes.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Mapping, Optional
import logging
import re

from ..models.verification import MoneyAmount
from ..utils.exceptions import AmountParseError

logger = logging.getLogger(__name__)

UNKNOWN_CURRENCY = "unknown"

# Checked longest-first, case-sensitive
DEFAULT_CURRENCY_SYMBOLS: dict[str, str] = {
    "US$": "USD",
    "Rs.": "MUR",
    "Rs": "MUR",
    "€": "EUR",
    "$": "USD",
    "£": "GBP",
}

CENTS = Decimal("0.01")

_WHITESPACE = re.compile(r"\s+")
_FIRST_DIGIT_OR_SIGN = re.compile(r"[\d+\-]")
_NUMBER = re.compile(r"\d+(?:\.\d+)?")
_ISO_CODE = re.compile(r"^([A-Za-z]{3})(?![A-Za-z])")


def normalize_whitespace(raw: str) -> str:
    """Collapse every whitespace run (including non-breaking spaces) to one space."""
    return _WHITESPACE.sub(" ", raw.replace("\u00a0", " ")).strip()


def parse_amount(raw: Optional[str]) -> Decimal:
    """
    Parse a display amount into a Decimal rounded to 2 places.

    Currency markers ahead of the number are discarded and commas are
    treated as thousands separators. A ``-`` anywhere before the number
    makes the result negative, so "- € 50.00" and "-€50.00" both parse
    to -50.00.

    Args:
        raw: Display string scraped from the page

    Returns:
        Parsed amount

    Raises:
        AmountParseError: If the string holds no numeric token
    """
    if raw is None:
        raise AmountParseError(raw)

    text = normalize_whitespace(str(raw))

    start = _FIRST_DIGIT_OR_SIGN.search(text)
    if not start:
        raise AmountParseError(raw)

    body = text[start.start():].replace(",", "")
    number = _NUMBER.search(body)
    if not number:
        raise AmountParseError(raw)

    prefix = body[: number.start()]

    try:
        value = Decimal(number.group(0))
    except InvalidOperation as e:
        raise AmountParseError(raw) from e

    if "-" in prefix:
        value = -value

    result = value.quantize(CENTS, rounding=ROUND_HALF_UP)
    logger.debug(f"Parsed amount {raw!r} -> {result}")
    return result


def extract_currency_code(
    raw: Optional[str], symbols: Optional[Mapping[str, str]] = None
) -> str:
    """
    Extract the currency of a display amount.

    Args:
        raw: Display string such as "MUR 1,098.20" or "€ 139,426.55"
        symbols: Symbol to ISO code table (defaults to DEFAULT_CURRENCY_SYMBOLS)

    Returns:
        Upper-case ISO code, or UNKNOWN_CURRENCY when nothing recognizable leads
    """
    if not raw:
        return UNKNOWN_CURRENCY

    table = DEFAULT_CURRENCY_SYMBOLS if symbols is None else symbols
    text = normalize_whitespace(str(raw)).lstrip("+-").lstrip()

    for symbol in sorted(table, key=len, reverse=True):
        if text.startswith(symbol):
            return table[symbol]

    match = _ISO_CODE.match(text)
    if match:
        return match.group(1).upper()

    return UNKNOWN_CURRENCY


def parse_money(
    raw: Optional[str], symbols: Optional[Mapping[str, str]] = None
) -> MoneyAmount:
    """Parse both the currency and the signed value of a display amount."""
    value = parse_amount(raw)
    return MoneyAmount(
        currency_code=extract_currency_code(raw, symbols),
        value=abs(value),
        sign=-1 if value < 0 else 1,
    )
