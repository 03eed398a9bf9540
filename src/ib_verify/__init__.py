"""Transaction verification engine for Internet Banking end-to-end tests."""

__version__ = "0.1.0"

from .matching.text_matcher import (
    build_search_terms,
    find_matching_record,
    normalize_and_match,
    normalize_text,
)
from .models.verification import (
    ExchangeDirection,
    ExpectedTransaction,
    MoneyAmount,
    ReconciliationResult,
    TransactionDirection,
)
from .parsers.amount_parser import (
    extract_currency_code,
    normalize_whitespace,
    parse_amount,
    parse_money,
)
from .reconciliation.engine import (
    BalanceReconciler,
    convert_amount,
    reconcile_credit,
    reconcile_cross_currency_debit,
    reconcile_debit,
)
from .utils.exceptions import (
    AmountParseError,
    InvalidExchangeRateType,
    ToleranceExceeded,
    VerificationError,
)

__all__ = [
    "AmountParseError",
    "BalanceReconciler",
    "ExchangeDirection",
    "ExpectedTransaction",
    "InvalidExchangeRateType",
    "MoneyAmount",
    "ReconciliationResult",
    "ToleranceExceeded",
    "TransactionDirection",
    "VerificationError",
    "build_search_terms",
    "convert_amount",
    "extract_currency_code",
    "find_matching_record",
    "normalize_and_match",
    "normalize_text",
    "normalize_whitespace",
    "parse_amount",
    "parse_money",
    "reconcile_credit",
    "reconcile_cross_currency_debit",
    "reconcile_debit",
]
