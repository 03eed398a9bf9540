"""Utility modules."""

from .exceptions import (
    VerificationError,
    AmountParseError,
    InvalidExchangeRateType,
    InvalidExchangeRate,
    InvalidTransactionDirection,
    ToleranceExceeded,
    ValueMismatchError,
    InvalidDateError,
    ConfigurationError,
    DataFileError,
)
from .logging_config import resolve_level, setup_logging

__all__ = [
    "VerificationError",
    "AmountParseError",
    "InvalidExchangeRateType",
    "InvalidExchangeRate",
    "InvalidTransactionDirection",
    "ToleranceExceeded",
    "ValueMismatchError",
    "InvalidDateError",
    "ConfigurationError",
    "DataFileError",
    "setup_logging",
    "resolve_level",
]
