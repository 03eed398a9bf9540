"""Custom exceptions for the verification engine."""

from typing import Any, Optional


class VerificationError(Exception):
    """Base exception for verification errors."""

    pass


class AmountParseError(VerificationError):
    """Display string contains no recognizable numeric token."""

    def __init__(self, raw: Optional[str]):
        self.raw = raw
        super().__init__(f"Unable to parse numeric amount from string: {raw!r}")


class InvalidExchangeRateType(VerificationError):
    """Exchange rate type is neither 'buy' nor 'sell'."""

    def __init__(self, value: Any):
        self.value = value
        super().__init__(
            f"Invalid exchange rate type: {value!r}. Must be 'buy' or 'sell'."
        )


class InvalidExchangeRate(VerificationError):
    """Exchange rate is missing, zero or negative."""

    pass


class InvalidTransactionDirection(VerificationError):
    """Transaction direction is neither 'debit' nor 'credit'."""

    pass


class ToleranceExceeded(VerificationError):
    """Balance delta falls outside the allowed tolerance."""

    def __init__(self, result: Any):
        self.result = result
        super().__init__(result.describe())


class ValueMismatchError(VerificationError):
    """Expected and displayed values differ."""

    pass


class InvalidDateError(VerificationError):
    """Date string is not in DD/MM/YYYY form."""

    pass


class ConfigurationError(VerificationError):
    """Error in configuration."""

    pass


class DataFileError(VerificationError):
    """Error reading or updating a CSV test data file."""

    pass
