"""Data models for amounts, expected transactions and reconciliation results."""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from ..utils.exceptions import InvalidExchangeRateType, InvalidTransactionDirection


class ExchangeDirection(Enum):
    """Which side of the quoted FX rate applies to a conversion."""

    BUY = "buy"  # Bank buys foreign currency: divide by the rate
    SELL = "sell"  # Bank sells foreign currency: multiply by the rate

    @classmethod
    def parse(cls, value: Any) -> "ExchangeDirection":
        """
        Parse a free-text exchange rate type.

        Args:
            value: An ExchangeDirection or a string such as " Buy "

        Returns:
            Matching ExchangeDirection

        Raises:
            InvalidExchangeRateType: If the value is not "buy" or "sell"
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            normalized = value.strip().lower()
            for member in cls:
                if member.value == normalized:
                    return member
        raise InvalidExchangeRateType(value)


class TransactionDirection(Enum):
    """Direction of a transaction from the account holder's perspective."""

    DEBIT = "debit"  # Money out, balance decreases
    CREDIT = "credit"  # Money in, balance increases

    @classmethod
    def parse(cls, value: Any) -> "TransactionDirection":
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            normalized = value.strip().lower()
            for member in cls:
                if member.value == normalized:
                    return member
        raise InvalidTransactionDirection(
            f"Invalid transaction direction: {value!r}. Must be 'debit' or 'credit'."
        )

    @property
    def sign(self) -> str:
        """Sign prefix used when the UI renders an amount of this direction."""
        return "-" if self is TransactionDirection.DEBIT else ""


@dataclass(frozen=True)
class MoneyAmount:
    """
    An amount parsed from a display string such as "- € 245,911.10".

    The value is always non-negative; the sign is carried separately.
    """

    currency_code: str
    value: Decimal
    sign: int = 1

    def __post_init__(self) -> None:
        if self.value < 0:
            raise ValueError("MoneyAmount value must be non-negative; use sign")
        if self.sign not in (1, -1):
            raise ValueError("MoneyAmount sign must be 1 or -1")

    @property
    def signed_value(self) -> Decimal:
        return self.value if self.sign > 0 else -self.value

    @property
    def is_negative(self) -> bool:
        return self.sign < 0 and self.value != 0


@dataclass(frozen=True)
class ExpectedTransaction:
    """Expected values for one row of a transaction history panel."""

    date: str
    amount: str
    currency: str
    remarks: str = ""
    direction: TransactionDirection = TransactionDirection.DEBIT


@dataclass(frozen=True)
class ReconciliationResult:
    """Outcome of a single balance check."""

    # Amount the balance was expected to move by (positive)
    expected_delta: Decimal

    # Amount it actually moved by in the checked direction
    actual_delta: Decimal

    tolerance: Decimal
    within_tolerance: bool

    direction: TransactionDirection = TransactionDirection.DEBIT

    # Cross-currency context, present only for converted checks
    currency_code: Optional[str] = None
    exchange_rate: Optional[Decimal] = None
    exchange_direction: Optional[ExchangeDirection] = None

    @property
    def passed(self) -> bool:
        return self.within_tolerance

    @property
    def variance(self) -> Decimal:
        """Actual minus expected delta."""
        return self.actual_delta - self.expected_delta

    def describe(self) -> str:
        """Human-readable summary suitable for a test failure message."""
        status = "PASS" if self.within_tolerance else "FAIL"
        text = (
            f"{status} {self.direction.value}: expected {self.expected_delta:.2f}, "
            f"actual {self.actual_delta:.2f}, variance {self.variance:.2f}, "
            f"tolerance {self.tolerance:.2f}"
        )
        if self.exchange_rate is not None:
            text += f", rate {self.exchange_rate}"
            if self.exchange_direction is not None:
                text += f" ({self.exchange_direction.value})"
        if self.currency_code:
            text += f", currency {self.currency_code}"
        return text


@dataclass(frozen=True)
class BalanceCheckCase:
    """A balance check loaded from a CSV test data row."""

    name: str
    before: Decimal
    after: Decimal
    amount: Decimal
    direction: TransactionDirection = TransactionDirection.DEBIT
    exchange_rate: Optional[Decimal] = None
    exchange_direction: Optional[ExchangeDirection] = None
    tolerance: Optional[Decimal] = None
    currency_code: Optional[str] = None

    @property
    def is_cross_currency(self) -> bool:
        return self.exchange_rate is not None
