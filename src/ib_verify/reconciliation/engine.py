"""
Balance reconciliation.
Checks that an account balance moved by the expected amount after a
transaction, optionally converting the amount through a quoted FX rate.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Optional, Union
import logging

from ..config import VerificationConfig
from ..models.verification import (
    BalanceCheckCase,
    ExchangeDirection,
    ReconciliationResult,
    TransactionDirection,
)
from ..parsers.amount_parser import extract_currency_code, parse_amount
from ..utils.exceptions import (
    AmountParseError,
    InvalidExchangeRate,
    ToleranceExceeded,
    ValueMismatchError,
)

logger = logging.getLogger(__name__)

Number = Union[Decimal, int, float, str]

CENTS = Decimal("0.01")


def _to_decimal(value: Number) -> Decimal:
    """Convert a number to Decimal without binary float artefacts."""
    if isinstance(value, Decimal):
        number = value
    else:
        try:
            number = Decimal(str(value).strip())
        except InvalidOperation as e:
            raise AmountParseError(str(value)) from e

    if not number.is_finite():
        raise AmountParseError(str(value))
    return number


def round2(value: Number) -> Decimal:
    """Round half-up to 2 decimal places."""
    return _to_decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)


def deduct_amount(initial: Number, final: Number) -> Decimal:
    """Difference between two balances, rounded to cents."""
    return round2(_to_decimal(initial) - _to_decimal(final))


def _convert(amount: Number, rate: Number, direction: Any) -> Decimal:
    fx_direction = ExchangeDirection.parse(direction)
    try:
        rate_value = _to_decimal(rate)
    except AmountParseError as e:
        raise InvalidExchangeRate(f"Exchange rate is not a number: {rate!r}") from e
    if rate_value <= 0:
        raise InvalidExchangeRate(f"Exchange rate must be positive, got {rate!r}")

    amount_value = _to_decimal(amount)
    if fx_direction is ExchangeDirection.BUY:
        return amount_value / rate_value
    return amount_value * rate_value


def convert_amount(amount: Number, rate: Number, direction: Any) -> Decimal:
    """
    Convert an amount through a quoted exchange rate.

    Args:
        amount: Amount in the source currency
        rate: Quoted rate, must be positive
        direction: ExchangeDirection or "buy"/"sell" (case-insensitive)

    Returns:
        Converted amount rounded to 2 places. BUY divides by the rate,
        SELL multiplies.

    Raises:
        InvalidExchangeRateType: If direction is not buy or sell
        InvalidExchangeRate: If rate is not positive
    """
    return round2(_convert(amount, rate, direction))


def _reconcile(
    before: Number,
    after: Number,
    expected: Decimal,
    tolerance: Number,
    direction: TransactionDirection,
    **context: Any,
) -> ReconciliationResult:
    before_value = _to_decimal(before)
    after_value = _to_decimal(after)
    tolerance_value = _to_decimal(tolerance)

    if direction is TransactionDirection.DEBIT:
        actual_delta = round2(before_value - after_value)
    else:
        actual_delta = round2(after_value - before_value)
    expected_delta = round2(expected)

    within = abs(actual_delta - expected_delta) <= tolerance_value
    result = ReconciliationResult(
        expected_delta=expected_delta,
        actual_delta=actual_delta,
        tolerance=tolerance_value,
        within_tolerance=within,
        direction=direction,
        **context,
    )

    if within:
        logger.debug(result.describe())
    else:
        logger.warning(result.describe())
    return result


def reconcile_debit(
    before: Number, after: Number, expected_amount: Number, tolerance: Number = 0
) -> ReconciliationResult:
    """
    Check that the balance decreased by ``expected_amount``.

    Args:
        before: Balance before the transaction
        after: Balance after the transaction
        expected_amount: Amount paid
        tolerance: Allowed absolute difference

    Returns:
        ReconciliationResult with actual delta ``before - after``
    """
    return _reconcile(
        before, after, _to_decimal(expected_amount), tolerance, TransactionDirection.DEBIT
    )


def reconcile_credit(
    before: Number, after: Number, expected_amount: Number, tolerance: Number = 0
) -> ReconciliationResult:
    """Check that the balance increased by ``expected_amount``."""
    return _reconcile(
        before, after, _to_decimal(expected_amount), tolerance, TransactionDirection.CREDIT
    )


def reconcile_cross_currency(
    before: Number,
    after: Number,
    foreign_amount: Number,
    rate: Number,
    exchange_direction: Any,
    tolerance: Number = 0,
    direction: TransactionDirection = TransactionDirection.DEBIT,
    currency_code: Optional[str] = None,
) -> ReconciliationResult:
    """
    Reconcile a balance against a foreign-currency amount.

    The converted amount is rounded once, when the delta is compared, not
    after conversion.
    """
    fx_direction = ExchangeDirection.parse(exchange_direction)
    expected = _convert(foreign_amount, rate, fx_direction)
    return _reconcile(
        before,
        after,
        expected,
        tolerance,
        direction,
        currency_code=currency_code,
        exchange_rate=_to_decimal(rate),
        exchange_direction=fx_direction,
    )


def reconcile_cross_currency_debit(
    before: Number,
    after: Number,
    foreign_amount: Number,
    rate: Number,
    exchange_direction: Any,
    tolerance: Number = 0,
) -> ReconciliationResult:
    """Debit a local account for a foreign-currency payment."""
    return reconcile_cross_currency(
        before, after, foreign_amount, rate, exchange_direction, tolerance
    )


def verify_expected_actual(expected: str, actual: str) -> None:
    """
    Compare an expected value from test data with a displayed value.

    Both sides are compared as numbers at 2 decimal places when they parse
    after removing commas; otherwise as trimmed strings.

    Raises:
        ValueMismatchError: If the values differ
    """
    expected_num = _as_number(expected)
    actual_num = _as_number(actual)

    if expected_num is None or actual_num is None:
        if actual.strip() != expected.strip():
            raise ValueMismatchError(
                f"The expected value '{expected.strip()}' does not match "
                f"the actual value '{actual.strip()}'."
            )
        logger.info(f"Expected={expected.strip()} | Actual={actual.strip()}")
        return

    expected_2 = round2(expected_num)
    actual_2 = round2(actual_num)
    if expected_2 != actual_2:
        logger.error(
            f"Expected={expected_2} | Actual={actual_2} | "
            f"RawExpected={expected} | RawActual={actual}"
        )
        raise ValueMismatchError(
            f"The expected value '{expected_2}' does not match the actual value '{actual_2}'."
        )
    logger.info(f"Expected={expected_2} | Actual={actual_2}")


def _as_number(value: str) -> Optional[Decimal]:
    try:
        number = Decimal(value.replace(",", "").strip())
    except InvalidOperation:
        return None
    return number if number.is_finite() else None


class BalanceReconciler:
    """
    Configured front end for balance checks.

    Applies the configured default tolerance and accepts raw display strings
    as scraped from the page.
    """

    def __init__(self, config: Optional[VerificationConfig] = None):
        """
        Initialize the reconciler.

        Args:
            config: Application configuration (defaults when omitted)
        """
        self.config = config or VerificationConfig()
        self.default_tolerance = _to_decimal(self.config.reconciliation.default_tolerance)
        self.currency_symbols = self.config.parsing.currency_symbols

    def _tolerance(self, tolerance: Optional[Number]) -> Decimal:
        return self.default_tolerance if tolerance is None else _to_decimal(tolerance)

    def check_debit(
        self,
        before_text: str,
        after_text: str,
        expected_amount: Number,
        tolerance: Optional[Number] = None,
    ) -> ReconciliationResult:
        """Parse two displayed balances and check a debit between them."""
        return reconcile_debit(
            parse_amount(before_text),
            parse_amount(after_text),
            expected_amount,
            self._tolerance(tolerance),
        )

    def check_credit(
        self,
        before_text: str,
        after_text: str,
        expected_amount: Number,
        tolerance: Optional[Number] = None,
    ) -> ReconciliationResult:
        """Parse two displayed balances and check a credit between them."""
        return reconcile_credit(
            parse_amount(before_text),
            parse_amount(after_text),
            expected_amount,
            self._tolerance(tolerance),
        )

    def check_cross_currency(
        self,
        before_text: str,
        after_text: str,
        foreign_amount: Number,
        rate: Number,
        exchange_direction: Any,
        tolerance: Optional[Number] = None,
        direction: Any = TransactionDirection.DEBIT,
    ) -> ReconciliationResult:
        """
        Check a local-currency balance movement for a foreign-currency amount.

        Args:
            before_text: Displayed balance before the transaction
            after_text: Displayed balance after the transaction
            foreign_amount: Transaction amount in the foreign currency
            rate: Exchange rate
            exchange_direction: "buy" or "sell"
            tolerance: Allowed absolute difference (config default if None)
            direction: TransactionDirection or "debit"/"credit"
        """
        return reconcile_cross_currency(
            parse_amount(before_text),
            parse_amount(after_text),
            foreign_amount,
            rate,
            exchange_direction,
            self._tolerance(tolerance),
            direction=TransactionDirection.parse(direction),
            currency_code=extract_currency_code(before_text, self.currency_symbols),
        )

    def check_cross_currency_debit(
        self,
        before_text: str,
        after_text: str,
        foreign_amount: Number,
        rate: Number,
        exchange_direction: Any,
        tolerance: Optional[Number] = None,
    ) -> ReconciliationResult:
        """Check a local-currency debit for a foreign-currency payment."""
        return self.check_cross_currency(
            before_text, after_text, foreign_amount, rate, exchange_direction, tolerance
        )

    def run_case(self, case: BalanceCheckCase) -> ReconciliationResult:
        """
        Run a balance check loaded from test data.

        Args:
            case: Balance check case

        Returns:
            ReconciliationResult for the case
        """
        tolerance = self._tolerance(case.tolerance)

        if case.is_cross_currency:
            return reconcile_cross_currency(
                case.before,
                case.after,
                case.amount,
                case.exchange_rate,
                case.exchange_direction,
                tolerance,
                direction=case.direction,
                currency_code=case.currency_code,
            )

        if case.direction is TransactionDirection.CREDIT:
            return reconcile_credit(case.before, case.after, case.amount, tolerance)
        return reconcile_debit(case.before, case.after, case.amount, tolerance)

    def run_cases(
        self, cases: list[BalanceCheckCase]
    ) -> list[tuple[BalanceCheckCase, ReconciliationResult]]:
        """Run several cases, logging a pass/fail summary."""
        results = [(case, self.run_case(case)) for case in cases]
        failed = sum(1 for _, result in results if not result.passed)
        logger.info(f"Ran {len(results)} balance checks, {failed} failed")
        return results

    @staticmethod
    def assert_reconciled(result: ReconciliationResult) -> ReconciliationResult:
        """
        Raise if a result is outside tolerance.

        Raises:
            ToleranceExceeded: Carrying the result for diagnostics
        """
        if not result.within_tolerance:
            raise ToleranceExceeded(result)
        return result
