from decimal import Decimal

import pytest

from ib_verify.config import ReconciliationConfig, VerificationConfig
from ib_verify.models import (
    BalanceCheckCase,
    ExchangeDirection,
    TransactionDirection,
)
from ib_verify.reconciliation import (
    BalanceReconciler,
    convert_amount,
    deduct_amount,
    reconcile_credit,
    reconcile_cross_currency_debit,
    reconcile_debit,
    round2,
    verify_expected_actual,
)
from ib_verify.utils.exceptions import (
    AmountParseError,
    InvalidExchangeRate,
    InvalidExchangeRateType,
    ToleranceExceeded,
    ValueMismatchError,
)


class TestRounding:
    def test_half_up(self):
        assert round2(Decimal("2.675")) == Decimal("2.68")
        assert round2("2.665") == Decimal("2.67")
        assert round2(2.675) == Decimal("2.68")

    def test_deduct_amount(self):
        assert deduct_amount("1000.00", "900.00") == Decimal("100.00")
        assert deduct_amount(1000, Decimal("899.995")) == Decimal("100.01")


class TestReconcileDebit:
    """Balance decreases by the paid amount"""

    def test_exact_debit(self):
        result = reconcile_debit(before=1000.00, after=900.00, expected_amount=100.00)
        assert result.passed
        assert result.actual_delta == Decimal("100.00")
        assert result.expected_delta == Decimal("100.00")
        assert result.direction is TransactionDirection.DEBIT

    def test_float_inputs_do_not_drift(self):
        assert reconcile_debit(0.3, 0.1, 0.2).passed

    def test_wrong_amount_fails(self):
        result = reconcile_debit(1000, 900, 90)
        assert not result.within_tolerance
        assert result.variance == Decimal("10.00")

    def test_tolerance_boundary(self):
        assert reconcile_debit(1000, 899.50, 100, tolerance=0.5).passed
        assert not reconcile_debit(1000, 899.50, 100, tolerance=0.49).passed

    def test_non_numeric_input_raises(self):
        with pytest.raises(AmountParseError):
            reconcile_debit("abc", 900, 100)


class TestReconcileCredit:
    def test_exact_credit(self):
        result = reconcile_credit(900, 1000, 100)
        assert result.passed
        assert result.actual_delta == Decimal("100.00")
        assert result.direction is TransactionDirection.CREDIT

    def test_debit_shape_fails_as_credit(self):
        assert not reconcile_credit(1000, 900, 100).passed

    @pytest.mark.parametrize(
        "before,after,amount,tolerance",
        [
            ("1000.00", "900.00", "100.00", "0"),
            ("1000.00", "900.00", "90.00", "0"),
            ("250.10", "240.00", "10.00", "0.10"),
            ("0.00", "-45.55", "45.55", "0"),
        ],
    )
    def test_swapping_balances_mirrors_debit(self, before, after, amount, tolerance):
        debit = reconcile_debit(before, after, amount, tolerance)
        credit = reconcile_credit(after, before, amount, tolerance)
        assert debit.passed == credit.passed
        assert debit.actual_delta == credit.actual_delta


class TestConvertAmount:
    """Buy divides by the rate, sell multiplies"""

    def test_sell(self):
        assert convert_amount(amount=100, rate=40.5, direction="sell") == Decimal("4050.00")

    def test_buy(self):
        assert convert_amount(amount=4050, rate=40.5, direction="buy") == Decimal("100.00")

    def test_direction_is_trimmed_and_case_insensitive(self):
        assert convert_amount(100, "40.5", " SELL ") == Decimal("4050.00")
        assert convert_amount(100, "3", ExchangeDirection.BUY) == Decimal("33.33")

    def test_invalid_direction(self):
        with pytest.raises(InvalidExchangeRateType) as exc_info:
            convert_amount(100, 40.5, "hold")
        assert exc_info.value.value == "hold"

    @pytest.mark.parametrize("rate", [0, -1, "abc", None])
    def test_invalid_rate(self, rate):
        with pytest.raises(InvalidExchangeRate):
            convert_amount(100, rate, "buy")

    @pytest.mark.parametrize("amount", ["12.34", "999.99", "0.01", "45911.10"])
    @pytest.mark.parametrize("rate", ["40.5", "1.2345", "46.10"])
    def test_sell_then_buy_round_trips(self, amount, rate):
        there = convert_amount(amount, rate, "sell")
        back = convert_amount(there, rate, "buy")
        assert abs(back - Decimal(amount)) <= Decimal("0.01")


class TestCrossCurrencyDebit:
    def test_sell_rate(self):
        result = reconcile_cross_currency_debit(10000, "5432.20", 100, "45.678", "sell")
        assert result.passed
        assert result.expected_delta == Decimal("4567.80")
        assert result.exchange_rate == Decimal("45.678")
        assert result.exchange_direction is ExchangeDirection.SELL

    def test_buy_rate_rounds_once(self):
        # 100 / 3 = 33.333..., rounded only when compared
        result = reconcile_cross_currency_debit(100, "66.67", 100, 3, "buy")
        assert result.passed
        assert result.expected_delta == Decimal("33.33")

    def test_mismatch_reports_context(self):
        result = reconcile_cross_currency_debit(10000, 5000, 100, "45.678", "sell")
        assert not result.passed
        text = result.describe()
        assert "FAIL" in text
        assert "45.678" in text
        assert "sell" in text


class TestBalanceReconciler:
    def test_check_debit_from_display_strings(self):
        result = BalanceReconciler().check_debit("MUR 1,000.00", "MUR 900.00", "100")
        assert result.passed

    def test_check_credit_from_display_strings(self):
        result = BalanceReconciler().check_credit("€ 900.00", "€ 1,000.00", 100)
        assert result.passed

    def test_configured_default_tolerance(self):
        config = VerificationConfig(reconciliation=ReconciliationConfig(default_tolerance=1.0))
        reconciler = BalanceReconciler(config)
        assert reconciler.check_debit("MUR 1,000.00", "MUR 899.50", 100).passed
        assert not reconciler.check_debit("MUR 1,000.00", "MUR 899.50", 100, tolerance=0).passed

    def test_cross_currency_detects_currency(self):
        result = BalanceReconciler().check_cross_currency_debit(
            "MUR 10,000.00", "MUR 5,432.20", 100, "45.678", "sell"
        )
        assert result.passed
        assert result.currency_code == "MUR"

    def test_cross_currency_credit(self):
        reconciler = BalanceReconciler()
        result = reconciler.check_cross_currency(
            "MUR 1,000.00", "MUR 5,500.00", 100, "45", "sell", direction="credit"
        )
        assert result.passed
        assert result.direction is TransactionDirection.CREDIT
        assert result.actual_delta == Decimal("4500.00")

        as_debit = reconciler.check_cross_currency_debit(
            "MUR 1,000.00", "MUR 5,500.00", 100, "45", "sell"
        )
        assert not as_debit.passed

    def test_assert_reconciled_raises(self):
        result = reconcile_debit(1000, 900, 90)
        with pytest.raises(ToleranceExceeded) as exc_info:
            BalanceReconciler.assert_reconciled(result)
        assert exc_info.value.result is result
        assert "expected 90.00" in str(exc_info.value)

    def test_assert_reconciled_passes_through(self):
        result = reconcile_debit(1000, 900, 100)
        assert BalanceReconciler.assert_reconciled(result) is result

    def test_run_cases(self):
        cases = [
            BalanceCheckCase("debit", Decimal("500"), Decimal("400"), Decimal("100")),
            BalanceCheckCase(
                "credit",
                Decimal("400"),
                Decimal("450"),
                Decimal("50"),
                direction=TransactionDirection.CREDIT,
            ),
            BalanceCheckCase(
                "fx",
                Decimal("10000"),
                Decimal("5432.20"),
                Decimal("100"),
                exchange_rate=Decimal("45.678"),
                exchange_direction=ExchangeDirection.SELL,
            ),
            BalanceCheckCase(
                "fee",
                Decimal("500"),
                Decimal("398"),
                Decimal("100"),
                tolerance=Decimal("1"),
            ),
        ]
        results = BalanceReconciler().run_cases(cases)
        assert [result.passed for _, result in results] == [True, True, True, False]
        assert results[2][1].exchange_direction is ExchangeDirection.SELL


class TestVerifyExpectedActual:
    def test_numeric_match_ignores_commas(self):
        verify_expected_actual("1,000.5", "1000.50")

    def test_numeric_mismatch(self):
        with pytest.raises(ValueMismatchError):
            verify_expected_actual("100.00", "100.01")

    def test_text_fallback(self):
        verify_expected_actual("Salary", " Salary ")
        with pytest.raises(ValueMismatchError):
            verify_expected_actual("Salary", "Rent")
