"""Balance reconciliation and FX conversion."""

from .engine import (
    BalanceReconciler,
    convert_amount,
    deduct_amount,
    reconcile_credit,
    reconcile_cross_currency,
    reconcile_cross_currency_debit,
    reconcile_debit,
    round2,
    verify_expected_actual,
)

__all__ = [
    "BalanceReconciler",
    "convert_amount",
    "deduct_amount",
    "reconcile_credit",
    "reconcile_cross_currency",
    "reconcile_cross_currency_debit",
    "reconcile_debit",
    "round2",
    "verify_expected_actual",
]
