"""Data models for verification."""

from .verification import (
    BalanceCheckCase,
    ExchangeDirection,
    ExpectedTransaction,
    MoneyAmount,
    ReconciliationResult,
    TransactionDirection,
)

__all__ = [
    "BalanceCheckCase",
    "ExchangeDirection",
    "ExpectedTransaction",
    "MoneyAmount",
    "ReconciliationResult",
    "TransactionDirection",
]
