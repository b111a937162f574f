"""Core ledger logic: split calculation, balances and debt simplification."""

from .split_service import SplitCalculator
from .balance_service import Balance, BalanceAggregator
from .debt_service import DebtSimplifier, Transfer

__all__ = [
    "SplitCalculator",
    "Balance",
    "BalanceAggregator",
    "DebtSimplifier",
    "Transfer",
]
