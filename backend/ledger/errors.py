"""Ledger error taxonomy and warning categories."""
from typing import Optional


class LedgerError(Exception):
    """Base class for errors raised while computing a settlement."""


class InvalidSplitError(LedgerError):
    """Share data of one expense cannot be turned into obligations."""

    def __init__(self, message: str, expense_id: Optional[str] = None):
        self.reason = message
        self.expense_id = expense_id
        if expense_id:
            message = f"Expense {expense_id} has an invalid split: {message}"
        super().__init__(message)


class MalformedExpenseError(LedgerError):
    """An expense document or payload is missing fields or has bad values."""

    def __init__(self, message: str, expense_id: Optional[str] = None):
        self.reason = message
        self.expense_id = expense_id
        if expense_id:
            message = f"Expense {expense_id} is malformed: {message}"
        super().__init__(message)


class CurrencyMismatchError(LedgerError):
    """A report was requested over expenses in more than one currency."""

    def __init__(self, currencies):
        self.currencies = list(currencies)
        super().__init__(
            f"Expenses use more than one currency: {', '.join(self.currencies)}"
        )


class RoundingInconsistencyWarning(UserWarning):
    """Calculated shares still differ from the expense total after reconciliation."""


class AggregationInconsistencyWarning(UserWarning):
    """Balances do not sum to zero, or debts and credits do not match."""
