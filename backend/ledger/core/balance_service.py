"""
Balance Aggregator - fold an event's expenses into per-user balances.

Responsibilities:
- Credit each payer with the full expense amount
- Debit each share-holder with their calculated share
- Track settled shares for display without touching owed amounts
- Check the zero-sum invariant
"""
import warnings
from dataclasses import dataclass
from typing import Dict, Iterable, Optional

from ledger.core.split_service import SplitCalculator
from ledger.errors import AggregationInconsistencyWarning
from ledger.expenses.models import Expense, UserId


@dataclass
class Balance:
    """Paid/owed totals for one user, in minor units."""
    user_id: UserId
    paid: int = 0
    owed: int = 0
    settled: int = 0

    @property
    def net(self) -> int:
        """Positive = is owed money, negative = owes money."""
        return self.paid - self.owed


class BalanceAggregator:
    """Calculate net balances across an event's expenses."""

    @classmethod
    def aggregate(
        cls,
        expenses: Iterable[Expense],
        members: Optional[Iterable[UserId]] = None
    ) -> Dict[UserId, Balance]:
        """
        Aggregate expenses into balances keyed by user.

        Args:
            expenses: Expense snapshot for one event
            members: Optional event members, forwarded to the split check

        Returns:
            {user_id: Balance}, in first-seen order

        Raises:
            InvalidSplitError: an expense has an invalid split
        """
        if members is not None:
            members = set(members)

        balances: Dict[UserId, Balance] = {}
        expense_count = 0

        for expense in expenses:
            calculated = SplitCalculator.calculate_shares(expense, members)
            expense_count += 1

            payer = cls._entry(balances, expense.payer_id)
            payer.paid += SplitCalculator.total_minor(expense)

            for share in calculated:
                entry = cls._entry(balances, share.user_id)
                entry.owed += share.calculated
                if share.paid:
                    entry.settled += share.calculated

        cls.check_zero_sum(balances.values(), tolerance=expense_count)
        return balances

    @staticmethod
    def _entry(balances: Dict[UserId, Balance], user_id: UserId) -> Balance:
        if user_id not in balances:
            balances[user_id] = Balance(user_id=user_id)
        return balances[user_id]

    @classmethod
    def check_zero_sum(cls, balances: Iterable[Balance], tolerance: int = 0) -> bool:
        """Warn when nets do not sum to zero within `tolerance` minor units."""
        total = sum(b.net for b in balances)
        if abs(total) > tolerance:
            warnings.warn(
                f"Balances sum to {total} minor units, expected 0",
                AggregationInconsistencyWarning,
                stacklevel=2,
            )
            return False
        return True

    @staticmethod
    def net_balances(balances: Dict[UserId, Balance]) -> Dict[UserId, int]:
        """Project balances to {user_id: net} for the debt simplifier."""
        return {user_id: b.net for user_id, b in balances.items()}
