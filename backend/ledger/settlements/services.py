"""Settlement report - who owes what, and how to settle up, for one event."""
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, List, Optional

from ledger.core import Balance, BalanceAggregator, DebtSimplifier, SplitCalculator, Transfer
from ledger.errors import CurrencyMismatchError
from ledger.expenses.models import Expense, user_key
from ledger.utils.money import DEFAULT_CURRENCY, currency_exponent, display


@dataclass(frozen=True)
class Settlement:
    """Report for one event. Money is held in minor units until to_dict()."""
    event_id: str
    currency: str
    total_amount: int
    expense_count: int
    balances: List[Balance] = field(default_factory=list)
    transfers: List[Transfer] = field(default_factory=list)
    category_totals: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Display shape: major units rounded to the currency's decimals."""
        exp = currency_exponent(self.currency)
        return {
            "event_id": self.event_id,
            "currency": self.currency,
            "total_amount": display(self.total_amount, exp),
            "expense_count": self.expense_count,
            "category_totals": {
                category: display(amount, exp)
                for category, amount in self.category_totals.items()
            },
            "balances": [
                {
                    "user_id": b.user_id,
                    "paid": display(b.paid, exp),
                    "owed": display(b.owed, exp),
                    "net": display(b.net, exp),
                    "settled": display(b.settled, exp),
                }
                for b in self.balances
            ],
            "transfers": [
                {
                    "from_user": t.from_user,
                    "to_user": t.to_user,
                    "amount": display(t.amount, exp),
                }
                for t in self.transfers
            ],
        }


class SettlementReport:
    """Compose split calculation, aggregation and simplification."""

    @classmethod
    def build(
        cls,
        event_id: str,
        expenses: Iterable[Expense],
        members: Optional[Iterable[Any]] = None,
        default_currency: str = DEFAULT_CURRENCY
    ) -> Settlement:
        """
        Build the settlement report for an event.

        Args:
            event_id: Event the expenses belong to
            expenses: Consistent snapshot of the event's expenses
            members: Optional event members (creator, organizers, participants);
                when given, every payer and share user must be one of them
            default_currency: Currency reported when there are no expenses

        Returns:
            Settlement

        Raises:
            InvalidSplitError: an expense has an invalid split (names the expense)
            CurrencyMismatchError: expenses use more than one currency
        """
        # Expenses without an id are named by position so errors can point at them
        expenses = [
            expense if expense.id else replace(expense, id=f"#{i}")
            for i, expense in enumerate(expenses, start=1)
        ]
        member_ids = None
        if members is not None:
            member_ids = {user_key(m) for m in members}

        currency = cls._currency(expenses, default_currency)

        balances = BalanceAggregator.aggregate(expenses, member_ids)
        transfers = DebtSimplifier.simplify(BalanceAggregator.net_balances(balances))

        total = 0
        category_totals: Dict[str, int] = {}
        for expense in expenses:
            amount = SplitCalculator.total_minor(expense)
            total += amount
            category_totals[expense.category] = category_totals.get(expense.category, 0) + amount

        return Settlement(
            event_id=str(event_id),
            currency=currency,
            total_amount=total,
            expense_count=len(expenses),
            balances=list(balances.values()),
            transfers=transfers,
            category_totals=category_totals,
        )

    @staticmethod
    def _currency(expenses: List[Expense], default_currency: str) -> str:
        currencies = []
        for expense in expenses:
            if expense.currency not in currencies:
                currencies.append(expense.currency)
        if len(currencies) > 1:
            raise CurrencyMismatchError(currencies)
        return currencies[0] if currencies else default_currency.upper()
