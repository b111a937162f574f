"""
Debt Simplifier - reduce net balances to point-to-point transfers.

Greedy matching: the largest debtor pays the largest creditor until one of
them is square, then moves on. Deterministic for equal balances because ties
are broken by user id.
"""
import warnings
from dataclasses import dataclass
from typing import Dict, List, Mapping, Tuple

from ledger.errors import AggregationInconsistencyWarning
from ledger.expenses.models import UserId
from ledger.utils.money import floor_minor


@dataclass(frozen=True)
class Transfer:
    """One settlement instruction, in minor units."""
    from_user: UserId
    to_user: UserId
    amount: int


class DebtSimplifier:
    """Minimize settlement transactions for a set of net balances."""

    @classmethod
    def simplify(cls, balances: Mapping[UserId, int]) -> List[Transfer]:
        """
        Calculate who pays whom.

        Args:
            balances: {user_id: net} in minor units; positive = is owed money

        Returns:
            Transfers in emission order (debtors most-negative first)
        """
        debtors, creditors = cls._partition(balances)

        if not debtors or not creditors:
            if debtors or creditors:
                warnings.warn(
                    f"Only one side has balances ({len(debtors)} debtors, "
                    f"{len(creditors)} creditors); nothing to settle",
                    AggregationInconsistencyWarning,
                    stacklevel=2,
                )
            return []

        total_debt = sum(remaining for _, remaining in debtors)
        total_credit = sum(remaining for _, remaining in creditors)
        if total_debt != total_credit:
            warnings.warn(
                f"Debts ({total_debt}) and credits ({total_credit}) do not match",
                AggregationInconsistencyWarning,
                stacklevel=2,
            )

        transfers = []
        c = 0

        for debtor_id, debt in debtors:
            while debt > 0 and c < len(creditors):
                creditor_id, credit = creditors[c]
                amount = min(debt, credit)

                if amount > 0:
                    transfers.append(Transfer(
                        from_user=debtor_id,
                        to_user=creditor_id,
                        amount=amount
                    ))

                debt -= amount
                credit -= amount
                creditors[c] = (creditor_id, credit)

                if credit <= 0:
                    c += 1

        return transfers

    @staticmethod
    def _partition(
        balances: Mapping[UserId, int]
    ) -> Tuple[List[Tuple[UserId, int]], List[Tuple[UserId, int]]]:
        """
        Split into (debtors, creditors) with positive remaining amounts.

        Debtors: most negative first. Creditors: largest first. Ties by user id.
        """
        debtors = []
        creditors = []

        for user_id, net in balances.items():
            net = floor_minor(net) if net > 0 else -floor_minor(-net)
            if net < 0:
                debtors.append((user_id, net))
            elif net > 0:
                creditors.append((user_id, net))

        debtors.sort(key=lambda x: (x[1], x[0]))
        creditors.sort(key=lambda x: (-x[1], x[0]))

        return (
            [(user_id, -net) for user_id, net in debtors],
            creditors,
        )

    @staticmethod
    def apply(
        balances: Mapping[UserId, int],
        transfers: List[Transfer]
    ) -> Dict[UserId, int]:
        """Replay transfers against balances and return what is left."""
        remaining = dict(balances)
        for t in transfers:
            remaining[t.from_user] = remaining.get(t.from_user, 0) + t.amount
            remaining[t.to_user] = remaining.get(t.to_user, 0) - t.amount
        return remaining
