"""
Split Calculator - per-participant obligations for one expense.

Responsibilities:
- Calculate equal, percentage, exact-amount and weighted splits
- Work in integer minor units, rounding half up
- Reconcile rounding remainders so shares sum exactly to the total
- Reject splits that cannot be computed (empty, zero weight, unknown users)
"""
import warnings
from decimal import Decimal
from typing import Iterable, List, Optional

from ledger.errors import InvalidSplitError, RoundingInconsistencyWarning
from ledger.expenses.models import CalculatedShare, Expense, UserId
from ledger.utils.enums import SplitType
from ledger.utils.money import currency_exponent, exact_minor, round_half_up, scale

# Percent points a percentage split may be off from 100
PERCENT_TOLERANCE = Decimal("0.01")


class SplitCalculator:
    """Service for expense split calculation and validation."""

    @classmethod
    def calculate_shares(
        cls,
        expense: Expense,
        members: Optional[Iterable[UserId]] = None
    ) -> List[CalculatedShare]:
        """
        Calculate each share's amount in minor units.

        Args:
            expense: Expense to split
            members: Optional set of event members the share users must belong to

        Returns:
            List of CalculatedShare in declaration order, summing to the
            expense total exactly

        Raises:
            InvalidSplitError: the split cannot be computed
        """
        exponent = currency_exponent(expense.currency)
        total = cls.total_minor(expense)
        cls.validate_shares(expense, members)

        split_type = expense.split_type
        if split_type == SplitType.EQUAL:
            exact = cls._equal_split(expense, total)
        elif split_type == SplitType.PERCENTAGE:
            exact = cls._percentage_split(expense, total)
        elif split_type == SplitType.AMOUNT:
            exact = cls._amount_split(expense, total, exponent)
        elif split_type == SplitType.SHARES:
            exact = cls._weighted_split(expense, total)
        else:
            raise InvalidSplitError(f"unknown split type {split_type!r}", expense.id)

        amounts = cls.reconcile(total, [round_half_up(value) for value in exact])

        if sum(amounts) != total:
            warnings.warn(
                f"Expense {expense.id}: shares sum to {sum(amounts)}, expected {total} minor units",
                RoundingInconsistencyWarning,
                stacklevel=2,
            )

        return [
            CalculatedShare(share=share, calculated=amount)
            for share, amount in zip(expense.shares, amounts)
        ]

    @classmethod
    def total_minor(cls, expense: Expense) -> int:
        """Expense total in minor units; must be positive."""
        exponent = currency_exponent(expense.currency)
        total = round_half_up(exact_minor(expense.amount, exponent))
        if total <= 0:
            raise InvalidSplitError(
                f"amount must be positive, got {expense.amount}", expense.id
            )
        return total

    @classmethod
    def validate_shares(
        cls,
        expense: Expense,
        members: Optional[Iterable[UserId]] = None
    ) -> None:
        """
        Structural checks that do not depend on the strategy.

        Checks:
        - At least one share
        - No negative values
        - No duplicate users
        - Payer and share users are event members (when members are known)
        """
        if not expense.shares:
            raise InvalidSplitError("no shares provided", expense.id)

        for share in expense.shares:
            if share.value < 0:
                raise InvalidSplitError(
                    f"negative value {share.value} for user {share.user_id}", expense.id
                )

        user_ids = [share.user_id for share in expense.shares]
        if len(user_ids) != len(set(user_ids)):
            raise InvalidSplitError("duplicate users in shares", expense.id)

        if members is not None:
            known = set(members)
            unknown = [uid for uid in user_ids if uid not in known]
            if expense.payer_id not in known:
                unknown.insert(0, expense.payer_id)
            if unknown:
                raise InvalidSplitError(
                    f"users are not members of the event: {unknown}", expense.id
                )

    @classmethod
    def reconcile(cls, total: int, amounts: List[int]) -> List[int]:
        """
        Hand out the rounding remainder one minor unit at a time.

        When the rounded amounts fall short of the total, leading shares get +1;
        when they overshoot, trailing shares that are still positive give one
        back. Either way earlier shares never end up smaller than later ones
        of the same exact size.
        """
        amounts = list(amounts)
        remainder = total - sum(amounts)
        step = 1 if remainder > 0 else -1
        order = range(len(amounts)) if step > 0 else range(len(amounts) - 1, -1, -1)

        while remainder != 0:
            adjusted = False
            for i in order:
                if remainder == 0:
                    break
                if step < 0 and amounts[i] <= 0:
                    continue
                amounts[i] += step
                remainder -= step
                adjusted = True
            if not adjusted:
                break

        return amounts

    @classmethod
    def _equal_split(cls, expense: Expense, total: int) -> List[Decimal]:
        n = len(expense.shares)
        return [Decimal(total) / n] * n

    @classmethod
    def _percentage_split(cls, expense: Expense, total: int) -> List[Decimal]:
        total_pct = sum(share.value for share in expense.shares)
        if abs(total_pct - 100) > PERCENT_TOLERANCE:
            raise InvalidSplitError(
                f"percentages must sum to 100, got {total_pct}", expense.id
            )
        return [Decimal(total) * share.value / 100 for share in expense.shares]

    @classmethod
    def _amount_split(cls, expense: Expense, total: int, exponent: int) -> List[Decimal]:
        exact = [share.value * scale(exponent) for share in expense.shares]
        cls._check_sum(expense, total, exact)
        return exact

    @classmethod
    def _weighted_split(cls, expense: Expense, total: int) -> List[Decimal]:
        total_weight = sum(share.value for share in expense.shares)
        if total_weight == 0:
            raise InvalidSplitError("share weights sum to zero", expense.id)
        return [Decimal(total) * share.value / total_weight for share in expense.shares]

    @classmethod
    def _check_sum(
        cls,
        expense: Expense,
        total: int,
        exact: List[Decimal]
    ) -> None:
        """Unrounded shares must match the total within half a minor unit per share."""
        tolerance = Decimal(len(exact)) / 2
        exact_sum = sum(exact)
        if abs(exact_sum - total) > tolerance:
            exponent = currency_exponent(expense.currency)
            raise InvalidSplitError(
                f"amounts cover {exact_sum / scale(exponent)} of {Decimal(total) / scale(exponent)}",
                expense.id,
            )
