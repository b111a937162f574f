"""Expense models."""
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, NewType, Optional

from ledger.errors import MalformedExpenseError
from ledger.utils.enums import ExpenseCategory, SplitType
from ledger.utils.money import DEFAULT_CURRENCY, to_decimal
from ledger.utils.validators import pick, require_keys

UserId = NewType("UserId", str)


def user_key(value: Any) -> UserId:
    """
    Normalize a user reference to a UserId.

    Accepts ObjectIds, plain strings and populated user documents ({"_id": ...}).
    """
    if isinstance(value, dict):
        value = value.get("_id", value.get("id"))
    if value is None or value == "":
        raise ValueError("empty user reference")
    return UserId(str(value))


@dataclass(frozen=True)
class Share:
    user_id: UserId
    value: Decimal = Decimal("0")
    paid: bool = False
    paid_date: Optional[datetime] = None


@dataclass(frozen=True)
class Expense:
    id: str
    event_id: str
    payer_id: UserId
    amount: Decimal
    split_type: str = SplitType.EQUAL.value
    shares: List[Share] = field(default_factory=list)
    title: str = ""
    currency: str = DEFAULT_CURRENCY
    category: str = ExpenseCategory.OTHER.value

    @classmethod
    def from_document(
        cls,
        doc: Dict[str, Any],
        event_id: Optional[str] = None,
        default_id: Optional[str] = None
    ) -> "Expense":
        """
        Build an Expense from a stored document or a JSON payload.

        Both the stored camelCase keys (paidBy, splitType) and snake_case
        aliases are accepted. default_id names payloads that carry no _id.

        Raises:
            MalformedExpenseError: required fields missing or not numeric
        """
        expense_id = pick(doc, "_id", "id") if isinstance(doc, dict) else None
        expense_id = str(expense_id) if expense_id is not None else default_id

        require_keys(doc, "amount", ("paidBy", "paid_by", "payer_id"), expense_id=expense_id)

        try:
            amount = to_decimal(doc["amount"])
            payer_id = user_key(pick(doc, "paidBy", "paid_by", "payer_id"))
        except ValueError as e:
            raise MalformedExpenseError(str(e), expense_id)

        raw_shares = doc.get("shares") or []
        if not isinstance(raw_shares, list):
            raise MalformedExpenseError("shares must be a list", expense_id)

        shares = []
        for raw in raw_shares:
            if not isinstance(raw, dict):
                raise MalformedExpenseError("each share must be an object", expense_id)
            try:
                shares.append(Share(
                    user_id=user_key(pick(raw, "user", "user_id")),
                    value=to_decimal(raw.get("value", 0) or 0),
                    paid=bool(raw.get("paid", False)),
                    paid_date=pick(raw, "paidDate", "paid_date"),
                ))
            except ValueError as e:
                raise MalformedExpenseError(f"share: {e}", expense_id)

        split_type = pick(doc, "splitType", "split_type", default=SplitType.EQUAL.value)
        if isinstance(split_type, SplitType):
            split_type = split_type.value
        category = doc.get("category") or ExpenseCategory.OTHER.value
        if isinstance(category, ExpenseCategory):
            category = category.value

        return cls(
            id=expense_id or "",
            event_id=str(pick(doc, "event", "event_id", default=event_id or "")),
            payer_id=payer_id,
            amount=amount,
            split_type=str(split_type),
            shares=shares,
            title=doc.get("title") or "",
            currency=str(doc.get("currency") or DEFAULT_CURRENCY).upper(),
            category=str(category),
        )


@dataclass(frozen=True)
class CalculatedShare:
    share: Share
    calculated: int  # minor units

    @property
    def user_id(self) -> UserId:
        return self.share.user_id

    @property
    def paid(self) -> bool:
        return self.share.paid
