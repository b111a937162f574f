"""Payload validators shared by the expense parser and the routes."""
from typing import Any, Dict, Optional

from ledger.errors import MalformedExpenseError


def require_keys(payload, *keys, expense_id: Optional[str] = None):
    """
    Ensure every key is present (and not None) in a payload.

    A key may be given as a tuple of aliases, e.g. ("paidBy", "paid_by").
    """
    if not isinstance(payload, dict):
        raise MalformedExpenseError("payload must be an object", expense_id)

    missing = []
    for key in keys:
        aliases = key if isinstance(key, tuple) else (key,)
        if all(payload.get(alias) is None for alias in aliases):
            missing.append(aliases[0])
    if missing:
        raise MalformedExpenseError(f"missing keys: {missing}", expense_id)
    return True


def pick(payload: Dict[str, Any], *aliases, default=None):
    """First non-None value among aliases."""
    for alias in aliases:
        value = payload.get(alias)
        if value is not None:
            return value
    return default
