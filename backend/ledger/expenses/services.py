"""Read-only access to an event's expense snapshot."""
from typing import Any, Dict, List, Optional

from bson import ObjectId, errors

from ledger.expenses.models import Expense, UserId, user_key
from ledger.extensions import db as mongo


def safe_object_id(value):
    try:
        return ObjectId(value)
    except (errors.InvalidId, TypeError):
        return None


def get_event(event_id: str) -> Optional[Dict[str, Any]]:
    """Event document, or None when the id is invalid or unknown."""
    event_oid = safe_object_id(event_id)
    if event_oid is None:
        return None
    return mongo.events.find_one({"_id": event_oid})


def event_members(event: Dict[str, Any]) -> List[UserId]:
    """Creator, organizers and participants of an event, first-seen order."""
    members = []
    creator = event.get("creator", event.get("creator_id"))
    if creator is not None:
        members.append(user_key(creator))

    for group in ("organizers", "participants"):
        for entry in event.get(group) or []:
            ref = entry.get("user") if isinstance(entry, dict) else entry
            if ref is None:
                continue
            uid = user_key(ref)
            if uid not in members:
                members.append(uid)

    return members


def list_event_expenses(event_oid: ObjectId, limit: int = 0) -> List[Expense]:
    """
    Read all expenses of an event in one query.

    Ordered by date then _id so repeated reads of the same data give the
    same report.

    Raises:
        MalformedExpenseError: a stored document cannot be parsed
    """
    cursor = mongo.expenses.find({"event": event_oid}).sort([("date", 1), ("_id", 1)])
    if limit:
        cursor = cursor.limit(limit)
    return [Expense.from_document(doc, event_id=str(event_oid)) for doc in cursor]
