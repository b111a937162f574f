"""Settlement routes - balances and simplified debts for an event."""
import warnings

from flask import Blueprint, current_app, jsonify, request

from ledger.errors import LedgerError, MalformedExpenseError
from ledger.expenses.models import Expense
from ledger.expenses.services import event_members, get_event, list_event_expenses
from ledger.settlements.services import SettlementReport

settlements_bp = Blueprint("settlements", __name__)


# ------------------ HELPERS ------------------

def _too_many(count):
    limit = current_app.config["LEDGER_MAX_EXPENSES"]
    if count > limit:
        return jsonify({"error": f"Too many expenses ({count}); limit is {limit}"}), 413
    return None


def _error(e, status):
    body = {"error": str(e)}
    expense_id = getattr(e, "expense_id", None)
    if expense_id:
        body["expense_id"] = expense_id
    return jsonify(body), status


def _report_response(event_id, expenses, members=None):
    """Build the report and attach any inconsistency warnings."""
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        settlement = SettlementReport.build(
            event_id,
            expenses,
            members=members,
            default_currency=current_app.config["LEDGER_DEFAULT_CURRENCY"]
        )

    body = settlement.to_dict()
    body["warnings"] = [str(w.message) for w in caught]
    for message in body["warnings"]:
        print(f"[SETTLEMENTS] event {event_id}: {message}")
    return jsonify(body)


# ------------------ ROUTES ------------------

@settlements_bp.route("/summary/<event_id>", methods=["GET"])
def get_summary(event_id):
    """
    Balances and simplified debts for a stored event.

    Returns:
    {
        "event_id": "...",
        "currency": "USD",
        "total_amount": 300.00,
        "balances": [{"user_id": "...", "paid": 300.00, "owed": 100.00, "net": 200.00, "settled": 0.0}],
        "transfers": [{"from_user": "...", "to_user": "...", "amount": 100.00}],
        ...
    }
    """
    try:
        event = get_event(event_id)
        if not event:
            return jsonify({"error": "Event not found"}), 404

        limit = current_app.config["LEDGER_MAX_EXPENSES"]
        expenses = list_event_expenses(event["_id"], limit=limit + 1)

        rejected = _too_many(len(expenses))
        if rejected:
            return rejected

        return _report_response(event_id, expenses, members=event_members(event))
    except LedgerError as e:
        return _error(e, 422)
    except Exception as e:
        print(f"[SETTLEMENTS] summary failed for {event_id}: {e}")
        return jsonify({"error": str(e)}), 500


@settlements_bp.route("/preview", methods=["POST"])
def preview_settlement():
    """
    Same report over expenses supplied in the request (nothing is read or stored).

    Request body:
    {
        "event_id": "...",               // optional
        "members": ["u1", "u2"],        // optional
        "expenses": [
            {"_id": "e1", "amount": 90, "paidBy": "u1", "splitType": "equal",
             "shares": [{"user": "u1"}, {"user": "u2"}]}
        ]
    }
    """
    data = request.get_json(silent=True)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        return jsonify({"error": "Request body must be a JSON object"}), 400

    event_id = str(data.get("event_id", ""))
    raw_expenses = data.get("expenses")

    if not isinstance(raw_expenses, list):
        return jsonify({"error": "expenses must be a list"}), 400

    rejected = _too_many(len(raw_expenses))
    if rejected:
        return rejected

    try:
        expenses = [
            Expense.from_document(doc, event_id=event_id, default_id=f"#{i}")
            for i, doc in enumerate(raw_expenses, start=1)
        ]
    except MalformedExpenseError as e:
        return _error(e, 400)

    members = data.get("members")
    if members is not None and not isinstance(members, list):
        return jsonify({"error": "members must be a list"}), 400

    try:
        return _report_response(event_id, expenses, members=members)
    except LedgerError as e:
        return _error(e, 422)
    except ValueError as e:
        return jsonify({"error": f"Invalid member: {e}"}), 400
