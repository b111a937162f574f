from flask import Blueprint, request, jsonify

from ledger.core import SplitCalculator
from ledger.errors import InvalidSplitError, MalformedExpenseError
from ledger.expenses.models import Expense, user_key
from ledger.utils.money import currency_exponent, display

expenses_bp = Blueprint("expenses", __name__)


@expenses_bp.route("/calculate", methods=["POST"])
def calculate_split():
    """
    Calculate each participant's share of one expense without storing it.

    Lets callers reject an invalid split before persisting the expense.

    Request body:
    {
        "amount": 100.00,
        "paidBy": "...",
        "splitType": "equal|percentage|amount|shares",
        "currency": "USD",               // optional
        "shares": [{"user": "...", "value": 60}],
        "members": ["...", "..."]        // optional
    }
    """
    data = request.get_json(silent=True) or {}

    try:
        expense = Expense.from_document(data)
    except MalformedExpenseError as e:
        return jsonify({"error": str(e)}), 400

    members = data.get("members")
    if members is not None:
        if not isinstance(members, list):
            return jsonify({"error": "members must be a list"}), 400
        try:
            members = [user_key(m) for m in members]
        except (TypeError, ValueError) as e:
            return jsonify({"error": f"Invalid member: {e}"}), 400

    try:
        calculated = SplitCalculator.calculate_shares(expense, members)
    except InvalidSplitError as e:
        return jsonify({"error": e.reason}), 422

    exp = currency_exponent(expense.currency)
    return jsonify({
        "currency": expense.currency,
        "amount": display(SplitCalculator.total_minor(expense), exp),
        "split_type": expense.split_type,
        "shares": [
            {
                "user_id": c.user_id,
                "value": float(c.share.value),
                "amount": display(c.calculated, exp),
                "paid": c.paid,
            }
            for c in calculated
        ]
    })
