"""Shared fixtures for ledger tests."""
from decimal import Decimal

import pytest

from ledger import create_app
from ledger.config import TestConfig
from ledger.expenses.models import Expense, Share, UserId


@pytest.fixture
def make_expense():
    """
    Factory for Expense records.

    shares accepts user ids, (user, value) or (user, value, paid) tuples.
    """
    def _make(amount, payer, shares, split_type="equal", expense_id="e1",
              currency="USD", category="other", event_id="ev1"):
        built = []
        for s in shares:
            if isinstance(s, tuple):
                user, value, *rest = s
                built.append(Share(
                    user_id=UserId(user),
                    value=Decimal(str(value)),
                    paid=bool(rest and rest[0]),
                ))
            else:
                built.append(Share(user_id=UserId(s)))
        return Expense(
            id=expense_id,
            event_id=event_id,
            payer_id=UserId(payer),
            amount=Decimal(str(amount)),
            split_type=split_type,
            shares=built,
            currency=currency,
            category=category,
        )
    return _make


@pytest.fixture
def app():
    """Flask app on the test config. MongoClient connects lazily, no server needed."""
    return create_app(TestConfig)


@pytest.fixture
def client(app):
    return app.test_client()
