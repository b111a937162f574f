"""
Tests for SettlementReport

Tests cover:
- End-to-end report over several expenses
- Display shape
- Idempotence
- Failure without partial results
"""
import pytest

from ledger.core import DebtSimplifier, Transfer
from ledger.errors import CurrencyMismatchError, InvalidSplitError
from ledger.settlements.services import SettlementReport


@pytest.fixture
def trip_expenses(make_expense):
    return [
        make_expense(90, "alice", ["alice", "bob", "carol"], expense_id="e1", category="lodging"),
        make_expense(60, "bob", [("alice", 50), ("bob", 50)], split_type="percentage",
                     expense_id="e2", category="food"),
        make_expense(30, "carol", [("carol", 10), ("alice", 20)], split_type="amount",
                     expense_id="e3"),
    ]


class TestSettlementReport:

    def test_full_report(self, trip_expenses):
        settlement = SettlementReport.build("trip-1", trip_expenses)

        assert settlement.total_amount == 18000
        assert settlement.expense_count == 3
        assert [b.user_id for b in settlement.balances] == ["alice", "bob", "carol"]
        assert [b.net for b in settlement.balances] == [1000, 0, -1000]
        assert settlement.transfers == [Transfer("carol", "alice", 1000)]

    def test_display_shape(self, trip_expenses):
        report = SettlementReport.build("trip-1", trip_expenses).to_dict()

        assert report["event_id"] == "trip-1"
        assert report["currency"] == "USD"
        assert report["total_amount"] == 180.0
        assert report["category_totals"] == {"lodging": 90.0, "food": 60.0, "other": 30.0}
        assert report["balances"][0] == {
            "user_id": "alice", "paid": 90.0, "owed": 80.0, "net": 10.0, "settled": 0.0,
        }
        assert report["transfers"] == [{"from_user": "carol", "to_user": "alice", "amount": 10.0}]

    def test_remainder_amounts_display_to_cents(self, make_expense):
        report = SettlementReport.build(
            "ev", [make_expense(100, "a", ["a", "b", "c"])]
        ).to_dict()

        assert [b["owed"] for b in report["balances"]] == [33.34, 33.33, 33.33]
        assert report["transfers"] == [
            {"from_user": "b", "to_user": "a", "amount": 33.33},
            {"from_user": "c", "to_user": "a", "amount": 33.33},
        ]

    def test_idempotent(self, trip_expenses):
        first = SettlementReport.build("trip-1", trip_expenses)
        second = SettlementReport.build("trip-1", trip_expenses)

        assert first == second
        assert first.to_dict() == second.to_dict()

    def test_transfers_settle_balances(self, make_expense):
        expenses = [
            make_expense(123.45, "a", ["a", "b", "c", "d"], expense_id="e1"),
            make_expense(67.89, "b", [("c", 2), ("d", 1)], split_type="shares", expense_id="e2"),
            make_expense(10, "d", [("a", 25), ("b", 75)], split_type="percentage", expense_id="e3"),
        ]

        settlement = SettlementReport.build("ev", expenses)
        nets = {b.user_id: b.net for b in settlement.balances}

        remaining = DebtSimplifier.apply(nets, settlement.transfers)
        assert all(v == 0 for v in remaining.values())
        assert sum(nets.values()) == 0

    def test_sole_share_holder_needs_no_transfers(self, make_expense):
        settlement = SettlementReport.build("ev", [make_expense(25, "a", ["a"])])

        assert settlement.balances[0].net == 0
        assert settlement.transfers == []

    def test_empty_event(self):
        report = SettlementReport.build("ev", [], default_currency="eur").to_dict()

        assert report["currency"] == "EUR"
        assert report["total_amount"] == 0.0
        assert report["balances"] == []
        assert report["transfers"] == []

    def test_zero_decimal_currency(self, make_expense):
        report = SettlementReport.build(
            "ev", [make_expense(1000, "a", ["a", "b", "c"], currency="JPY")]
        ).to_dict()

        assert report["total_amount"] == 1000.0
        assert [b["owed"] for b in report["balances"]] == [334.0, 333.0, 333.0]


class TestSettlementReportFailures:

    def test_zero_weight_produces_no_report(self, make_expense, trip_expenses):
        broken = make_expense(50, "bob", [("alice", 0), ("bob", 0)],
                              split_type="shares", expense_id="bad-split")

        with pytest.raises(InvalidSplitError) as exc:
            SettlementReport.build("trip-1", trip_expenses + [broken])

        assert exc.value.expense_id == "bad-split"

    def test_expense_without_id_named_by_position(self, make_expense):
        expenses = [
            make_expense(10, "a", ["a", "b"], expense_id=""),
            make_expense(10, "a", [("a", 0)], split_type="shares", expense_id=""),
        ]

        with pytest.raises(InvalidSplitError, match="#2") as exc:
            SettlementReport.build("ev", expenses)

        assert exc.value.expense_id == "#2"

    def test_members_enforced(self, trip_expenses):
        with pytest.raises(InvalidSplitError, match="carol"):
            SettlementReport.build("trip-1", trip_expenses, members=["alice", "bob"])

    def test_members_accepted(self, trip_expenses):
        settlement = SettlementReport.build(
            "trip-1", trip_expenses, members=["alice", "bob", "carol", "dave"]
        )

        assert settlement.expense_count == 3

    def test_mixed_currencies(self, make_expense):
        expenses = [
            make_expense(10, "a", ["a", "b"], expense_id="e1"),
            make_expense(10, "a", ["a", "b"], expense_id="e2", currency="EUR"),
        ]

        with pytest.raises(CurrencyMismatchError, match="USD, EUR"):
            SettlementReport.build("ev", expenses)
