"""
Unit tests for statistics aggregation.
"""

from decimal import Decimal

import pytest

from cashflow_mcp.core.stats import aggregate, summarize_by_category
from cashflow_mcp.models.transaction import Transaction


def make_transaction(txn_id: str, type: str, amount: str, **overrides) -> Transaction:
    fields = {
        "id": txn_id,
        "type": type,
        "description": f"Item {txn_id}",
        "amount": amount,
        "transaction_date": "2026-01-10",
    }
    fields.update(overrides)
    return Transaction(**fields)


@pytest.mark.unit
class TestAggregate:
    """Tests for aggregate."""

    def test_empty_input(self) -> None:
        """Test empty input."""
        stats = aggregate([])
        assert stats.total_income == Decimal("0")
        assert stats.total_expenses == Decimal("0")
        assert stats.net_profit == Decimal("0")
        assert stats.total_transactions == 0
        assert stats.average_transaction == Decimal("0")
        assert stats.pending_label == "All clear"

    def test_pending_income_and_settled_expense(self) -> None:
        """One pending income of 100 and one completed expense of 40."""
        stats = aggregate(
            [
                make_transaction("a", "income", "100", payment_status="pending"),
                make_transaction("b", "expense", "40", payment_status="completed"),
            ]
        )
        assert stats.total_income == Decimal("100")
        assert stats.total_expenses == Decimal("40")
        assert stats.net_profit == Decimal("60")
        assert stats.total_transactions == 2
        assert stats.total_income_count == 1
        assert stats.total_expense_count == 1
        assert stats.average_transaction == Decimal("70.00")
        assert stats.pending_income == Decimal("100")
        assert stats.pending_expenses == Decimal("0")
        assert stats.cash_flow == Decimal("-40")
        assert stats.cash_flow_trend == "down"
        assert stats.net_profit_trend == "up"

    def test_sample_totals(self, sample_transactions) -> None:
        """Test sample totals."""
        stats = aggregate(sample_transactions)
        assert stats.total_income == Decimal("1600")
        assert stats.total_expenses == Decimal("252.50")
        assert stats.net_profit == Decimal("1347.50")
        assert stats.total_income_count == 2
        assert stats.total_expense_count == 3
        assert stats.average_transaction == Decimal("370.50")
        assert stats.pending_income == Decimal("500")
        assert stats.pending_expenses == Decimal("200")
        assert stats.cash_flow == Decimal("1047.50")

    def test_sums_use_net_amount(self) -> None:
        """Test sums use net amount."""
        stats = aggregate(
            [make_transaction("a", "sale", "100", tax_amount="20", discount_amount="5")]
        )
        assert stats.total_income == Decimal("115")

    def test_decimal_sums_are_exact(self) -> None:
        """Test that many small amounts add up without float drift."""
        txns = [make_transaction(str(i), "expense", "0.10") for i in range(1000)]
        assert aggregate(txns).total_expenses == Decimal("100.00")

    def test_counts_partition_total(self, sample_transactions) -> None:
        """Test counts partition total."""
        stats = aggregate(sample_transactions)
        assert stats.total_income_count + stats.total_expense_count == stats.total_transactions

    def test_accepts_any_iterable(self, sample_transactions) -> None:
        """Test accepts any iterable."""
        stats = aggregate(txn for txn in sample_transactions)
        assert stats.total_transactions == 5


@pytest.mark.unit
class TestSummarizeByCategory:
    """Tests for summarize_by_category."""

    def test_groups_by_category_and_type(self, sample_transactions) -> None:
        """Test groups by category and type."""
        summaries = summarize_by_category(sample_transactions)
        keys = [(s.category, s.type) for s in summaries]
        assert keys[0] == ("Sales", "income")
        assert ("Office", "expense") in keys
        assert ("Office", "purchase") in keys
        assert ("Uncategorized", "expense") in keys

    def test_sorted_by_total_descending(self, sample_transactions) -> None:
        """Test that category summaries are ordered by total, largest first."""
        totals = [s.total_amount for s in summarize_by_category(sample_transactions)]
        assert totals == sorted(totals, reverse=True)

    def test_counts(self) -> None:
        """Test count and total for a single category."""
        summaries = summarize_by_category(
            [
                make_transaction("a", "expense", "10", category="Food"),
                make_transaction("b", "expense", "15", category="Food"),
            ]
        )
        assert len(summaries) == 1
        assert summaries[0].count == 2
        assert summaries[0].total_amount == Decimal("25")
