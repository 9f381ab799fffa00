"""
Integration tests for CashflowDatabase with a sample database.
"""

import json
from decimal import Decimal
from pathlib import Path

import pytest

from cashflow_mcp.core.database import CashflowDatabase
from cashflow_mcp.core.exceptions import (
    DatabaseNotFoundError,
    DecodeError,
    DependencyError,
    InvalidTransactionError,
    NotFoundError,
)
from cashflow_mcp.models.query import ListTransactionParams, StatsParams

NEW_TRANSACTION = {
    "type": "expense",
    "description": "Toner",
    "amount": "60",
    "transaction_date": "2026-01-18",
    "category": "Office",
    "payment_method": "pm_card",
}


@pytest.mark.integration
def test_database_initialization(database):
    """Test that database can be initialized."""
    assert database.is_available()
    assert len(database.transactions) == 5


@pytest.mark.integration
def test_database_not_found():
    """Test that DatabaseNotFoundError is raised for missing DB."""
    db = CashflowDatabase(Path("/nonexistent/path/cashflow.json"))
    assert not db.is_available()
    with pytest.raises(DatabaseNotFoundError):
        db.list_transactions()


@pytest.mark.integration
def test_database_invalid_document(tmp_path):
    """Test that malformed files raise DecodeError."""
    path = tmp_path / "bad.json"
    path.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(DecodeError):
        CashflowDatabase(path).list_transactions()

    path.write_text(json.dumps({"transactions": [{"id": "x"}]}), encoding="utf-8")
    with pytest.raises(DecodeError, match="Invalid record"):
        CashflowDatabase(path).list_transactions()


@pytest.mark.integration
def test_create_empty_database(empty_database):
    """Test creating a new empty database file."""
    assert empty_database.is_available()
    reopened = CashflowDatabase(empty_database.db_path)
    assert reopened.list_transactions() == []
    assert reopened.get_stats().total_transactions == 0


@pytest.mark.integration
def test_list_transactions_newest_first(database):
    """Test default listing order."""
    txns = database.list_transactions()
    assert [t.id for t in txns] == ["txn_3", "txn_5", "txn_2", "txn_1", "txn_4"]


@pytest.mark.integration
def test_list_transactions_with_filters_and_paging(database):
    """Test filters and limit/offset pushed to the database."""
    params = ListTransactionParams(type=["expense", "purchase"], limit=2, offset=1)
    txns = database.list_transactions(params)
    assert [t.id for t in txns] == ["txn_2", "txn_4"]
    assert database.count_transactions(params) == 3


@pytest.mark.integration
def test_search_and_recent(database):
    """Test free-text search and recent transactions."""
    assert [t.id for t in database.search_transactions("acme")] == ["txn_1"]
    assert [t.id for t in database.get_recent_transactions(limit=2)] == ["txn_3", "txn_5"]


@pytest.mark.integration
def test_get_transaction_not_found(database):
    """Test get transaction not found."""
    with pytest.raises(NotFoundError, match="transaction not found"):
        database.get_transaction("missing")


@pytest.mark.integration
def test_create_transaction_persists(database):
    """Test that created transactions are written to disk."""
    txn = database.create_transaction(NEW_TRANSACTION)
    assert txn.category == "Office"
    assert txn.category_id == "cat_office"
    assert txn.payment_method == "Card"
    assert txn.payment_method_id == "pm_card"
    assert txn.payment_status == "pending"
    assert txn.created_by == "default"
    assert txn.net_amount == Decimal("60")

    reopened = CashflowDatabase(database.db_path)
    assert reopened.get_transaction(txn.id) == txn


@pytest.mark.integration
def test_create_transaction_unknown_category_kept_as_text(database):
    """Test that an unknown category name is stored as plain text."""
    txn = database.create_transaction({**NEW_TRANSACTION, "category": "Travel"})
    assert txn.category == "Travel"
    assert txn.category_id == ""


@pytest.mark.integration
def test_create_transaction_invalid(database):
    """Test that an invalid transaction is rejected."""
    with pytest.raises(InvalidTransactionError):
        database.create_transaction({**NEW_TRANSACTION, "amount": "-1"})
    assert len(database.transactions) == 5


@pytest.mark.integration
def test_update_transaction_keeps_identity(database):
    """Test that an update replaces fields but keeps id and creation metadata."""
    original = database.get_transaction("txn_2")
    updated = database.update_transaction(
        "txn_2", {**NEW_TRANSACTION, "description": "Desk", "amount": "300"}
    )
    assert updated.id == "txn_2"
    assert updated.description == "Desk"
    assert updated.created_at == original.created_at
    assert database.get_transaction("txn_2").amount == Decimal("300")


@pytest.mark.integration
def test_update_missing_transaction(database):
    """Test updating a transaction that does not exist."""
    with pytest.raises(NotFoundError):
        database.update_transaction("missing", NEW_TRANSACTION)


@pytest.mark.integration
def test_delete_transaction(database):
    """Test that a delete is persisted."""
    database.delete_transaction("txn_5")
    assert database.count_transactions() == 4
    assert CashflowDatabase(database.db_path).count_transactions() == 4


@pytest.mark.integration
def test_get_stats_date_range(database):
    """Test statistics restricted to a date range."""
    stats = database.get_stats(StatsParams(from_date="2026-01-01", to_date="2026-01-31"))
    assert stats.total_transactions == 4
    assert stats.total_income == Decimal("1600")
    assert stats.total_expenses == Decimal("212.50")


@pytest.mark.integration
def test_transactions_by_category(database):
    """Test category summaries from the database."""
    summaries = database.get_transactions_by_category()
    assert summaries[0].category == "Sales"
    assert summaries[0].total_amount == Decimal("1100")


@pytest.mark.integration
def test_suggestions(database):
    """Test description and customer/vendor suggestions."""
    database.create_transaction({**NEW_TRANSACTION, "customer_vendor": "Paper Co"})
    vendors = database.get_customer_vendor_suggestions(search="co")
    assert vendors[0] == {"value": "Paper Co", "frequency": 2}

    descriptions = database.get_description_suggestions(transaction_type="income")
    assert descriptions == [{"value": "Website project", "frequency": 1}]


@pytest.mark.integration
def test_list_categories(database):
    """Test listing all, active and per-type categories."""
    assert [c.name for c in database.list_categories()] == ["Misc", "Office", "Sales"]
    assert [c.name for c in database.list_active_categories()] == ["Office", "Sales"]
    assert [c.name for c in database.list_categories_by_type("income")] == ["Misc", "Sales"]


@pytest.mark.integration
def test_category_dependencies(database):
    """Test that categories in use cannot be deleted."""
    assert database.check_category_dependencies("cat_office") == 2
    with pytest.raises(DependencyError) as exc_info:
        database.delete_category("cat_office")
    assert exc_info.value.count == 2
    assert str(exc_info.value) == "cannot delete category: it is used in 2 transaction(s)"

    database.delete_category("cat_misc")
    with pytest.raises(NotFoundError):
        database.get_category("cat_misc")


@pytest.mark.integration
def test_category_create_update_deactivate(database):
    """Test creating, renaming and deactivating a category."""
    category = database.create_category("Travel", "expense", color="#00f")
    assert database.get_category(category.id).color == "#00f"
    renamed = database.update_category(category.id, name="Trips")
    assert renamed.name == "Trips"
    assert database.deactivate_category(category.id).is_active is False


@pytest.mark.integration
def test_payment_method_dependencies(database):
    """Test that payment methods in use cannot be deleted."""
    assert database.check_payment_method_dependencies("pm_card") == 2
    with pytest.raises(DependencyError, match="payment method"):
        database.delete_payment_method("pm_card")

    method = database.create_payment_method("Bank transfer")
    database.delete_payment_method(method.id)
    assert [m.name for m in database.list_payment_methods()] == ["Card", "Cash"]


@pytest.mark.integration
def test_payment_method_deactivate(database):
    """Test deactivating and updating a payment method."""
    database.deactivate_payment_method("pm_cash")
    assert [m.name for m in database.list_active_payment_methods()] == ["Card"]
    assert database.update_payment_method("pm_cash", description="Petty cash").description == (
        "Petty cash"
    )


def _failing_save():
    raise OSError("disk full")


@pytest.mark.integration
def test_failed_write_leaves_transactions_unchanged(database, monkeypatch):
    """Test that create, update and delete roll back when the file cannot be written."""
    before = list(database.transactions)
    monkeypatch.setattr(database, "_save", _failing_save)

    with pytest.raises(OSError):
        database.create_transaction(NEW_TRANSACTION)
    with pytest.raises(OSError):
        database.update_transaction("txn_2", {**NEW_TRANSACTION, "description": "Desk"})
    with pytest.raises(OSError):
        database.delete_transaction("txn_5")

    assert database.transactions == before
    assert database.get_transaction("txn_2").description == "Office chair"

    monkeypatch.undo()
    database.create_transaction(NEW_TRANSACTION)
    assert CashflowDatabase(database.db_path).count_transactions() == 6


@pytest.mark.integration
def test_failed_write_leaves_categories_and_methods_unchanged(database, monkeypatch):
    """Test that category and payment method changes roll back on a failed write."""
    categories = list(database.categories)
    methods = list(database.payment_methods)
    monkeypatch.setattr(database, "_save", _failing_save)

    with pytest.raises(OSError):
        database.create_category("Travel", "expense")
    with pytest.raises(OSError):
        database.deactivate_category("cat_sales")
    with pytest.raises(OSError):
        database.delete_category("cat_misc")
    with pytest.raises(OSError):
        database.create_payment_method("Bank transfer")
    with pytest.raises(OSError):
        database.update_payment_method("pm_cash", description="Petty cash")

    assert database.categories == categories
    assert database.payment_methods == methods


@pytest.mark.integration
def test_save_leaves_no_temporary_file(database):
    """Test that writes replace the database file without leaving a .tmp behind."""
    database.create_transaction(NEW_TRANSACTION)
    assert [p.name for p in database.db_path.parent.iterdir()] == ["cashflow.json"]
