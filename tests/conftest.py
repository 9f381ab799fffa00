"""
Pytest configuration and fixtures for cashflow-mcp tests.
"""

import json
from pathlib import Path
from typing import Any, Dict, List

import pytest

from cashflow_mcp.core.database import CashflowDatabase
from cashflow_mcp.models.transaction import Transaction

SAMPLE_CATEGORIES: List[Dict[str, Any]] = [
    {"id": "cat_sales", "name": "Sales", "type": "income"},
    {"id": "cat_office", "name": "Office", "type": "expense"},
    {"id": "cat_misc", "name": "Misc", "type": "both", "is_active": False},
]

SAMPLE_PAYMENT_METHODS: List[Dict[str, Any]] = [
    {"id": "pm_card", "name": "Card"},
    {"id": "pm_cash", "name": "Cash"},
]

# Newest first: txn_3, txn_5, txn_2, txn_1, txn_4
SAMPLE_TRANSACTIONS: List[Dict[str, Any]] = [
    {
        "id": "txn_1",
        "type": "income",
        "description": "Website project",
        "amount": "1000",
        "transaction_date": "2026-01-05",
        "category": "Sales",
        "category_id": "cat_sales",
        "tags": ["client", "web"],
        "customer_vendor": "Acme Corp",
        "payment_method": "Card",
        "payment_method_id": "pm_card",
        "payment_status": "completed",
        "reference_number": "REF-001",
        "invoice_number": "INV-100",
        "tax_amount": "100",
        "created_at": "2026-01-05T09:00:00+00:00",
    },
    {
        "id": "txn_2",
        "type": "expense",
        "description": "Office chair",
        "amount": "250",
        "transaction_date": "2026-01-10",
        "category": "Office",
        "category_id": "cat_office",
        "tags": ["furniture"],
        "customer_vendor": "Furniture Hub",
        "payment_method": "Cash",
        "payment_method_id": "pm_cash",
        "payment_status": "pending",
        "discount_amount": "50",
        "created_at": "2026-01-10T09:00:00+00:00",
    },
    {
        "id": "txn_3",
        "type": "sale",
        "description": "Consulting",
        "amount": "500",
        "transaction_date": "2026-01-20",
        "category": "Sales",
        "category_id": "cat_sales",
        "tags": ["client"],
        "customer_vendor": "Globex",
        "payment_method": "Card",
        "payment_method_id": "pm_card",
        "payment_status": "pending",
        "created_at": "2026-01-20T09:00:00+00:00",
    },
    {
        "id": "txn_4",
        "type": "purchase",
        "description": "Printer paper",
        "amount": "40",
        "transaction_date": "2025-12-28",
        "category": "Office",
        "category_id": "cat_office",
        "customer_vendor": "Paper Co",
        "payment_method": "Cash",
        "payment_method_id": "pm_cash",
        "payment_status": "completed",
        "is_recurring": True,
        "recurring_frequency": "monthly",
        "created_at": "2025-12-28T09:00:00+00:00",
    },
    {
        "id": "txn_5",
        "type": "expense",
        "description": "Coffee",
        "amount": "12.50",
        "transaction_date": "2026-01-15",
        "payment_status": "cancelled",
        "created_at": "2026-01-15T09:00:00+00:00",
    },
]


@pytest.fixture
def sample_transactions() -> List[Transaction]:
    """Sample transactions as model instances, in storage order."""
    return [Transaction.model_validate(record) for record in SAMPLE_TRANSACTIONS]


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    """Path to a sample JSON database written for the test."""
    path = tmp_path / "cashflow.json"
    document = {
        "transactions": SAMPLE_TRANSACTIONS,
        "categories": SAMPLE_CATEGORIES,
        "payment_methods": SAMPLE_PAYMENT_METHODS,
    }
    path.write_text(json.dumps(document, indent=2), encoding="utf-8")
    return path


@pytest.fixture
def database(db_path: Path) -> CashflowDatabase:
    """CashflowDatabase backed by the sample database."""
    return CashflowDatabase(db_path)


@pytest.fixture
def empty_database(tmp_path: Path) -> CashflowDatabase:
    """Freshly created database with no records."""
    return CashflowDatabase.create(tmp_path / "empty.json")
