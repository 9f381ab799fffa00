"""
Core functionality for Cashflow MCP.
"""

from cashflow_mcp.core.codec import export_transactions, import_payloads, import_transactions
from cashflow_mcp.core.database import CashflowDatabase
from cashflow_mcp.core.engine import TransactionBackend, TransactionQueryEngine
from cashflow_mcp.core.exceptions import (
    CashflowError,
    DatabaseNotFoundError,
    DecodeError,
    DependencyError,
    InvalidTransactionError,
    NotFoundError,
)
from cashflow_mcp.core.filters import filter_transactions, matches
from cashflow_mcp.core.pagination import page_numbers, page_slice, total_pages
from cashflow_mcp.core.sorting import compare, sort_transactions, toggle_sort
from cashflow_mcp.core.state import AppState
from cashflow_mcp.core.stats import aggregate, summarize_by_category

__all__ = [
    "CashflowDatabase",
    "TransactionBackend",
    "TransactionQueryEngine",
    "AppState",
    "matches",
    "filter_transactions",
    "compare",
    "sort_transactions",
    "toggle_sort",
    "aggregate",
    "summarize_by_category",
    "total_pages",
    "page_slice",
    "page_numbers",
    "export_transactions",
    "import_transactions",
    "import_payloads",
    "CashflowError",
    "DatabaseNotFoundError",
    "DecodeError",
    "DependencyError",
    "InvalidTransactionError",
    "NotFoundError",
]
