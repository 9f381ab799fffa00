"""
Pydantic models for Cashflow data structures.
"""

from cashflow_mcp.models.category import Category
from cashflow_mcp.models.payment_method import PaymentMethod
from cashflow_mcp.models.query import (
    FilterSpec,
    ListTransactionParams,
    PageSpec,
    SortSpec,
    StatsParams,
)
from cashflow_mcp.models.stats import CategorySummary, TransactionStats
from cashflow_mcp.models.transaction import (
    Transaction,
    TransactionCreate,
    TransactionUpdate,
)

__all__ = [
    "Transaction",
    "TransactionCreate",
    "TransactionUpdate",
    "Category",
    "PaymentMethod",
    "FilterSpec",
    "ListTransactionParams",
    "StatsParams",
    "SortSpec",
    "PageSpec",
    "TransactionStats",
    "CategorySummary",
]
