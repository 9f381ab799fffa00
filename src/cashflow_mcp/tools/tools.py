"""
MCP tool definitions for Cashflow data.

Exposes the query engine and database functionality through the Model
Context Protocol.
"""

from typing import Any, Callable, Dict, List, Optional, Tuple

from cashflow_mcp.core.codec import encode_transaction, export_transactions, import_payloads
from cashflow_mcp.core.database import CashflowDatabase
from cashflow_mcp.core.pagination import page_numbers, page_slice, total_pages
from cashflow_mcp.core.sorting import SORTABLE_COLUMNS, is_sortable, sort_transactions
from cashflow_mcp.models.query import FilterSpec, PageSpec, SortSpec, StatsParams
from cashflow_mcp.models.transaction import Transaction
from cashflow_mcp.utils.date_utils import parse_period

FILTER_ARGUMENTS = (
    "from_date",
    "to_date",
    "type",
    "category",
    "payment_status",
    "payment_method",
    "customer_vendor",
    "search",
    "tags",
    "reference_number",
    "invoice_number",
    "min_amount",
    "max_amount",
    "has_tax",
    "has_discount",
    "is_recurring",
)


def _resolve_period(
    period: Optional[str], from_date: Optional[str], to_date: Optional[str]
) -> Tuple[Optional[str], Optional[str]]:
    if period:
        return parse_period(period)
    return from_date, to_date


class CashflowTools:
    """Collection of MCP tools for querying and editing Cashflow data."""

    def __init__(self, database: CashflowDatabase):
        """
        Initialize tools with a database connection.

        Args:
            database: CashflowDatabase instance
        """
        self.db = database

    def _query(
        self,
        period: Optional[str],
        sort_column: Optional[str],
        sort_order: Optional[str],
        filters: Dict[str, Any],
    ) -> Tuple[List[Transaction], SortSpec]:
        from_date, to_date = _resolve_period(
            period, filters.pop("from_date", None), filters.pop("to_date", None)
        )
        spec = FilterSpec(from_date=from_date, to_date=to_date, **filters)

        if sort_column and not is_sortable(sort_column):
            raise ValueError(
                f"Column is not sortable: {sort_column} "
                f"(sortable: {', '.join(sorted(SORTABLE_COLUMNS))})"
            )
        sort = SortSpec(column=sort_column, order=sort_order or "desc")
        return sort_transactions(self.db.query_transactions(spec), sort), sort

    def list_transactions(
        self,
        period: Optional[str] = None,
        sort_column: Optional[str] = None,
        sort_order: Optional[str] = None,
        page: int = 1,
        page_size: int = 50,
        **filters: Any,
    ) -> Dict[str, Any]:
        """
        Get one page of transactions with optional filters and sorting.

        Args:
            period: Period shorthand (this_month, last_30_days, ytd, etc.)
            sort_column: Sortable column id (date, amount, status, ...)
            sort_order: "asc" or "desc"
            page: 1-based page number
            page_size: Transactions per page
            **filters: Any of FILTER_ARGUMENTS

        Returns:
            Dict with the page of transactions and pagination metadata
        """
        unknown = set(filters) - set(FILTER_ARGUMENTS)
        if unknown:
            raise ValueError(f"Unknown filter: {', '.join(sorted(unknown))}")

        pagination = PageSpec(page=page, page_size=page_size)
        transactions, sort = self._query(period, sort_column, sort_order, filters)
        page_items = page_slice(transactions, pagination.page, pagination.page_size)
        pages = total_pages(len(transactions), pagination.page_size)

        return {
            "count": len(page_items),
            "total_count": len(transactions),
            "page": pagination.page,
            "page_size": pagination.page_size,
            "total_pages": pages,
            "page_numbers": page_numbers(pagination.page, pages),
            "sort": sort.model_dump(),
            "transactions": [encode_transaction(txn) for txn in page_items],
        }

    def get_transaction(self, transaction_id: str) -> Dict[str, Any]:
        return encode_transaction(self.db.get_transaction(transaction_id))

    def get_transaction_stats(
        self,
        period: Optional[str] = None,
        from_date: Optional[str] = None,
        to_date: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Get income/expense statistics for a date range.

        Returns:
            Dict with totals, counts, pending amounts, cash flow and trends
        """
        from_date, to_date = _resolve_period(period, from_date, to_date)
        stats = self.db.get_stats(StatsParams(from_date=from_date, to_date=to_date))
        return {
            "period": {"from_date": from_date, "to_date": to_date},
            **stats.model_dump(mode="json"),
        }

    def get_spending_by_category(
        self,
        period: Optional[str] = None,
        from_date: Optional[str] = None,
        to_date: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Get transaction totals aggregated by category and type.

        Returns:
            Dict with one entry per (category, type), largest total first
        """
        from_date, to_date = _resolve_period(period, from_date, to_date)
        summaries = self.db.get_transactions_by_category(
            StatsParams(from_date=from_date, to_date=to_date)
        )
        return {
            "period": {"from_date": from_date, "to_date": to_date},
            "category_count": len(summaries),
            "categories": [s.model_dump(mode="json") for s in summaries],
        }

    def create_transaction(self, **fields: Any) -> Dict[str, Any]:
        return encode_transaction(self.db.create_transaction(fields))

    def update_transaction(self, transaction_id: str, **fields: Any) -> Dict[str, Any]:
        return encode_transaction(self.db.update_transaction(transaction_id, fields))

    def delete_transaction(self, transaction_id: str) -> Dict[str, Any]:
        self.db.delete_transaction(transaction_id)
        return {"deleted": True, "transaction_id": transaction_id}

    def list_categories(
        self, type: Optional[str] = None, active_only: bool = False
    ) -> Dict[str, Any]:
        if type:
            categories = self.db.list_categories_by_type(type)
        else:
            categories = self.db.list_categories()
        if active_only:
            categories = [c for c in categories if c.is_active]
        return {
            "count": len(categories),
            "categories": [c.model_dump(mode="json") for c in categories],
        }

    def list_payment_methods(self, active_only: bool = False) -> Dict[str, Any]:
        if active_only:
            methods = self.db.list_active_payment_methods()
        else:
            methods = self.db.list_payment_methods()
        return {
            "count": len(methods),
            "payment_methods": [m.model_dump(mode="json") for m in methods],
        }

    def delete_category(self, category_id: str, confirm: bool = False) -> Dict[str, Any]:
        """
        Delete a category, refusing while transactions still use it.

        Without ``confirm`` the category is only checked, so the caller can
        tell "in use" apart from "safe to delete".
        """
        self.db.get_category(category_id)
        in_use = self.db.check_category_dependencies(category_id)
        return self._delete_checked(
            "category", in_use, confirm, lambda: self.db.delete_category(category_id)
        )

    def delete_payment_method(self, method_id: str, confirm: bool = False) -> Dict[str, Any]:
        """
        Delete a payment method, refusing while transactions still use it.

        Without ``confirm`` the payment method is only checked.
        """
        self.db.get_payment_method(method_id)
        in_use = self.db.check_payment_method_dependencies(method_id)
        return self._delete_checked(
            "payment method", in_use, confirm,
            lambda: self.db.delete_payment_method(method_id),
        )

    def _delete_checked(
        self, kind: str, in_use: int, confirm: bool, delete: Callable[[], None]
    ) -> Dict[str, Any]:
        if in_use > 0:
            return {
                "deleted": False,
                "in_use": in_use,
                "message": f"Cannot delete {kind}: it is used in {in_use} transaction(s)",
            }
        if not confirm:
            return {
                "deleted": False,
                "in_use": 0,
                "message": f"The {kind} is not in use; call again with confirm=true to delete",
            }
        delete()
        return {"deleted": True, "in_use": 0, "message": f"Deleted {kind}"}

    def export_transactions(
        self,
        period: Optional[str] = None,
        sort_column: Optional[str] = None,
        sort_order: Optional[str] = None,
        **filters: Any,
    ) -> Dict[str, Any]:
        """
        Export the filtered and sorted transactions as a JSON document.

        Returns:
            Dict with the number of exported transactions and the document text
        """
        unknown = set(filters) - set(FILTER_ARGUMENTS)
        if unknown:
            raise ValueError(f"Unknown filter: {', '.join(sorted(unknown))}")
        transactions, _ = self._query(period, sort_column, sort_order, filters)
        return {"count": len(transactions), "document": export_transactions(transactions)}

    def import_transactions(self, document: str) -> Dict[str, Any]:
        """
        Create transactions from an exported JSON document.

        The whole document is validated before anything is created.
        """
        payloads = import_payloads(document)
        created = [self.db.create_transaction(payload) for payload in payloads]
        return {"imported": len(created), "transaction_ids": [txn.id for txn in created]}

    def get_suggestions(
        self,
        field: str,
        type: str = "",
        search: str = "",
        limit: int = 10,
    ) -> Dict[str, Any]:
        """
        Get previously used descriptions or customers/vendors, most frequent first.

        Raises:
            ValueError: If field is not "description" or "customer_vendor"
        """
        if field == "description":
            suggestions = self.db.get_description_suggestions(type, search, limit)
        elif field == "customer_vendor":
            suggestions = self.db.get_customer_vendor_suggestions(type, search, limit)
        else:
            raise ValueError(f"Unknown suggestion field: {field}")
        return {"field": field, "suggestions": suggestions}


PERIOD_PROPERTY = {
    "type": "string",
    "description": (
        "Period shorthand: this_month, last_month, "
        "last_7_days, last_30_days, last_90_days, ytd, "
        "this_year, last_year"
    ),
}

DATE_PROPERTIES = {
    "from_date": {
        "type": "string",
        "description": "Start date, inclusive (YYYY-MM-DD)",
        "pattern": r"^\d{4}-\d{2}-\d{2}$",
    },
    "to_date": {
        "type": "string",
        "description": "End date, inclusive (YYYY-MM-DD)",
        "pattern": r"^\d{4}-\d{2}-\d{2}$",
    },
}


def _value_list(description: str, values: Optional[List[str]] = None) -> Dict[str, Any]:
    items: Dict[str, Any] = {"type": "string"}
    if values:
        items["enum"] = values
    return {"type": "array", "items": items, "description": description}


FILTER_PROPERTIES: Dict[str, Any] = {
    "period": PERIOD_PROPERTY,
    **DATE_PROPERTIES,
    "type": _value_list(
        "Allowed transaction types", ["income", "expense", "sale", "purchase"]
    ),
    "category": _value_list("Allowed category names"),
    "payment_status": _value_list(
        "Allowed payment statuses",
        ["pending", "completed", "partial", "cancelled", "due"],
    ),
    "payment_method": _value_list("Allowed payment method names"),
    "customer_vendor": {
        "type": "string",
        "description": "Customer/vendor (case-insensitive substring)",
    },
    "search": {
        "type": "string",
        "description": (
            "Search description, customer/vendor, reference and invoice numbers "
            "(case-insensitive substring)"
        ),
    },
    "tags": _value_list("Transaction must have every one of these tags"),
    "reference_number": {"type": "string", "description": "Reference number substring"},
    "invoice_number": {"type": "string", "description": "Invoice number substring"},
    "min_amount": {"type": "number", "description": "Minimum amount (inclusive)"},
    "max_amount": {"type": "number", "description": "Maximum amount (inclusive)"},
    "has_tax": {"type": "boolean", "description": "Only transactions with tax"},
    "has_discount": {"type": "boolean", "description": "Only transactions with a discount"},
    "is_recurring": {"type": "boolean", "description": "Match recurring flag"},
    "sort_column": {
        "type": "string",
        "enum": sorted(SORTABLE_COLUMNS),
        "description": "Column to sort by",
    },
    "sort_order": {"type": "string", "enum": ["asc", "desc"]},
}

TRANSACTION_PROPERTIES: Dict[str, Any] = {
    "type": {"type": "string", "enum": ["income", "expense", "sale", "purchase"]},
    "description": {"type": "string"},
    "amount": {"type": "number", "description": "Amount, greater than 0"},
    "transaction_date": {"type": "string", "pattern": r"^\d{4}-\d{2}-\d{2}"},
    "category": {"type": "string", "description": "Category id or name"},
    "tags": {"type": "array", "items": {"type": "string"}},
    "customer_vendor": {"type": "string"},
    "payment_method": {"type": "string", "description": "Payment method id or name"},
    "payment_status": {
        "type": "string",
        "enum": ["pending", "completed", "partial", "cancelled", "due"],
    },
    "reference_number": {"type": "string"},
    "invoice_number": {"type": "string"},
    "notes": {"type": "string"},
    "tax_amount": {"type": "number"},
    "discount_amount": {"type": "number"},
    "due_amount": {"type": "number"},
    "currency": {"type": "string"},
    "exchange_rate": {"type": "number"},
    "is_recurring": {"type": "boolean"},
    "recurring_frequency": {
        "type": "string",
        "enum": ["daily", "weekly", "monthly", "quarterly", "yearly", ""],
    },
    "recurring_end_date": {"type": "string"},
}

TRANSACTION_REQUIRED = ["type", "description", "amount", "transaction_date"]


def create_tool_schemas() -> List[Dict[str, Any]]:
    """
    Create MCP tool schemas for all tools.

    Returns:
        List of tool schema definitions
    """
    return [
        {
            "name": "list_transactions",
            "description": (
                "List transactions with optional filters, single-column sorting "
                "and pagination. Use 'period' for common date ranges."
            ),
            "inputSchema": {
                "type": "object",
                "properties": {
                    **FILTER_PROPERTIES,
                    "page": {"type": "integer", "default": 1, "minimum": 1},
                    "page_size": {"type": "integer", "default": 50, "minimum": 1},
                },
            },
        },
        {
            "name": "get_transaction",
            "description": "Get a single transaction by ID.",
            "inputSchema": {
                "type": "object",
                "properties": {"transaction_id": {"type": "string"}},
                "required": ["transaction_id"],
            },
        },
        {
            "name": "get_transaction_stats",
            "description": (
                "Get total income, expenses, net profit, averages, pending amounts "
                "and cash flow for a date range."
            ),
            "inputSchema": {
                "type": "object",
                "properties": {"period": PERIOD_PROPERTY, **DATE_PROPERTIES},
            },
        },
        {
            "name": "get_spending_by_category",
            "description": (
                "Get transaction counts and totals grouped by category and type, "
                "largest total first."
            ),
            "inputSchema": {
                "type": "object",
                "properties": {"period": PERIOD_PROPERTY, **DATE_PROPERTIES},
            },
        },
        {
            "name": "create_transaction",
            "description": "Record a new transaction.",
            "inputSchema": {
                "type": "object",
                "properties": TRANSACTION_PROPERTIES,
                "required": TRANSACTION_REQUIRED,
            },
        },
        {
            "name": "update_transaction",
            "description": "Replace an existing transaction with new values.",
            "inputSchema": {
                "type": "object",
                "properties": {
                    "transaction_id": {"type": "string"},
                    **TRANSACTION_PROPERTIES,
                },
                "required": ["transaction_id", *TRANSACTION_REQUIRED],
            },
        },
        {
            "name": "delete_transaction",
            "description": "Delete a transaction by ID.",
            "inputSchema": {
                "type": "object",
                "properties": {"transaction_id": {"type": "string"}},
                "required": ["transaction_id"],
            },
        },
        {
            "name": "list_categories",
            "description": "List categories, optionally only those usable for a type.",
            "inputSchema": {
                "type": "object",
                "properties": {
                    "type": {"type": "string", "enum": ["income", "expense", "both"]},
                    "active_only": {"type": "boolean", "default": False},
                },
            },
        },
        {
            "name": "delete_category",
            "description": (
                "Delete a category. Reports how many transactions use it and "
                "refuses while it is in use; requires confirm=true to delete."
            ),
            "inputSchema": {
                "type": "object",
                "properties": {
                    "category_id": {"type": "string"},
                    "confirm": {"type": "boolean", "default": False},
                },
                "required": ["category_id"],
            },
        },
        {
            "name": "list_payment_methods",
            "description": "List payment methods.",
            "inputSchema": {
                "type": "object",
                "properties": {"active_only": {"type": "boolean", "default": False}},
            },
        },
        {
            "name": "delete_payment_method",
            "description": (
                "Delete a payment method. Refuses while transactions use it; "
                "requires confirm=true to delete."
            ),
            "inputSchema": {
                "type": "object",
                "properties": {
                    "method_id": {"type": "string"},
                    "confirm": {"type": "boolean", "default": False},
                },
                "required": ["method_id"],
            },
        },
        {
            "name": "export_transactions",
            "description": "Export filtered and sorted transactions as a JSON document.",
            "inputSchema": {"type": "object", "properties": FILTER_PROPERTIES},
        },
        {
            "name": "import_transactions",
            "description": "Create transactions from a previously exported JSON document.",
            "inputSchema": {
                "type": "object",
                "properties": {"document": {"type": "string"}},
                "required": ["document"],
            },
        },
        {
            "name": "get_suggestions",
            "description": (
                "Get previously used descriptions or customers/vendors, "
                "most frequent first."
            ),
            "inputSchema": {
                "type": "object",
                "properties": {
                    "field": {"type": "string", "enum": ["description", "customer_vendor"]},
                    "type": {"type": "string"},
                    "search": {"type": "string"},
                    "limit": {"type": "integer", "default": 10},
                },
                "required": ["field"],
            },
        },
    ]
