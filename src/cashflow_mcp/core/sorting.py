"""
Single-column sorting of transactions with tri-state column toggling.
"""

import locale
from decimal import Decimal
from functools import cmp_to_key
from typing import Any, Iterable, List

from cashflow_mcp.models.query import SortSpec
from cashflow_mcp.models.transaction import Transaction

SORTABLE_COLUMNS = frozenset(
    {
        "date",
        "amount",
        "net_amount",
        "tax_amount",
        "discount_amount",
        "due_amount",
        "exchange_rate",
        "type",
        "category",
        "payment_method",
        "status",
        "discount",
        "net",
        "tax",
    }
)

# Columns whose header id differs from the transaction field they sort on.
# Anything not listed sorts on the same-named field.
COLUMN_FIELDS = {
    "date": "transaction_date",
    "status": "payment_status",
    "net": "net_amount",
    "tax": "tax_amount",
    "discount": "discount_amount",
}


def is_sortable(column: str) -> bool:
    return column in SORTABLE_COLUMNS


def _sign(value: Any) -> int:
    return (value > 0) - (value < 0)


def sort_value(txn: Transaction, column: str) -> Any:
    """Extract the value a column sorts on, with missing values as ""."""
    value = getattr(txn, COLUMN_FIELDS.get(column, column), None)
    return "" if value is None else value


def _compare_values(a: Any, b: Any) -> int:
    numeric = (int, float, Decimal)
    if isinstance(a, numeric) and isinstance(b, numeric) and not isinstance(a, bool):
        return _sign(a - b)
    if type(a) is type(b) and not isinstance(a, str):
        # Dates compare chronologically
        return _sign((a > b) - (a < b))
    return _sign(locale.strcoll(str(a), str(b)))


def compare(a: Transaction, b: Transaction, sort: SortSpec) -> int:
    """
    Compare two transactions under the active sort.

    Returns:
        -1, 0 or 1; always 0 when no column is sorted
    """
    if not sort.is_sorted:
        return 0
    result = _compare_values(sort_value(a, sort.column), sort_value(b, sort.column))
    return -result if sort.order == "desc" else result


def sort_transactions(
    transactions: Iterable[Transaction], sort: SortSpec
) -> List[Transaction]:
    """
    Return a new list ordered by ``sort``.

    The sort is stable: ties, and every pair when unsorted, keep their
    input order.
    """
    items = list(transactions)
    if not sort.is_sorted:
        return items
    return sorted(items, key=cmp_to_key(lambda a, b: compare(a, b, sort)))


def toggle_sort(current: SortSpec, column: str) -> SortSpec:
    """
    Advance the tri-state sort after a click on ``column``.

    The same column cycles unsorted -> desc -> asc -> unsorted; a different
    column starts at desc. Non-sortable columns leave the state unchanged.
    """
    if not is_sortable(column):
        return current
    if current.column != column:
        return SortSpec(column=column, order="desc")
    if current.order == "desc":
        return SortSpec(column=column, order="asc")
    return SortSpec.unsorted()
