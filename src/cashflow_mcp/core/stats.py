"""
Statistics aggregation over transaction collections.

All sums are accumulated as Decimal so totals reproduce exactly in
currency display regardless of row count.
"""

from collections import defaultdict
from decimal import Decimal
from typing import Dict, Iterable, List, Tuple

from cashflow_mcp.models.stats import CategorySummary, TransactionStats
from cashflow_mcp.models.transaction import EXPENSE_TYPES, INCOME_TYPES, Transaction
from cashflow_mcp.utils.formatting import quantize_cents

ZERO = Decimal("0")


def aggregate(transactions: Iterable[Transaction]) -> TransactionStats:
    """
    Compute summary statistics.

    Income covers income and sale transactions, expenses cover expense and
    purchase transactions; both sum ``net_amount``. Pending totals use the
    same measure restricted to ``payment_status == "pending"``.

    Args:
        transactions: Transactions to summarize

    Returns:
        TransactionStats; an empty input yields all-zero stats
    """
    total_income = ZERO
    total_expenses = ZERO
    pending_income = ZERO
    pending_expenses = ZERO
    income_count = 0
    expense_count = 0
    count = 0

    for txn in transactions:
        count += 1
        pending = txn.payment_status == "pending"
        if txn.type in INCOME_TYPES:
            total_income += txn.net_amount
            income_count += 1
            if pending:
                pending_income += txn.net_amount
        elif txn.type in EXPENSE_TYPES:
            total_expenses += txn.net_amount
            expense_count += 1
            if pending:
                pending_expenses += txn.net_amount

    average = ZERO
    if count:
        average = quantize_cents((total_income + total_expenses) / count)

    return TransactionStats(
        total_income=total_income,
        total_expenses=total_expenses,
        net_profit=total_income - total_expenses,
        total_transactions=count,
        total_income_count=income_count,
        total_expense_count=expense_count,
        average_transaction=average,
        pending_income=pending_income,
        pending_expenses=pending_expenses,
    )


def summarize_by_category(
    transactions: Iterable[Transaction],
) -> List[CategorySummary]:
    """
    Group transactions by (category, type).

    Returns:
        One summary per group, sorted by total amount descending
    """
    totals: Dict[Tuple[str, str], Decimal] = defaultdict(lambda: ZERO)
    counts: Dict[Tuple[str, str], int] = defaultdict(int)

    for txn in transactions:
        key = (txn.category or "Uncategorized", txn.type)
        totals[key] += txn.net_amount
        counts[key] += 1

    summaries = [
        CategorySummary(category=cat, type=kind, count=counts[(cat, kind)], total_amount=amount)
        for (cat, kind), amount in totals.items()
    ]
    summaries.sort(key=lambda s: s.total_amount, reverse=True)
    return summaries
