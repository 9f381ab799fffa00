"""
Client-side filter evaluation.

Decides whether a transaction satisfies a FilterSpec. All predicates are
combined with AND; any predicate left unset (None, empty string or empty
set) does not constrain.
"""

import logging
from datetime import date
from typing import Iterable, List, Optional, Tuple

from cashflow_mcp.models.query import FilterSpec
from cashflow_mcp.models.transaction import Transaction
from cashflow_mcp.utils.date_utils import parse_date

logger = logging.getLogger(__name__)

SEARCH_FIELDS = ("description", "customer_vendor", "reference_number", "invoice_number")


def date_bounds(filters: FilterSpec) -> Tuple[Optional[date], Optional[date]]:
    """
    Resolve the filter's date range into calendar dates.

    A bound that cannot be parsed is dropped (that side is unconstrained).
    """
    bounds = []
    for name in ("from_date", "to_date"):
        raw = getattr(filters, name)
        parsed = parse_date(raw)
        if raw and parsed is None:
            logger.warning(f"Ignoring unparsable {name} filter: {raw!r}")
        bounds.append(parsed)
    return bounds[0], bounds[1]


def _contains(haystack: str, needle: str) -> bool:
    return needle.lower() in (haystack or "").lower()


def _in_date_range(
    txn: Transaction, start: Optional[date], end: Optional[date]
) -> bool:
    if start is not None and txn.transaction_date < start:
        return False
    if end is not None and txn.transaction_date > end:
        return False
    return True


def _matches(
    txn: Transaction,
    filters: FilterSpec,
    start: Optional[date],
    end: Optional[date],
) -> bool:
    if not _in_date_range(txn, start, end):
        return False

    if filters.type and txn.type not in filters.type:
        return False
    if filters.category and txn.category not in filters.category:
        return False
    if filters.payment_status and txn.payment_status not in filters.payment_status:
        return False
    if filters.payment_method and txn.payment_method not in filters.payment_method:
        return False

    if filters.customer_vendor and not _contains(txn.customer_vendor, filters.customer_vendor):
        return False
    if filters.reference_number and not _contains(
        txn.reference_number, filters.reference_number
    ):
        return False
    if filters.invoice_number and not _contains(txn.invoice_number, filters.invoice_number):
        return False
    if filters.search and not any(
        _contains(getattr(txn, field), filters.search) for field in SEARCH_FIELDS
    ):
        return False

    if filters.tags and not filters.tags.issubset(txn.tags):
        return False

    if filters.min_amount is not None and txn.amount < filters.min_amount:
        return False
    if filters.max_amount is not None and txn.amount > filters.max_amount:
        return False

    if filters.has_tax and not txn.tax_amount > 0:
        return False
    if filters.has_discount and not txn.discount_amount > 0:
        return False
    if filters.is_recurring is not None and txn.is_recurring != filters.is_recurring:
        return False

    return True


def matches(txn: Transaction, filters: FilterSpec) -> bool:
    """
    Check whether a single transaction satisfies every predicate in ``filters``.

    Args:
        txn: Transaction to test
        filters: Filter specification

    Returns:
        True when the transaction is included
    """
    start, end = date_bounds(filters)
    return _matches(txn, filters, start, end)


def filter_transactions(
    transactions: Iterable[Transaction], filters: FilterSpec
) -> List[Transaction]:
    """
    Apply ``filters`` to a sequence of transactions, preserving input order.

    Date bounds are resolved once for the whole batch.
    """
    start, end = date_bounds(filters)
    return [txn for txn in transactions if _matches(txn, filters, start, end)]
