"""
Application state and the actions that transform it.

``AppState`` is an immutable value. Every action is a pure function taking
the current state (plus arguments) and returning a new state; nothing
mutates a state in place. The query engine holds the current state and
swaps it for the result of each dispatched action.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple, Union

from pydantic import BaseModel

from cashflow_mcp.core.sorting import toggle_sort
from cashflow_mcp.models.category import Category
from cashflow_mcp.models.payment_method import PaymentMethod
from cashflow_mcp.models.query import SET_FILTER_FIELDS, FilterSpec, PageSpec, SortSpec
from cashflow_mcp.models.stats import TransactionStats
from cashflow_mcp.models.transaction import Transaction
from cashflow_mcp.models.ui import (
    FilterVisibility,
    FormFieldVisibility,
    TableColumn,
    TagSuggestion,
)
from cashflow_mcp.utils.date_utils import current_month_range

DEFAULT_PAGE_SIZE = 50

DEFAULT_TABLE_COLUMNS: Tuple[TableColumn, ...] = tuple(
    TableColumn(id=col_id, label=label, visible=visible, order=order)
    for order, (col_id, label, visible) in enumerate(
        [
            ("date", "Date & Time", True),
            ("description", "Description", True),
            ("type", "Type", True),
            ("category", "Category", True),
            ("amount", "Amount", True),
            ("status", "Payment Status", True),
            ("customer_vendor", "Customer/Vendor", False),
            ("payment_method", "Payment Method", False),
            ("reference_number", "Reference #", False),
            ("invoice_number", "Invoice #", False),
            ("notes", "Notes", False),
            ("tags", "Tags", False),
            ("tax_amount", "Tax", False),
            ("discount_amount", "Discount", False),
            ("net_amount", "Net Amount", False),
            ("currency", "Currency", False),
            ("recurring", "Recurring", False),
            ("actions", "Actions", True),
        ]
    )
)

DEFAULT_FORM_FIELD_ORDER: Dict[str, int] = {
    "category": 0,
    "tags": 1,
    "customer_vendor": 2,
    "payment_method": 3,
    "payment_status": 4,
    "reference_number": 5,
    "invoice_number": 6,
    "tax_amount": 7,
    "discount_amount": 8,
    "recurring": 9,
    "notes": 10,
}


def default_filters() -> FilterSpec:
    """Filters covering the current calendar month with nothing else set."""
    from_date, to_date = current_month_range()
    return FilterSpec(from_date=from_date, to_date=to_date)


class AppState(BaseModel):
    """Everything the transaction screen needs, as one immutable value."""

    model_config = {"frozen": True}

    # Data
    transactions: Tuple[Transaction, ...] = ()
    stats: Optional[TransactionStats] = None
    categories: Tuple[Category, ...] = ()
    payment_methods: Tuple[PaymentMethod, ...] = ()

    # Status
    is_loading: bool = False
    error: Optional[str] = None

    # Query
    filters: FilterSpec = FilterSpec()
    sort: SortSpec = SortSpec()
    current_page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE
    total_count: int = 0

    # Preferences
    table_columns: Tuple[TableColumn, ...] = DEFAULT_TABLE_COLUMNS
    filter_visibility: FilterVisibility = FilterVisibility()
    form_field_visibility: FormFieldVisibility = FormFieldVisibility()
    form_field_order: Dict[str, int] = DEFAULT_FORM_FIELD_ORDER
    tag_suggestions: Tuple[TagSuggestion, ...] = ()

    @classmethod
    def initial(cls) -> "AppState":
        return cls(filters=default_filters())

    @property
    def page(self) -> PageSpec:
        return PageSpec(page=self.current_page, page_size=self.page_size)


def _update(state: AppState, **changes: Any) -> AppState:
    return state.model_copy(update=changes)


# Data


def set_transactions(state: AppState, transactions: Sequence[Transaction]) -> AppState:
    return _update(state, transactions=tuple(transactions))


def set_stats(state: AppState, stats: Optional[TransactionStats]) -> AppState:
    return _update(state, stats=stats)


def set_categories(state: AppState, categories: Sequence[Category]) -> AppState:
    return _update(state, categories=tuple(categories))


def set_payment_methods(state: AppState, methods: Sequence[PaymentMethod]) -> AppState:
    return _update(state, payment_methods=tuple(methods))


def set_loading(state: AppState, is_loading: bool) -> AppState:
    return _update(state, is_loading=is_loading)


def set_error(state: AppState, error: Optional[str]) -> AppState:
    return _update(state, error=error)


# Filters. Any filter change sends the user back to the first page.


def set_filters(state: AppState, changes: Mapping[str, Any]) -> AppState:
    """Merge ``changes`` into the current filters."""
    merged = {**state.filters.model_dump(), **changes}
    return _update(state, filters=FilterSpec.model_validate(merged), current_page=1)


def reset_filters(state: AppState) -> AppState:
    return _update(state, filters=default_filters(), current_page=1)


def add_to_filter(state: AppState, key: str, value: str) -> AppState:
    """Allow one more value for a set-valued filter; no-op if already allowed."""
    if key not in SET_FILTER_FIELDS:
        return state
    current = getattr(state.filters, key)
    if value in current:
        return state
    return set_filters(state, {key: current | {value}})


def remove_from_filter(state: AppState, key: str, value: str) -> AppState:
    if key not in SET_FILTER_FIELDS:
        return state
    return set_filters(state, {key: getattr(state.filters, key) - {value}})


def toggle_filter(state: AppState, key: str, value: str) -> AppState:
    if key not in SET_FILTER_FIELDS:
        return state
    current = getattr(state.filters, key)
    return set_filters(state, {key: current ^ {value}})


# Sorting


def sort_by(state: AppState, column: str) -> AppState:
    """Apply a header click on ``column`` to the tri-state sort."""
    new_sort = toggle_sort(state.sort, column)
    if new_sort == state.sort:
        return state
    return _update(state, sort=new_sort)


# Pagination


def set_current_page(state: AppState, page: int) -> AppState:
    return _update(state, current_page=max(1, page))


def set_page_size(state: AppState, page_size: int) -> AppState:
    if page_size < 1:
        raise ValueError(f"Page size must be positive, got {page_size}")
    return _update(state, page_size=page_size, current_page=1)


def set_total_count(state: AppState, total_count: int) -> AppState:
    return _update(state, total_count=max(0, total_count))


# Table columns & visibility


def set_table_columns(
    state: AppState, columns: Sequence[Union[TableColumn, Mapping[str, Any]]]
) -> AppState:
    parsed = tuple(TableColumn.model_validate(col) for col in columns)
    return _update(state, table_columns=tuple(sorted(parsed, key=lambda c: c.order)))


def reset_table_columns(state: AppState) -> AppState:
    return _update(state, table_columns=DEFAULT_TABLE_COLUMNS)


def set_filter_visibility(state: AppState, changes: Mapping[str, bool]) -> AppState:
    merged = {**state.filter_visibility.model_dump(), **changes}
    return _update(state, filter_visibility=FilterVisibility.model_validate(merged))


def reset_filter_visibility(state: AppState) -> AppState:
    return _update(state, filter_visibility=FilterVisibility())


def set_form_field_visibility(state: AppState, changes: Mapping[str, bool]) -> AppState:
    merged = {**state.form_field_visibility.model_dump(), **changes}
    return _update(state, form_field_visibility=FormFieldVisibility.model_validate(merged))


def reset_form_field_visibility(state: AppState) -> AppState:
    return _update(state, form_field_visibility=FormFieldVisibility())


def set_form_field_order(state: AppState, changes: Mapping[str, int]) -> AppState:
    return _update(state, form_field_order={**state.form_field_order, **changes})


def reset_form_field_order(state: AppState) -> AppState:
    return _update(state, form_field_order=dict(DEFAULT_FORM_FIELD_ORDER))


# Tag suggestions


def add_tag_suggestion(state: AppState, tag: str, now: Optional[str] = None) -> AppState:
    """Record a use of ``tag``, bumping its count if it was seen before."""
    now = now or datetime.now(timezone.utc).isoformat()
    suggestions = list(state.tag_suggestions)
    for index, suggestion in enumerate(suggestions):
        if suggestion.value == tag:
            suggestions[index] = suggestion.model_copy(
                update={"count": suggestion.count + 1, "last_used": now}
            )
            break
    else:
        suggestions.append(TagSuggestion(value=tag, count=1, last_used=now))
    return _update(state, tag_suggestions=tuple(suggestions))


def remove_tag_suggestion(state: AppState, tag: str) -> AppState:
    return _update(
        state, tag_suggestions=tuple(s for s in state.tag_suggestions if s.value != tag)
    )


def clear_tag_suggestions(state: AppState) -> AppState:
    return _update(state, tag_suggestions=())
