"""
Query models: filter, sort and pagination specifications.

Filter inputs arrive in loose shapes (a single value, a comma separated
string, a list, or nothing). They are normalized here, once, into frozensets
so the evaluator only ever sees one representation per field.
"""

from datetime import date
from decimal import Decimal
from typing import Any, FrozenSet, Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

SortOrder = Literal["asc", "desc"]

SET_FILTER_FIELDS = ("type", "category", "payment_status", "payment_method", "tags")


def _as_value_set(value: Any) -> FrozenSet[str]:
    if value is None:
        return frozenset()
    if isinstance(value, str):
        value = value.split(",")
    return frozenset(str(item).strip() for item in value if str(item).strip())


class FilterSpec(BaseModel):
    """
    User-chosen constraints narrowing the transaction list.

    Every predicate is optional; an unset predicate or an empty set matches
    everything.
    """

    model_config = {"frozen": True}

    # Date range (inclusive, calendar dates). Kept as raw text so that a
    # malformed bound can be skipped at evaluation time.
    from_date: Optional[str] = None
    to_date: Optional[str] = None

    # Allowed values
    type: FrozenSet[str] = frozenset()
    category: FrozenSet[str] = frozenset()
    payment_status: FrozenSet[str] = frozenset()
    payment_method: FrozenSet[str] = frozenset()

    # Text predicates (case-insensitive substring)
    customer_vendor: str = ""
    search: str = ""
    reference_number: str = ""
    invoice_number: str = ""

    # Transaction must carry every one of these tags
    tags: FrozenSet[str] = frozenset()

    # Inclusive bounds on amount
    min_amount: Optional[Decimal] = None
    max_amount: Optional[Decimal] = None

    # Flags
    has_tax: Optional[bool] = None
    has_discount: Optional[bool] = None
    is_recurring: Optional[bool] = None

    @field_validator(*SET_FILTER_FIELDS, mode="before")
    @classmethod
    def normalize_value_set(cls, v: Any) -> FrozenSet[str]:
        return _as_value_set(v)

    @field_validator("from_date", "to_date", mode="before")
    @classmethod
    def normalize_date_bound(cls, v: Any) -> Optional[str]:
        if isinstance(v, date):
            return v.isoformat()
        if v is None or (isinstance(v, str) and not v.strip()):
            return None
        return v

    @field_validator(
        "customer_vendor", "search", "reference_number", "invoice_number",
        mode="before",
    )
    @classmethod
    def none_as_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("min_amount", "max_amount", mode="before")
    @classmethod
    def blank_bound(cls, v: Any) -> Any:
        if v == "":
            return None
        if isinstance(v, float):
            return str(v)
        return v


class ListTransactionParams(FilterSpec):
    """Filters plus pagination as pushed to the backend."""

    limit: int = Field(default=50, ge=1)
    offset: int = Field(default=0, ge=0)


class StatsParams(BaseModel):
    """Parameters for backend statistics: a date range only."""

    model_config = {"frozen": True}

    from_date: Optional[str] = None
    to_date: Optional[str] = None


class SortSpec(BaseModel):
    """
    The single active sort column and direction.

    Either both ``column`` and ``order`` are set, or neither is (unsorted).
    """

    model_config = {"frozen": True}

    column: Optional[str] = None
    order: Optional[SortOrder] = None

    @model_validator(mode="before")
    @classmethod
    def unsorted_when_partial(cls, data: Any) -> Any:
        if isinstance(data, dict) and (not data.get("column") or not data.get("order")):
            return {"column": None, "order": None}
        return data

    @classmethod
    def unsorted(cls) -> "SortSpec":
        return cls()

    @property
    def is_sorted(self) -> bool:
        return self.column is not None


class PageSpec(BaseModel):
    """1-based page number and page size."""

    model_config = {"frozen": True}

    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=50, ge=1)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size
