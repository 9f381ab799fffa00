"""
Transaction models for Cashflow data.
"""

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Literal, Optional, Tuple

from pydantic import BaseModel, Field, computed_field, field_validator, model_validator

TransactionType = Literal["income", "expense", "sale", "purchase"]
PaymentStatus = Literal["pending", "completed", "partial", "cancelled", "due"]
RecurringFrequency = Literal["daily", "weekly", "monthly", "quarterly", "yearly", ""]

INCOME_TYPES = frozenset({"income", "sale"})
EXPENSE_TYPES = frozenset({"expense", "purchase"})

ZERO = Decimal("0")


def to_decimal(value: Any) -> Decimal:
    """Coerce a raw monetary value to Decimal without going through binary floats."""
    if value is None or value == "":
        return ZERO
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except InvalidOperation:
        raise ValueError(f"Invalid monetary value: {value!r}")


def _calendar_date(value: Any) -> Any:
    # Backends may hand back full timestamps; only the calendar date matters.
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str) and len(value) > 10 and value[10] in "T ":
        return value[:10]
    return value


def _unique_tags(value: Any) -> Any:
    if value is None:
        return ()
    if isinstance(value, str):
        value = [value]
    seen = []
    for tag in value:
        if tag not in seen:
            seen.append(tag)
    return tuple(seen)


class Transaction(BaseModel):
    """
    Represents one recorded financial event.

    Records are immutable; an edit replaces the whole record. ``net_amount``
    is taken from the source when present, otherwise derived as
    ``amount + tax_amount - discount_amount``.
    """

    model_config = {"frozen": True, "populate_by_name": True}

    # Required fields
    id: str
    type: TransactionType
    description: str = Field(min_length=1)
    amount: Decimal = Field(gt=0)
    transaction_date: date

    # Categorization
    category: str = ""
    category_id: str = ""
    tags: Tuple[str, ...] = ()

    # Counterparty & payment
    customer_vendor: str = ""
    payment_method: str = ""
    payment_method_id: str = ""
    payment_status: PaymentStatus = "pending"

    # References
    reference_number: str = ""
    invoice_number: str = ""
    notes: str = ""
    attachments: Tuple[str, ...] = ()

    # Amounts
    tax_amount: Decimal = Field(default=ZERO, ge=0)
    discount_amount: Decimal = Field(default=ZERO, ge=0)
    due_amount: Decimal = Field(default=ZERO, ge=0)
    net_amount: Decimal = ZERO
    currency: str = "USD"
    exchange_rate: Decimal = Decimal("1")

    # Recurrence
    is_recurring: bool = False
    recurring_frequency: RecurringFrequency = ""
    recurring_end_date: Optional[date] = None
    parent_transaction_id: str = ""

    # Metadata
    created_by: str = ""
    created_at: str = ""
    updated_at: str = ""

    @model_validator(mode="before")
    @classmethod
    def fill_derived_fields(cls, data: Any) -> Any:
        """Derive net_amount when absent and drop recurrence details on one-off records."""
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if data.get("net_amount") in (None, ""):
            data["net_amount"] = (
                to_decimal(data.get("amount"))
                + to_decimal(data.get("tax_amount"))
                - to_decimal(data.get("discount_amount"))
            )
        if not data.get("is_recurring"):
            data["recurring_frequency"] = ""
            data["recurring_end_date"] = None
        return data

    @field_validator("transaction_date", mode="before")
    @classmethod
    def truncate_timestamp(cls, v: Any) -> Any:
        return _calendar_date(v)

    @field_validator("recurring_end_date", mode="before")
    @classmethod
    def blank_end_date(cls, v: Any) -> Any:
        if v == "":
            return None
        return _calendar_date(v)

    @field_validator("tags", mode="before")
    @classmethod
    def dedupe_tags(cls, v: Any) -> Any:
        return _unique_tags(v)

    @field_validator(
        "category",
        "category_id",
        "customer_vendor",
        "payment_method",
        "payment_method_id",
        "reference_number",
        "invoice_number",
        "notes",
        "parent_transaction_id",
        "created_by",
        "created_at",
        "updated_at",
        mode="before",
    )
    @classmethod
    def none_as_unset(cls, v: Any) -> Any:
        return "" if v is None else v

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_income(self) -> bool:
        """Whether the transaction counts towards income (income or sale)."""
        return self.type in INCOME_TYPES


class TransactionCreate(BaseModel):
    """
    Payload for creating a transaction.

    Validated client-side before any backend call is made.
    """

    type: TransactionType
    description: str
    amount: Decimal
    transaction_date: date
    category: str = ""
    tags: Tuple[str, ...] = ()
    customer_vendor: str = ""
    payment_method: str = ""
    payment_status: PaymentStatus = "pending"
    reference_number: str = ""
    invoice_number: str = ""
    notes: str = ""
    attachments: Tuple[str, ...] = ()
    tax_amount: Decimal = ZERO
    discount_amount: Decimal = ZERO
    due_amount: Decimal = ZERO
    currency: str = "USD"
    exchange_rate: Decimal = Decimal("1")
    is_recurring: bool = False
    recurring_frequency: RecurringFrequency = ""
    recurring_end_date: Optional[date] = None
    parent_transaction_id: str = ""
    created_by: str = ""

    @field_validator("description")
    @classmethod
    def description_required(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Description is required")
        return v

    @field_validator("amount")
    @classmethod
    def amount_positive(cls, v: Decimal) -> Decimal:
        if v <= 0:
            raise ValueError("Amount must be greater than 0")
        return v

    @field_validator("tax_amount", "discount_amount", "due_amount", mode="before")
    @classmethod
    def blank_amount(cls, v: Any) -> Any:
        return ZERO if v in (None, "") else v

    @field_validator("tax_amount", "discount_amount", "due_amount")
    @classmethod
    def amount_not_negative(cls, v: Decimal) -> Decimal:
        if v < 0:
            raise ValueError("Amount cannot be negative")
        return v

    @field_validator("transaction_date", mode="before")
    @classmethod
    def truncate_timestamp(cls, v: Any) -> Any:
        return _calendar_date(v)

    @field_validator("recurring_end_date", mode="before")
    @classmethod
    def blank_end_date(cls, v: Any) -> Any:
        if v == "":
            return None
        return _calendar_date(v)

    @field_validator("tags", mode="before")
    @classmethod
    def dedupe_tags(cls, v: Any) -> Any:
        return _unique_tags(v)

    @field_validator(
        "category",
        "customer_vendor",
        "payment_method",
        "reference_number",
        "invoice_number",
        "notes",
        "parent_transaction_id",
        "created_by",
        mode="before",
    )
    @classmethod
    def none_as_unset(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("payment_status", mode="before")
    @classmethod
    def default_status(cls, v: Any) -> Any:
        return v or "pending"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def net_amount(self) -> Decimal:
        """Amount adjusted by tax and discount."""
        return self.amount + self.tax_amount - self.discount_amount


class TransactionUpdate(TransactionCreate):
    """Payload for replacing an existing transaction."""
    pass
