"""
Models for persisted UI configuration: table columns, filter and form
field visibility, and tag suggestions.
"""

from pydantic import BaseModel


class TableColumn(BaseModel):
    """One column of the transaction table."""

    model_config = {"frozen": True}

    id: str
    label: str
    visible: bool = True
    order: int = 0


class TagSuggestion(BaseModel):
    """A previously used tag with its usage count."""

    model_config = {"frozen": True}

    value: str
    count: int = 1
    last_used: str = ""


class FilterVisibility(BaseModel):
    """Which filter controls are shown."""

    model_config = {"frozen": True}

    search: bool = True
    type: bool = True
    category: bool = True
    payment_status: bool = True
    payment_method: bool = False
    customer_vendor: bool = True
    tags: bool = False
    reference_number: bool = False
    invoice_number: bool = False
    amount_range: bool = False
    tax_filter: bool = False
    discount_filter: bool = False
    recurring_filter: bool = False
    date_range: bool = True


class FormFieldVisibility(BaseModel):
    """Which optional fields the transaction form shows."""

    model_config = {"frozen": True}

    category: bool = True
    customer_vendor: bool = True
    payment_method: bool = True
    payment_status: bool = True
    reference_number: bool = False
    invoice_number: bool = False
    tax_amount: bool = False
    discount_amount: bool = False
    tags: bool = False
    recurring: bool = False
    notes: bool = True
