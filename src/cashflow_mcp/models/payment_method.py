"""
Payment method model for Cashflow data.
"""

from pydantic import BaseModel


class PaymentMethod(BaseModel):
    """Represents a payment method (cash, card, bank transfer, ...)."""

    model_config = {"strict": True, "populate_by_name": True}

    id: str
    name: str
    description: str = ""
    is_active: bool = True
    created_at: str = ""
    updated_at: str = ""
