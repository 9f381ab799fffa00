"""
Category model for Cashflow data.
"""

from typing import Literal

from pydantic import BaseModel


class Category(BaseModel):
    """
    Represents a transaction category.

    Categories can be hierarchical with parent-child relationships.
    """

    model_config = {"strict": True, "populate_by_name": True}

    # Required fields
    id: str
    name: str
    type: Literal["income", "expense", "both"]

    # Optional fields
    color: str = ""
    icon: str = ""
    parent_id: str = ""
    is_active: bool = True
    created_at: str = ""
    updated_at: str = ""
