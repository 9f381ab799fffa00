"""
Aggregate statistics models.
"""

from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, computed_field

from cashflow_mcp.utils.formatting import format_currency

Trend = Literal["up", "down"]

HUNDRED = Decimal("100")


class TransactionStats(BaseModel):
    """
    Summary metrics over a transaction collection.

    Cash flow and the trend indicators are derived rather than stored.
    """

    model_config = {"frozen": True}

    total_income: Decimal = Decimal("0")
    total_expenses: Decimal = Decimal("0")
    net_profit: Decimal = Decimal("0")
    total_transactions: int = 0
    total_income_count: int = 0
    total_expense_count: int = 0
    average_transaction: Decimal = Decimal("0")
    pending_income: Decimal = Decimal("0")
    pending_expenses: Decimal = Decimal("0")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def cash_flow(self) -> Decimal:
        """Settled income minus settled expenses."""
        return (self.total_income - self.pending_income) - (
            self.total_expenses - self.pending_expenses
        )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def net_profit_trend(self) -> Trend:
        return "up" if self.net_profit >= 0 else "down"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def cash_flow_trend(self) -> Trend:
        return "up" if self.cash_flow >= 0 else "down"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def net_profit_margin(self) -> Decimal:
        """Net profit as a percentage of income, one decimal place."""
        base = self.total_income or Decimal("1")
        return (self.net_profit / base * HUNDRED).quantize(Decimal("0.1"))

    @computed_field  # type: ignore[prop-decorator]
    @property
    def pending_label(self) -> str:
        if self.pending_income > 0:
            return f"{format_currency(self.pending_income)} pending"
        return "All clear"


class CategorySummary(BaseModel):
    """Transaction count and total for one (category, type) pair."""

    model_config = {"frozen": True}

    category: str
    type: str
    count: int
    total_amount: Decimal
