"""
Utility functions for Cashflow MCP.
"""

from cashflow_mcp.utils.date_utils import (
    current_month_range,
    get_month_range,
    parse_date,
    parse_period,
)
from cashflow_mcp.utils.files import write_json_atomic
from cashflow_mcp.utils.formatting import format_currency, quantize_cents

__all__ = [
    "parse_period",
    "get_month_range",
    "current_month_range",
    "parse_date",
    "format_currency",
    "quantize_cents",
    "write_json_atomic",
]
