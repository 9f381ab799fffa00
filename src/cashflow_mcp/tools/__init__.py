"""
MCP tools for Cashflow MCP.
"""

from cashflow_mcp.tools.tools import CashflowTools, create_tool_schemas

__all__ = ["CashflowTools", "create_tool_schemas"]
