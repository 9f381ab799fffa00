"""
Cashflow MCP: query, filter and summarize income and expense transactions.
"""

__version__ = "0.1.0"
