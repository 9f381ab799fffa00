"""
MCP server for Cashflow.

Exposes transaction data through the Model Context Protocol.
"""

import json
import logging
from pathlib import Path
from typing import Any, Optional

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from cashflow_mcp.core.database import CashflowDatabase
from cashflow_mcp.core.exceptions import CashflowError
from cashflow_mcp.tools.tools import CashflowTools, create_tool_schemas

logger = logging.getLogger(__name__)

TOOL_NAMES = frozenset(schema["name"] for schema in create_tool_schemas())


class CashflowServer:
    """MCP server for Cashflow data."""

    def __init__(self, db_path: Optional[Path] = None):
        """
        Initialize the MCP server.

        Args:
            db_path: Optional path to the JSON database.
                    If None, uses ~/.cashflow/cashflow.json.
        """
        self.db = CashflowDatabase(db_path)
        self.tools = CashflowTools(self.db)
        self.server = Server("cashflow-mcp")

        # Register handlers
        self._register_handlers()

    def handle_tool_call(self, name: str, arguments: dict[str, Any]) -> str:
        """
        Run a tool and render its result as response text.

        Errors are rendered as text rather than raised.
        """
        if not self.db.is_available():
            return (
                f"Database not available at {self.db.db_path}. "
                "Run 'cashflow-mcp --init' to create an empty database, "
                "or provide a custom database path."
            )
        if name not in TOOL_NAMES:
            return f"Unknown tool: {name}"

        try:
            result = getattr(self.tools, name)(**arguments)
            return json.dumps(result, indent=2)
        except (ValueError, TypeError, CashflowError) as e:
            # Invalid arguments, validation failures, missing or in-use records
            return f"Error: {str(e)}"
        except Exception as e:
            logger.exception(f"Error executing tool {name}")
            return f"Error executing tool: {str(e)}"

    def _register_handlers(self) -> None:
        """Register MCP protocol handlers."""

        @self.server.list_tools()
        async def list_tools() -> list[Tool]:
            """List available tools."""
            return [
                Tool(
                    name=schema["name"],
                    description=schema["description"],
                    inputSchema=schema["inputSchema"],
                )
                for schema in create_tool_schemas()
            ]

        @self.server.call_tool()
        async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
            """Handle tool calls."""
            text = self.handle_tool_call(name, arguments or {})
            return [TextContent(type="text", text=text)]

    async def run(self) -> None:  # pragma: no cover
        """Run the MCP server using stdio transport."""
        async with stdio_server() as (read_stream, write_stream):
            await self.server.run(
                read_stream,
                write_stream,
                self.server.create_initialization_options(),
            )


async def run_server(db_path: Optional[Path] = None) -> None:  # pragma: no cover
    """
    Run the Cashflow MCP server.

    Args:
        db_path: Optional path to the JSON database.
                If None, uses ~/.cashflow/cashflow.json.
    """
    server = CashflowServer(db_path)
    await server.run()
