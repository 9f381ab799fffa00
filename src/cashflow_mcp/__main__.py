"""
CLI entry point for Cashflow MCP server.
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from cashflow_mcp.core.database import DEFAULT_DB_PATH, CashflowDatabase
from cashflow_mcp.server import run_server


def main() -> None:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="Cashflow MCP Server - Track and query income and expenses through MCP"
    )
    parser.add_argument(
        "--db-path",
        type=Path,
        default=DEFAULT_DB_PATH,
        help=f"Path to the JSON database (default: {DEFAULT_DB_PATH})",
    )
    parser.add_argument(
        "--init",
        action="store_true",
        help="Create an empty database at --db-path if none exists",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )

    args = parser.parse_args()

    # Configure logging
    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,  # MCP uses stdout for protocol, so log to stderr
    )

    if args.init and not args.db_path.exists():
        CashflowDatabase.create(args.db_path)
        logging.info(f"Created empty database at {args.db_path}")

    # Run the server
    try:
        asyncio.run(run_server(db_path=args.db_path))
    except KeyboardInterrupt:
        logging.info("Server stopped by user")
        sys.exit(0)
    except Exception as e:
        logging.exception(f"Server error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
