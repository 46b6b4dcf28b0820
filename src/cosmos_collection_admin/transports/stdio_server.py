# Cosmos Collection Admin
# File: transports/stdio_server.py
# Version: v1

"""STDIO entrypoint for the Cosmos collection admin MCP server.

This is the script behind the ``cosmos-collection-admin-mcp`` console
command. It configures logging, creates a FastMCP server, registers the
collection tools and runs the built-in stdio transport.
"""

from __future__ import annotations

import logging
import os
import sys

from mcp.server.fastmcp import FastMCP

from ..tools import tasks


def configure_logging() -> None:
    """Send log records to stderr; stdout carries the MCP protocol."""
    level_name = (os.getenv("COSMOS_LOG_LEVEL") or "INFO").strip().upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def main() -> None:
    """Synchronous entrypoint for console_scripts."""
    configure_logging()

    mcp = FastMCP("cosmos-collection-admin")
    tasks.register_tools(mcp)

    # Let FastMCP handle stdio + event loop setup.
    mcp.run()


if __name__ == "__main__":
    main()
