"""MCP transport entry point for running the concierge worker."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

from mcp.server.stdio import stdio_server

if TYPE_CHECKING:
    from mcp.server import Server

READY_MESSAGE = "Customer registration MCP server running on stdio"


async def run_stdio_server(server: Server) -> None:
    """Run MCP server over stdio transport.

    Announces readiness on stderr once the streams are open; the parent's
    channel waits for this line.

    Args:
        server: Configured MCP Server instance
    """
    async with stdio_server() as (read_stream, write_stream):
        sys.stderr.write(READY_MESSAGE + "\n")
        sys.stderr.flush()
        await server.run(read_stream, write_stream, server.create_initialization_options())
