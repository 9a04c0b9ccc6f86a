"""MCP server exposing the concierge tools to the chat process."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from mcp.server import Server
from mcp.types import TextContent
from mcp.types import Tool as MCPTool

from concierge import __version__
from concierge.mcp.converters import tool_to_mcp_input_schema
from concierge.tools.registry import ToolNotFoundError

if TYPE_CHECKING:
    from concierge.tools.registry import ToolRegistry

logger = logging.getLogger(__name__)

SERVER_NAME = "customer-registration-server"


def encode_tool_result(result: dict[str, Any]) -> list[TextContent]:
    """Wrap a tool result object as a single JSON text content item."""
    return [TextContent(type="text", text=json.dumps(result, indent=2, ensure_ascii=False))]


def create_mcp_server(registry: ToolRegistry, server_name: str = SERVER_NAME) -> Server:
    """Create an MCP Server that exposes the registry's tools.

    Input-schema validation is left to the tools so that every missing field
    is reported at once, as data.

    Args:
        registry: Tools to serve
        server_name: Name for the MCP server

    Returns:
        Configured MCP Server instance
    """
    server = Server(server_name, version=__version__)

    @server.list_tools()
    async def list_tools() -> list[MCPTool]:
        """Return all registered tools in MCP format."""
        return [
            MCPTool(
                name=schema.name,
                description=schema.description,
                inputSchema=tool_to_mcp_input_schema(schema),
            )
            for schema in registry.list_tools()
        ]

    @server.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: dict[str, Any] | None) -> list[TextContent]:
        """Execute a tool and return its JSON-encoded result."""
        if name not in registry:
            logger.error("Call for unknown tool %s", name)
            raise ToolNotFoundError(name)

        result = await registry.call(name, arguments)
        return encode_tool_result(result)

    return server
