"""Model Context Protocol (MCP) plumbing between the chat process and the tool worker.

Provides:
- JSON-RPC channel: line-delimited requests and correlated responses over a subprocess pipe
- Action client: tool calls normalized into ActionResult records
- MCP server: the worker side exposing createCustomer and getAddressByZipcode
"""

from concierge.mcp.channel import (
    ChannelClosedError,
    ChannelError,
    ChannelTimeoutError,
    JsonRpcChannel,
    RemoteError,
    StdioChannel,
)
from concierge.mcp.client import ActionClient, ActionResult

__all__ = [
    "ActionClient",
    "ActionResult",
    "ChannelClosedError",
    "ChannelError",
    "ChannelTimeoutError",
    "JsonRpcChannel",
    "RemoteError",
    "StdioChannel",
]
