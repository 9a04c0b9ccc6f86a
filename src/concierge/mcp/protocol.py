"""JSON-RPC 2.0 message models for the worker channel.

Requests, notifications and responses exchanged with the tool worker are one
JSON object per line. These models describe that wire shape, plus the MCP
``tools/call`` payloads carried inside it.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

JSONRPC_VERSION = "2.0"

MCP_PROTOCOL_VERSION = "2025-06-18"

# JSON-RPC 2.0 "Internal error", used when an error object omits its code
INTERNAL_ERROR = -32603


class ContentItem(BaseModel):
    """Content item in a tool result."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    type: str
    text: str | None = None


class ToolCallParams(BaseModel):
    """Params of a tools/call request: the worker tool and its raw arguments."""

    name: str = Field(..., min_length=1, description="Worker tool name")
    arguments: dict[str, Any] = Field(
        default_factory=dict, description="Arguments passed to the tool unvalidated"
    )


class ToolCallResult(BaseModel):
    """Result payload of a tools/call response."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    content: list[ContentItem] = Field(default_factory=list, description="Result content items")
    isError: bool = Field(False, alias="is_error", description="Whether the tool failed")  # noqa: N815

    def first_text(self) -> str | None:
        """Return the text of the first text content item, if any."""
        for item in self.content:
            if item.type == "text" and item.text is not None:
                return item.text
        return None


class JsonRpcRequest(BaseModel):
    """JSON-RPC 2.0 request."""

    jsonrpc: Literal["2.0"] = JSONRPC_VERSION
    id: int = Field(..., description="Request identifier")
    method: str = Field(..., description="Method name (e.g., 'tools/call')")
    params: dict[str, Any] = Field(default_factory=dict, description="Method parameters")


class JsonRpcNotification(BaseModel):
    """JSON-RPC 2.0 notification (a request without an id)."""

    jsonrpc: Literal["2.0"] = JSONRPC_VERSION
    method: str
    params: dict[str, Any] | None = None


class JsonRpcError(BaseModel):
    """JSON-RPC 2.0 error object."""

    code: int = Field(INTERNAL_ERROR, description="Error code")
    message: str = Field("Unknown error", description="Error message")
    data: Any = Field(None, description="Additional error data")


class JsonRpcResponse(BaseModel):
    """JSON-RPC 2.0 response."""

    model_config = ConfigDict(extra="allow")

    jsonrpc: str = JSONRPC_VERSION
    id: int | str | None = None
    result: Any = None
    error: JsonRpcError | None = None


def encode_message(message: JsonRpcRequest | JsonRpcNotification) -> bytes:
    """Serialize a message as a single newline-terminated JSON line."""
    return (message.model_dump_json(exclude_none=True) + "\n").encode("utf-8")
