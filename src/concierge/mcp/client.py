"""Action client: calls worker tools over the JSON-RPC channel."""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field, ValidationError

from concierge import __version__
from concierge.mcp.channel import ChannelError, JsonRpcChannel, StdioChannel
from concierge.mcp.converters import mcp_tool_to_schema
from concierge.mcp.protocol import MCP_PROTOCOL_VERSION, ToolCallParams, ToolCallResult
from concierge.tools.address import ADDRESS_LOOKUP
from concierge.tools.customer import CREATE_CUSTOMER

if TYPE_CHECKING:
    from concierge.config.schema import ConciergeConfig
    from concierge.tools.base import ToolSchema

logger = logging.getLogger(__name__)

CLIENT_NAME = "concierge-chatbot"

ChannelFactory = Callable[[], JsonRpcChannel]


class ActionResult(BaseModel):
    """Outcome of one tool call, as reported to the chat caller."""

    tool: str = Field(..., description="Tool name")
    input: dict[str, Any] = Field(default_factory=dict, description="Arguments echoed back")
    result: Any = Field(None, description="Tool result payload")
    error: str | None = Field(None, description="Transport or protocol error")

    @property
    def ok(self) -> bool:
        return self.error is None


def default_worker_command(config_path: str | None = None) -> list[str]:
    """Command line that runs the worker with the current interpreter."""
    command = [sys.executable, "-m", "concierge.mcp.worker"]
    if config_path:
        command += ["--config", config_path]
    return command


class ActionClient:
    """Turns tool calls into requests on a lazily started worker channel.

    Errors never escape :meth:`call_tool`: they end up in
    :attr:`ActionResult.error`.
    """

    def __init__(self, channel_factory: ChannelFactory):
        """Initialize the client.

        Args:
            channel_factory: Builds a fresh, unstarted channel on each (re)connect
        """
        self._channel_factory = channel_factory
        self._channel: JsonRpcChannel | None = None
        self._tools: list[ToolSchema] = []
        self._init_lock = asyncio.Lock()

    @classmethod
    def from_config(cls, config: ConciergeConfig, config_path: str | None = None) -> ActionClient:
        """Create a client that spawns the worker described by the config.

        Args:
            config: Concierge configuration
            config_path: Config file forwarded to the worker

        Returns:
            Unconnected ActionClient
        """
        worker = config.worker
        command = worker.command or default_worker_command(config_path)

        def factory() -> JsonRpcChannel:
            return StdioChannel(
                command=command,
                ready_signal=worker.ready_signal,
                ready_timeout=worker.ready_timeout,
                request_timeout=worker.request_timeout,
            )

        return cls(factory)

    @property
    def connected(self) -> bool:
        return self._channel is not None and not self._channel.closed

    async def initialize(self) -> None:
        """Start the worker channel and perform the MCP handshake.

        Concurrent callers share one initialization. A dead channel (worker
        exited) is replaced on the next call.

        Raises:
            ChannelError: If the worker cannot be started or the handshake fails
        """
        async with self._init_lock:
            if self.connected:
                return

            channel = self._channel_factory()
            try:
                await channel.start()
                await channel.send(
                    "initialize",
                    {
                        "protocolVersion": MCP_PROTOCOL_VERSION,
                        "capabilities": {},
                        "clientInfo": {"name": CLIENT_NAME, "version": __version__},
                    },
                )
                await channel.notify("notifications/initialized")
                listed = await channel.send("tools/list", {})
                tools = [mcp_tool_to_schema(tool) for tool in listed["tools"]]
            except (KeyError, TypeError) as e:
                await channel.close()
                raise ChannelError(f"Malformed tools/list result: {e}") from e
            except ChannelError:
                await channel.close()
                raise

            self._channel = channel
            self._tools = tools
            logger.info("Connected to worker, available tools: %s", [t.name for t in tools])

    async def list_tools(self) -> list[ToolSchema]:
        """Tool descriptors exposed by the worker.

        Raises:
            ChannelError: If the worker cannot be reached
        """
        await self.initialize()
        return list(self._tools)

    async def call_tool(self, name: str, arguments: dict[str, Any]) -> ActionResult:
        """Call a worker tool and normalize its outcome.

        Args:
            name: Tool name
            arguments: Tool arguments

        Returns:
            ActionResult with either ``result`` or ``error`` set
        """
        action = ActionResult(tool=name, input=dict(arguments))
        logger.info("Calling tool %s", name)

        try:
            params = ToolCallParams(name=name, arguments=arguments)
        except ValidationError as e:
            action.error = f"Invalid tool call: {e.errors()[0]['msg']}"
            return action

        try:
            await self.initialize()
            assert self._channel is not None
            raw = await self._channel.send("tools/call", params.model_dump())
        except ChannelError as e:
            logger.error("Tool %s failed: %s", name, e)
            action.error = str(e) or type(e).__name__
            return action

        return _normalize(action, raw)

    async def create_customer(self, data: dict[str, Any]) -> ActionResult:
        """Create a customer through the worker."""
        return await self.call_tool(CREATE_CUSTOMER, data)

    async def lookup_address(self, zipcode: str) -> ActionResult:
        """Look up an address by CEP through the worker."""
        return await self.call_tool(ADDRESS_LOOKUP, {"zipcode": zipcode})

    async def shutdown(self) -> None:
        """Close the channel and stop the worker."""
        async with self._init_lock:
            if self._channel is not None:
                logger.info("Shutting down worker channel")
                await self._channel.close()
                self._channel = None


def _normalize(action: ActionResult, raw: Any) -> ActionResult:
    """Fill ``action`` from a raw tools/call result.

    The first text item is parsed as JSON; anything that does not parse is
    passed through unparsed.
    """
    try:
        result = ToolCallResult.model_validate(raw)
    except ValidationError:
        action.result = raw
        return action

    text = result.first_text()
    if result.isError:
        action.error = text or f"Tool {action.tool} failed"
        return action

    if text is None:
        action.result = raw
        return action

    try:
        action.result = json.loads(text)
    except json.JSONDecodeError:
        action.result = raw
    return action
