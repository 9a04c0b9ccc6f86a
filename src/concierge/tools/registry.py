"""Tool registration and lookup."""

import logging
from typing import Any

from concierge.tools.base import Tool, ToolSchema

logger = logging.getLogger(__name__)


class ToolNotFoundError(LookupError):
    """Requested tool is not registered."""

    def __init__(self, name: str):
        super().__init__(f"Unknown tool: {name}")
        self.name = name


class ToolRegistry:
    """Fixed set of tools served by the worker."""

    def __init__(self, tools: list[Tool] | None = None):
        self._tools: dict[str, Tool] = {}
        for tool in tools or []:
            self.register(tool)

    def register(self, tool: Tool) -> None:
        """Register a tool under its schema name.

        Raises:
            ValueError: If a tool with the same name is already registered
        """
        name = tool.schema.name
        if name in self._tools:
            raise ValueError(f"Tool already registered: {name}")
        self._tools[name] = tool

    def get(self, name: str) -> Tool:
        """Get a registered tool by name.

        Raises:
            ToolNotFoundError: If tool not found
        """
        try:
            return self._tools[name]
        except KeyError:
            raise ToolNotFoundError(name) from None

    def list_tools(self) -> list[ToolSchema]:
        """Schemas of all registered tools, in registration order."""
        return [tool.schema for tool in self._tools.values()]

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    async def call(self, name: str, arguments: dict[str, Any] | None) -> dict[str, Any]:
        """Execute a tool by name.

        Raises:
            ToolNotFoundError: If tool not found
        """
        tool = self.get(name)
        logger.debug("Calling tool %s with %s", name, arguments)
        return await tool.execute(dict(arguments or {}))
