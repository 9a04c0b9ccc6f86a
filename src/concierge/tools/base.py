"""Base types for the tool system."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ToolParameter:
    """Definition of a tool parameter."""

    name: str
    type: str  # JSON Schema type
    description: str
    required: bool = False


@dataclass(frozen=True)
class ToolSchema:
    """Name, description and input schema of a tool."""

    name: str
    description: str
    parameters: list[ToolParameter] = field(default_factory=list)

    @property
    def required(self) -> list[str]:
        return [param.name for param in self.parameters if param.required]

    def to_input_schema(self) -> dict[str, Any]:
        """Convert to a JSON Schema object describing the tool arguments.

        Returns:
            Dictionary with ``properties`` and ``required``
        """
        properties = {
            param.name: {"type": param.type, "description": param.description}
            for param in self.parameters
        }
        return {
            "type": "object",
            "properties": properties,
            "required": self.required,
        }


# Tool function signature: async function taking the raw argument dict and
# returning a JSON-serializable result object
ToolFunction = Callable[[dict[str, Any]], Awaitable[dict[str, Any]]]


@dataclass
class Tool:
    """A tool exposed by the worker."""

    schema: ToolSchema
    fn: ToolFunction

    async def execute(self, arguments: dict[str, Any]) -> dict[str, Any]:
        """Execute the tool with given arguments.

        Args:
            arguments: Tool arguments as received from the caller

        Returns:
            Tool result object
        """
        return await self.fn(arguments)
