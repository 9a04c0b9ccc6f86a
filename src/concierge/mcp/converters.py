"""Schema converters between concierge tool schemas and MCP format."""

from __future__ import annotations

from typing import Any

from concierge.tools.base import ToolParameter, ToolSchema


def tool_to_mcp_input_schema(schema: ToolSchema) -> dict[str, Any]:
    """Convert a tool schema to an MCP ``inputSchema``.

    Args:
        schema: Tool schema

    Returns:
        JSON Schema dict for MCP Tool.inputSchema
    """
    input_schema = schema.to_input_schema()
    if not input_schema["required"]:
        del input_schema["required"]
    return input_schema


def mcp_input_schema_to_params(input_schema: dict[str, Any]) -> list[ToolParameter]:
    """Convert an MCP input schema to a ToolParameter list.

    Args:
        input_schema: MCP Tool.inputSchema dict

    Returns:
        List of ToolParameter instances
    """
    params: list[ToolParameter] = []
    properties = input_schema.get("properties", {})
    required_fields = set(input_schema.get("required", []))

    for name, prop in properties.items():
        params.append(
            ToolParameter(
                name=name,
                type=prop.get("type", "string"),
                description=prop.get("description", f"Parameter {name}"),
                required=name in required_fields,
            )
        )

    return params


def mcp_tool_to_schema(tool: dict[str, Any]) -> ToolSchema:
    """Convert one entry of a ``tools/list`` result to a ToolSchema.

    Args:
        tool: Tool object with name, description and inputSchema

    Returns:
        ToolSchema instance
    """
    name = tool["name"]
    return ToolSchema(
        name=name,
        description=tool.get("description") or f"External tool: {name}",
        parameters=mcp_input_schema_to_params(tool.get("inputSchema") or {}),
    )
