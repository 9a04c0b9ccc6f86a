"""Tests for the tool registry."""

import pytest

from concierge.tools import build_registry
from concierge.tools.base import Tool, ToolParameter, ToolSchema
from concierge.tools.registry import ToolNotFoundError, ToolRegistry


def _make_tool(name: str) -> Tool:
    async def fn(arguments):
        return {"status": "success", "echo": arguments}

    schema = ToolSchema(
        name=name,
        description=f"Test tool: {name}",
        parameters=[ToolParameter("input", "string", "Input value", required=True)],
    )
    return Tool(schema=schema, fn=fn)


class TestToolRegistry:
    def test_register_and_get(self):
        registry = ToolRegistry([_make_tool("echo")])

        assert "echo" in registry
        assert len(registry) == 1
        assert registry.get("echo").schema.name == "echo"

    def test_duplicate_rejected(self):
        registry = ToolRegistry([_make_tool("echo")])
        with pytest.raises(ValueError, match="already registered"):
            registry.register(_make_tool("echo"))

    def test_unknown_tool(self):
        with pytest.raises(ToolNotFoundError, match="Unknown tool: missing") as exc_info:
            ToolRegistry().get("missing")
        assert exc_info.value.name == "missing"

    @pytest.mark.asyncio
    async def test_call_copies_arguments(self):
        registry = ToolRegistry([_make_tool("echo")])

        result = await registry.call("echo", None)

        assert result == {"status": "success", "echo": {}}

    def test_to_input_schema(self):
        schema = _make_tool("echo").schema.to_input_schema()
        assert schema == {
            "type": "object",
            "properties": {"input": {"type": "string", "description": "Input value"}},
            "required": ["input"],
        }


def test_build_registry_from_config(default_config):
    registry = build_registry(default_config)

    assert [s.name for s in registry.list_tools()] == ["createCustomer", "getAddressByZipcode"]
