"""Pytest configuration and shared fixtures."""

import asyncio
import json
from typing import Any

import pytest

from concierge.config.schema import ConciergeConfig
from concierge.llm.client import CompletionResponse, Message
from concierge.mcp.channel import JsonRpcChannel
from concierge.mcp.server import encode_tool_result
from concierge.services.addresses import AddressService
from concierge.services.customers import CustomerService
from concierge.tools import build_registry
from concierge.tools.registry import ToolNotFoundError, ToolRegistry

CRM_HOST = "https://crm.test"
VIACEP_URL = "https://viacep.test/ws"


class FakeWorker(JsonRpcChannel):
    """In-process stand-in for the worker: answers requests from a ToolRegistry.

    Responses are fed back asynchronously, exactly as the stdout pump would.
    Methods listed in ``silent`` are never answered.
    """

    def __init__(self, registry: ToolRegistry, request_timeout: float = 1.0, silent=()):
        super().__init__(request_timeout=request_timeout)
        self.registry = registry
        self.silent = set(silent)
        self.requests: list[dict[str, Any]] = []
        self.notifications: list[dict[str, Any]] = []
        self.starts = 0
        self._tasks: list[asyncio.Task[None]] = []

    @property
    def tool_calls(self) -> list[dict[str, Any]]:
        return [r["params"] for r in self.requests if r["method"] == "tools/call"]

    async def start(self) -> None:
        self.starts += 1
        await asyncio.sleep(0)

    async def _write(self, data: bytes) -> None:
        assert data.endswith(b"\n")
        message = json.loads(data)
        if "id" not in message:
            self.notifications.append(message)
            return
        self.requests.append(message)
        if message["method"] not in self.silent:
            self._tasks.append(asyncio.create_task(self._answer(message)))

    async def _answer(self, message: dict[str, Any]) -> None:
        method = message["method"]
        if method == "initialize":
            result: Any = {"protocolVersion": "2025-06-18", "capabilities": {"tools": {}}}
        elif method == "tools/list":
            result = {
                "tools": [
                    {
                        "name": s.name,
                        "description": s.description,
                        "inputSchema": s.to_input_schema(),
                    }
                    for s in self.registry.list_tools()
                ]
            }
        elif method == "tools/call":
            params = message["params"]
            try:
                payload = await self.registry.call(params["name"], params.get("arguments"))
                result = {
                    "content": [c.model_dump(exclude_none=True) for c in encode_tool_result(payload)]
                }
            except ToolNotFoundError as e:
                result = {"content": [{"type": "text", "text": str(e)}], "isError": True}
        else:
            error = {"code": -32601, "message": f"Method not found: {method}"}
            self._feed({"jsonrpc": "2.0", "id": message["id"], "error": error})
            return
        self._feed({"jsonrpc": "2.0", "id": message["id"], "result": result})

    def _feed(self, payload: dict[str, Any]) -> None:
        self.feed((json.dumps(payload) + "\n").encode())


class MockLLM:
    """Mock LLM client returning predefined replies in order."""

    def __init__(self, replies: list[str]):
        self.replies = replies
        self.calls: list[dict[str, Any]] = []

    async def complete(
        self,
        messages: list[Message],
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> CompletionResponse:
        """Return next predefined reply, recording a snapshot of the history."""
        self.calls.append({"messages": list(messages), "temperature": temperature})
        return CompletionResponse(content=self.replies[len(self.calls) - 1])


@pytest.fixture
def default_config() -> ConciergeConfig:
    """Provide a default configuration for tests."""
    return ConciergeConfig()


@pytest.fixture
def service_config() -> ConciergeConfig:
    """Configuration pointing the collaborators at test hosts."""
    config = ConciergeConfig()
    config.customer_api.host = CRM_HOST
    config.customer_api.token = "secret-token"
    config.address_api.base_url = VIACEP_URL
    return config


@pytest.fixture
def registry(service_config: ConciergeConfig) -> ToolRegistry:
    """Real tool registry wired to test hosts (mock HTTP with respx)."""
    return build_registry(
        service_config,
        customers=CustomerService(host=CRM_HOST, token="secret-token"),
        addresses=AddressService(base_url=VIACEP_URL),
    )


@pytest.fixture
def make_worker(registry: ToolRegistry):
    """Factory for FakeWorker channels sharing the test registry."""
    created: list[FakeWorker] = []

    def factory(**kwargs: Any) -> FakeWorker:
        worker = FakeWorker(registry, **kwargs)
        created.append(worker)
        return worker

    factory.created = created  # type: ignore[attr-defined]
    return factory


@pytest.fixture
def mock_llm_factory():
    """Build a MockLLM from a list of replies."""
    return MockLLM
