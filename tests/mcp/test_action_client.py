"""Tests for the action client against an in-process worker."""

import asyncio
import json

import pytest
import respx
from httpx import Response

from concierge.mcp.channel import ChannelError
from concierge.mcp.client import ActionClient, ActionResult, _normalize, default_worker_command

CRM_HOST = "https://crm.test"
VIACEP_URL = "https://viacep.test/ws"

ANA = {"name": "Ana Silva", "email": "ana@example.com", "phone": "11999999999"}

PAULISTA = {
    "cep": "01310-100",
    "logradouro": "Avenida Paulista",
    "bairro": "Bela Vista",
    "localidade": "São Paulo",
    "uf": "SP",
}


@pytest.fixture
def client(make_worker):
    return ActionClient(make_worker)


class TestInitialize:
    @pytest.mark.asyncio
    async def test_handshake_order(self, client, make_worker):
        await client.initialize()

        worker = make_worker.created[0]
        assert [r["method"] for r in worker.requests] == ["initialize", "tools/list"]
        assert worker.notifications == [
            {"jsonrpc": "2.0", "method": "notifications/initialized"}
        ]
        init = worker.requests[0]["params"]
        assert init["clientInfo"]["name"] == "concierge-chatbot"
        assert client.connected

    @pytest.mark.asyncio
    async def test_lists_worker_tools(self, client):
        tools = await client.list_tools()

        assert [t.name for t in tools] == ["createCustomer", "getAddressByZipcode"]
        assert tools[0].required == ["name", "email", "phone"]

    @pytest.mark.asyncio
    async def test_concurrent_calls_share_one_worker(self, client, make_worker):
        await asyncio.gather(
            client.lookup_address("123"),
            client.lookup_address("456"),
            client.lookup_address("789"),
        )

        assert len(make_worker.created) == 1
        worker = make_worker.created[0]
        assert worker.starts == 1
        methods = [r["method"] for r in worker.requests]
        assert methods.count("initialize") == 1
        assert methods.count("tools/call") == 3

    @pytest.mark.asyncio
    async def test_failed_handshake_closes_channel(self, make_worker):
        client = ActionClient(lambda: make_worker(request_timeout=0.05, silent={"initialize"}))

        with pytest.raises(ChannelError):
            await client.initialize()

        assert not client.connected
        assert make_worker.created[0].closed

    @pytest.mark.asyncio
    async def test_reconnects_after_channel_dies(self, client, make_worker):
        await client.initialize()
        await make_worker.created[0].close()
        assert not client.connected

        await client.initialize()

        assert len(make_worker.created) == 2
        assert client.connected

    @pytest.mark.asyncio
    async def test_shutdown_closes_channel(self, client, make_worker):
        await client.initialize()
        await client.shutdown()

        assert make_worker.created[0].closed
        assert not client.connected


class TestCallTool:
    @pytest.mark.asyncio
    @respx.mock
    async def test_create_customer_success(self, client, make_worker):
        route = respx.post(f"{CRM_HOST}/api/v1/customers").mock(
            return_value=Response(201, json={"id": 123, **ANA})
        )

        action = await client.create_customer(ANA)

        assert action.ok
        assert action.tool == "createCustomer"
        assert action.input == ANA
        assert action.result["status"] == "success"
        assert action.result["customerId"] == 123
        assert route.call_count == 1
        request = route.calls.last.request
        assert request.headers["Authorization"] == "Bearer secret-token"
        assert json.loads(request.content) == ANA
        assert make_worker.created[0].tool_calls == [{"name": "createCustomer", "arguments": ANA}]

    @pytest.mark.asyncio
    @respx.mock
    async def test_invalid_customer_never_reaches_crm(self, client):
        route = respx.post(f"{CRM_HOST}/api/v1/customers")

        action = await client.create_customer({"name": "Ana"})

        assert action.ok
        assert action.result == {
            "status": "error",
            "error": "Validation failed",
            "errors": ["email is required", "phone is required"],
        }
        assert not route.called

    @pytest.mark.asyncio
    @respx.mock
    async def test_address_lookup(self, client):
        respx.get(f"{VIACEP_URL}/01310100/json").mock(return_value=Response(200, json=PAULISTA))

        action = await client.lookup_address("01310-100")

        assert action.result["status"] == "success"
        assert action.result["address"]["logradouro"] == "Avenida Paulista"
        assert action.result["customer_address"]["city"] == "São Paulo"

    @pytest.mark.asyncio
    @respx.mock
    async def test_short_zipcode_makes_no_http_call(self, client):
        action = await client.lookup_address("123")

        assert action.result == {"status": "error", "error": "Invalid CEP. Must contain 8 digits."}
        assert not respx.calls

    @pytest.mark.asyncio
    async def test_unknown_tool_is_an_error(self, client):
        action = await client.call_tool("deleteEverything", {})

        assert not action.ok
        assert action.error == "Unknown tool: deleteEverything"
        assert action.result is None

    @pytest.mark.asyncio
    async def test_empty_tool_name_never_reaches_worker(self, client, make_worker):
        action = await client.call_tool("", {"zipcode": "01310100"})

        assert not action.ok
        assert action.error.startswith("Invalid tool call")
        assert make_worker.created == []

    @pytest.mark.asyncio
    async def test_timeout_is_captured(self, make_worker):
        client = ActionClient(lambda: make_worker(request_timeout=0.05, silent={"tools/call"}))

        action = await client.lookup_address("01310100")

        assert not action.ok
        assert "timed out" in action.error
        assert make_worker.created[0].pending_ids == []

    @pytest.mark.asyncio
    async def test_worker_start_failure_is_captured(self):
        class BrokenChannel:
            closed = False

            async def start(self):
                raise ChannelError("Failed to start worker 'nope'")

            async def close(self):
                self.closed = True

        client = ActionClient(BrokenChannel)

        action = await client.create_customer(ANA)

        assert action.error == "Failed to start worker 'nope'"
        assert action.input == ANA


class TestNormalize:
    def _action(self):
        return ActionResult(tool="createCustomer", input={})

    def test_json_text_is_parsed(self):
        raw = {"content": [{"type": "text", "text": '{"status": "success", "customerId": 7}'}]}
        assert _normalize(self._action(), raw).result == {"status": "success", "customerId": 7}

    def test_non_json_text_passes_raw_through(self):
        raw = {"content": [{"type": "text", "text": "created!"}]}
        assert _normalize(self._action(), raw).result == raw

    def test_no_text_content_passes_raw_through(self):
        raw = {"content": [{"type": "image", "data": "...", "mimeType": "image/png"}]}
        assert _normalize(self._action(), raw).result == raw

    def test_unexpected_shape_passes_raw_through(self):
        assert _normalize(self._action(), "just a string").result == "just a string"

    def test_is_error_sets_error(self):
        raw = {"content": [{"type": "text", "text": "boom"}], "isError": True}
        action = _normalize(self._action(), raw)
        assert action.error == "boom"
        assert not action.ok


def test_default_worker_command_forwards_config():
    command = default_worker_command("/etc/concierge.yaml")
    assert command[1:] == ["-m", "concierge.mcp.worker", "--config", "/etc/concierge.yaml"]
    assert default_worker_command()[1:] == ["-m", "concierge.mcp.worker"]
