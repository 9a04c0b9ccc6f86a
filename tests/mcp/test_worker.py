"""End-to-end tests against a real worker subprocess."""

from pathlib import Path

import pytest

from concierge.config.loader import save_config
from concierge.config.schema import ConciergeConfig
from concierge.mcp.client import ActionClient


@pytest.fixture
def worker_config(tmp_path: Path):
    config = ConciergeConfig()
    config.worker.ready_timeout = 10
    config.worker.request_timeout = 20
    path = tmp_path / "concierge.yaml"
    save_config(config, path)
    return config, str(path)


@pytest.mark.asyncio
async def test_worker_round_trip(worker_config):
    config, path = worker_config
    client = ActionClient.from_config(config, config_path=path)
    try:
        tools = await client.list_tools()
        assert {t.name for t in tools} == {"createCustomer", "getAddressByZipcode"}

        invalid_zip = await client.lookup_address("123")
        assert invalid_zip.ok
        assert invalid_zip.result == {
            "status": "error",
            "error": "Invalid CEP. Must contain 8 digits.",
        }

        invalid_customer = await client.create_customer({"name": "Ana Silva"})
        assert invalid_customer.result["errors"] == ["email is required", "phone is required"]

        unknown = await client.call_tool("dropTables", {})
        assert not unknown.ok
        assert "Unknown tool: dropTables" in unknown.error
    finally:
        await client.shutdown()

    assert not client.connected
