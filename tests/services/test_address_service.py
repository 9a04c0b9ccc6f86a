"""Tests for the ViaCEP client."""

import httpx
import pytest
import respx
from httpx import Response

from concierge.services.addresses import AddressService, normalize_zipcode, to_customer_address

VIACEP_URL = "https://viacep.test/ws"

PAULISTA = {
    "cep": "01310-100",
    "logradouro": "Avenida Paulista",
    "bairro": "Bela Vista",
    "localidade": "São Paulo",
    "uf": "SP",
}


@pytest.fixture
def service():
    return AddressService(base_url=VIACEP_URL)


def test_normalize_zipcode():
    assert normalize_zipcode(" 01310-100 ") == "01310100"


def test_to_customer_address():
    assert to_customer_address(PAULISTA) == {
        "zipcode": "01310-100",
        "street": "Avenida Paulista",
        "neighborhood": "Bela Vista",
        "city": "São Paulo",
        "state": "SP",
    }


@pytest.mark.asyncio
@respx.mock
@pytest.mark.parametrize("zipcode", ["01310-100", "01310100"])
async def test_lookup_success(service, zipcode):
    route = respx.get(f"{VIACEP_URL}/01310100/json").mock(return_value=Response(200, json=PAULISTA))

    result = await service.lookup(zipcode)

    assert result == {"status": "success", "address": PAULISTA}
    assert route.call_count == 1


@pytest.mark.asyncio
@respx.mock
@pytest.mark.parametrize("zipcode", ["123", "0131010", "013101000", "abcdefgh"])
async def test_invalid_zipcode_makes_no_request(service, zipcode):
    result = await service.lookup(zipcode)

    assert result == {"status": "error", "error": "Invalid CEP. Must contain 8 digits."}
    assert not respx.calls


@pytest.mark.asyncio
@respx.mock
async def test_not_found(service):
    respx.get(f"{VIACEP_URL}/99999999/json").mock(return_value=Response(200, json={"erro": True}))

    assert await service.lookup("99999-999") == {"status": "error", "error": "CEP not found."}


@pytest.mark.asyncio
@respx.mock
async def test_timeout(service):
    respx.get(f"{VIACEP_URL}/01310100/json").mock(side_effect=httpx.ReadTimeout("slow"))

    result = await service.lookup("01310100")

    assert result == {"status": "error", "error": "Timeout while fetching CEP. Try again."}


@pytest.mark.asyncio
@respx.mock
async def test_network_error(service):
    respx.get(f"{VIACEP_URL}/01310100/json").mock(side_effect=httpx.ConnectError("down"))

    assert await service.lookup("01310100") == {"status": "error", "error": "Error fetching CEP."}


@pytest.mark.asyncio
@respx.mock
async def test_http_error_body(service):
    respx.get(f"{VIACEP_URL}/01310100/json").mock(
        return_value=Response(400, json={"message": "bad request"})
    )

    result = await service.lookup("01310100")

    assert result == {"status": "error", "error": '{"message": "bad request"}'}
