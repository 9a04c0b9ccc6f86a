"""Tests for the CRM customers client."""

import json

import httpx
import pytest
import respx
from httpx import Response

from concierge.services.customers import (
    CustomerService,
    build_customer_record,
    is_valid_email,
    validate_customer_fields,
)

CRM_HOST = "https://crm.test"
CUSTOMERS_URL = f"{CRM_HOST}/api/v1/customers"

ANA = {"name": "Ana Silva", "email": "ana@example.com", "phone": "11999999999"}


@pytest.fixture
def service():
    return CustomerService(host=f"{CRM_HOST}/", token="secret-token")


class TestValidation:
    @pytest.mark.parametrize(
        "email,valid",
        [
            ("ana@example.com", True),
            ("a.b+c@mail.example.com.br", True),
            ("ana@example", False),
            ("ana example@x.com", False),
            ("@example.com", False),
            ("ana@", False),
        ],
    )
    def test_is_valid_email(self, email, valid):
        assert is_valid_email(email) is valid

    def test_valid_record(self):
        assert validate_customer_fields(ANA) == []

    def test_every_violation_reported(self):
        assert validate_customer_fields({"name": "", "email": "bad"}) == [
            "name is required",
            "email format is invalid",
            "phone is required",
        ]

    def test_build_record_filters_unknown_and_none(self):
        record = build_customer_record({**ANA, "tags": "vip", "state": None, "foo": 1})
        assert record == {**ANA, "tags": "vip"}


class TestCreateCustomer:
    @pytest.mark.asyncio
    @respx.mock
    async def test_success(self, service):
        route = respx.post(CUSTOMERS_URL).mock(
            return_value=Response(201, json={"id": 42, "name": "Ana Silva"})
        )

        result = await service.create_customer(ANA)

        assert result == {
            "status": "success",
            "customerId": 42,
            "data": {"id": 42, "name": "Ana Silva"},
        }
        request = route.calls.last.request
        assert request.headers["Authorization"] == "Bearer secret-token"
        assert json.loads(request.content) == ANA

    @pytest.mark.asyncio
    @respx.mock
    async def test_customer_id_fallback(self, service):
        respx.post(CUSTOMERS_URL).mock(return_value=Response(200, json={"customerId": "abc"}))

        result = await service.create_customer(ANA)

        assert result["customerId"] == "abc"

    @pytest.mark.asyncio
    @respx.mock
    async def test_http_error_carries_body_and_status(self, service):
        respx.post(CUSTOMERS_URL).mock(
            return_value=Response(422, json={"message": "email already taken"})
        )

        result = await service.create_customer(ANA)

        assert result["status"] == "error"
        assert result["statusCode"] == 422
        assert json.loads(result["error"]) == {"message": "email already taken"}

    @pytest.mark.asyncio
    @respx.mock
    async def test_network_error(self, service):
        respx.post(CUSTOMERS_URL).mock(side_effect=httpx.ConnectError("connection refused"))

        result = await service.create_customer(ANA)

        assert result == {"status": "error", "error": "connection refused"}

    @pytest.mark.asyncio
    @respx.mock
    async def test_unconfigured_makes_no_request(self):
        service = CustomerService(host=None, token=None)

        result = await service.create_customer(ANA)

        assert not service.configured
        assert result["status"] == "error"
        assert "CUSTOMER_API_HOST" in result["error"]
        assert not respx.calls
