"""Client for the external CRM customers API."""

import json
import logging
import re
from typing import Any

import httpx

logger = logging.getLogger(__name__)

CUSTOMER_REQUIRED_FIELDS = ("name", "email", "phone")

# field name -> (JSON type, description)
CUSTOMER_OPTIONAL_FIELDS: dict[str, tuple[str, str]] = {
    "retention": ("boolean", "Retention flag"),
    "identification": ("string", "Customer identification document (e.g., CPF)"),
    "zipcode": ("string", "ZIP/Postal code"),
    "state": ("string", "State/Province"),
    "street": ("string", "Street name"),
    "number": ("string", "Street number"),
    "neighborhood": ("string", "Neighborhood"),
    "city": ("string", "City"),
    "list_ids": ("number", "List ID for categorization"),
    "create_deal": ("boolean", "Whether to create a deal"),
    "tags": ("string", "Tags for the customer"),
    "url": ("string", "URL reference"),
    "utm_term": ("string", "UTM term parameter"),
    "utm_medium": ("string", "UTM medium parameter"),
    "utm_source": ("string", "UTM source parameter"),
    "utm_campaign": ("string", "UTM campaign parameter"),
    "company_id": ("string", "Company ID"),
    "utm_content": ("string", "UTM content parameter"),
}

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def is_valid_email(email: str) -> bool:
    """Check the simple ``local@domain.tld`` shape."""
    return bool(_EMAIL_RE.match(email))


def validate_customer_fields(data: dict[str, Any]) -> list[str]:
    """Collect every missing or malformed required field.

    Args:
        data: Candidate customer record

    Returns:
        One message per violation; empty when the record is valid
    """
    errors: list[str] = []

    if not data.get("name"):
        errors.append("name is required")

    email = data.get("email")
    if not email:
        errors.append("email is required")
    elif not isinstance(email, str) or not is_valid_email(email):
        errors.append("email format is invalid")

    if not data.get("phone"):
        errors.append("phone is required")

    return errors


def build_customer_record(data: dict[str, Any]) -> dict[str, Any]:
    """Keep only the known customer fields, dropping unset optional ones."""
    known = set(CUSTOMER_REQUIRED_FIELDS) | set(CUSTOMER_OPTIONAL_FIELDS)
    return {key: value for key, value in data.items() if key in known and value is not None}


class CustomerService:
    """Creates customers through ``POST /api/v1/customers``."""

    def __init__(
        self,
        host: str | None,
        token: str | None,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ):
        """
        Initialize the CRM client.

        Args:
            host: CRM base URL
            token: Bearer token
            timeout: Request timeout in seconds
            client: Optional shared HTTP client
        """
        self.host = (host or "").rstrip("/")
        self.token = token or ""
        self.timeout = timeout
        self._client = client or httpx.AsyncClient(timeout=timeout)

    @property
    def configured(self) -> bool:
        return bool(self.host and self.token)

    async def create_customer(self, record: dict[str, Any]) -> dict[str, Any]:
        """Create a customer in the CRM.

        Never raises: failures come back as ``{"status": "error", ...}``.

        Args:
            record: Validated customer record

        Returns:
            ``{"status": "success", "customerId", "data"}`` or an error object
        """
        if not self.configured:
            return {
                "status": "error",
                "error": "Missing required settings: CUSTOMER_API_HOST or CUSTOMER_API_TOKEN",
            }

        url = f"{self.host}/api/v1/customers"
        logger.debug("POST %s payload=%s", url, record)

        try:
            response = await self._client.post(
                url,
                json=record,
                headers={"Authorization": f"Bearer {self.token}"},
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.info("CRM rejected customer: %s", e.response.status_code)
            return {
                "status": "error",
                "error": _error_body(e.response),
                "statusCode": e.response.status_code,
            }
        except httpx.HTTPError as e:
            logger.warning("CRM request failed: %s", e)
            return {"status": "error", "error": str(e) or type(e).__name__}

        try:
            data = response.json()
        except ValueError:
            data = {"raw": response.text}

        customer_id = None
        if isinstance(data, dict):
            customer_id = data.get("id") or data.get("customerId")

        return {"status": "success", "customerId": customer_id, "data": data}

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()


def _error_body(response: httpx.Response) -> str:
    try:
        return json.dumps(response.json())
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
