"""ViaCEP client for Brazilian address lookup."""

import json
import logging
import re
from typing import Any

import httpx

logger = logging.getLogger(__name__)

VIACEP_URL = "https://viacep.com.br/ws"


def normalize_zipcode(zipcode: str) -> str:
    """Strip everything that is not a digit."""
    return re.sub(r"\D", "", zipcode)


def to_customer_address(address: dict[str, Any]) -> dict[str, Any]:
    """Map a ViaCEP address onto customer record address fields."""
    return {
        "zipcode": address.get("cep"),
        "street": address.get("logradouro"),
        "neighborhood": address.get("bairro"),
        "city": address.get("localidade"),
        "state": address.get("uf"),
    }


class AddressService:
    """Looks up addresses with ``GET /ws/{cep}/json``."""

    def __init__(
        self,
        base_url: str = VIACEP_URL,
        timeout: float = 5.0,
        client: httpx.AsyncClient | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def lookup(self, zipcode: str) -> dict[str, Any]:
        """Look up an address by CEP.

        Never raises: failures come back as ``{"status": "error", ...}``.

        Args:
            zipcode: CEP as ``XXXXX-XXX`` or ``XXXXXXXX``

        Returns:
            ``{"status": "success", "address"}`` or an error object
        """
        cep = normalize_zipcode(zipcode)
        if len(cep) != 8:
            return {"status": "error", "error": "Invalid CEP. Must contain 8 digits."}

        url = f"{self.base_url}/{cep}/json"
        logger.debug("GET %s", url)

        try:
            response = await self._client.get(url, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except httpx.TimeoutException:
            logger.warning("ViaCEP timed out for %s", cep)
            return {"status": "error", "error": "Timeout while fetching CEP. Try again."}
        except httpx.HTTPStatusError as e:
            return {"status": "error", "error": _error_body(e.response)}
        except httpx.HTTPError as e:
            logger.warning("ViaCEP request failed: %s", e)
            return {"status": "error", "error": "Error fetching CEP."}
        except ValueError:
            return {"status": "error", "error": "Error fetching CEP."}

        # ViaCEP answers unknown CEPs with 200 and {"erro": true}
        if not isinstance(data, dict) or data.get("erro"):
            return {"status": "error", "error": "CEP not found."}

        return {"status": "success", "address": data}

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()


def _error_body(response: httpx.Response) -> str:
    try:
        return json.dumps(response.json())
    except ValueError:
        return "Error fetching CEP."
