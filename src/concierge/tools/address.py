"""getAddressByZipcode tool."""

from typing import Any

from concierge.services.addresses import AddressService, to_customer_address
from concierge.tools.base import Tool, ToolParameter, ToolSchema

ADDRESS_LOOKUP = "getAddressByZipcode"

ADDRESS_LOOKUP_SCHEMA = ToolSchema(
    name=ADDRESS_LOOKUP,
    description=(
        "Lookup Brazilian address by CEP (zipcode). Returns street, neighborhood, city, "
        "state information from ViaCEP API."
    ),
    parameters=[
        ToolParameter(
            "zipcode",
            "string",
            "Brazilian CEP (zipcode) in format XXXXX-XXX or XXXXXXXX (8 digits)",
            required=True,
        ),
    ],
)


def address_lookup_tool(service: AddressService) -> Tool:
    """Build the getAddressByZipcode tool around a ViaCEP client."""

    async def get_address_by_zipcode(arguments: dict[str, Any]) -> dict[str, Any]:
        zipcode = arguments.get("zipcode")
        if not zipcode:
            return {"status": "error", "error": "Zipcode is required"}

        result = await service.lookup(str(zipcode))
        if result.get("status") == "success":
            result["customer_address"] = to_customer_address(result["address"])
        return result

    return Tool(schema=ADDRESS_LOOKUP_SCHEMA, fn=get_address_by_zipcode)
