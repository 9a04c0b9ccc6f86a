"""createCustomer tool."""

from typing import Any

from concierge.services.customers import (
    CUSTOMER_OPTIONAL_FIELDS,
    CustomerService,
    build_customer_record,
    validate_customer_fields,
)
from concierge.tools.base import Tool, ToolParameter, ToolSchema

CREATE_CUSTOMER = "createCustomer"

CREATE_CUSTOMER_SCHEMA = ToolSchema(
    name=CREATE_CUSTOMER,
    description=(
        "Create a new customer in the external API. Requires name, email, and phone. "
        "Supports optional fields like address, UTM parameters, and more."
    ),
    parameters=[
        ToolParameter("name", "string", "Customer full name (required)", required=True),
        ToolParameter("email", "string", "Customer email address (required)", required=True),
        ToolParameter("phone", "string", "Customer phone number (required)", required=True),
        *(
            ToolParameter(name, json_type, description)
            for name, (json_type, description) in CUSTOMER_OPTIONAL_FIELDS.items()
        ),
    ],
)


def create_customer_tool(service: CustomerService) -> Tool:
    """Build the createCustomer tool around a CRM client.

    Validation errors are returned as data, all of them at once, and the CRM
    is only called for a valid record.
    """

    async def create_customer(arguments: dict[str, Any]) -> dict[str, Any]:
        errors = validate_customer_fields(arguments)
        if errors:
            return {"status": "error", "error": "Validation failed", "errors": errors}
        return await service.create_customer(build_customer_record(arguments))

    return Tool(schema=CREATE_CUSTOMER_SCHEMA, fn=create_customer)
