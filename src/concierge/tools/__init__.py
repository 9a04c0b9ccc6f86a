"""Tools served by the concierge worker.

- **createCustomer** - validate a customer record and create it in the CRM
- **getAddressByZipcode** - look up a Brazilian address by CEP via ViaCEP

Usage::

    from concierge.tools import build_registry

    registry = build_registry(config)
    result = await registry.call("getAddressByZipcode", {"zipcode": "01310-100"})
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from concierge.services.addresses import AddressService
from concierge.services.customers import CustomerService
from concierge.tools.address import ADDRESS_LOOKUP, address_lookup_tool
from concierge.tools.customer import CREATE_CUSTOMER, create_customer_tool
from concierge.tools.registry import ToolNotFoundError, ToolRegistry

if TYPE_CHECKING:
    from concierge.config.schema import ConciergeConfig

__all__ = [
    "ADDRESS_LOOKUP",
    "CREATE_CUSTOMER",
    "ToolNotFoundError",
    "ToolRegistry",
    "build_registry",
]


def build_registry(
    config: ConciergeConfig,
    customers: CustomerService | None = None,
    addresses: AddressService | None = None,
) -> ToolRegistry:
    """Create the worker's tool registry from configuration.

    Args:
        config: Concierge configuration
        customers: Override for the CRM client
        addresses: Override for the ViaCEP client

    Returns:
        Registry holding createCustomer and getAddressByZipcode
    """
    customers = customers or CustomerService(
        host=config.customer_api.host,
        token=config.customer_api.token,
        timeout=config.customer_api.timeout,
    )
    addresses = addresses or AddressService(
        base_url=config.address_api.base_url,
        timeout=config.address_api.timeout,
    )
    return ToolRegistry([create_customer_tool(customers), address_lookup_tool(addresses)])
