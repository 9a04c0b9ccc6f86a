"""HTTP collaborators used by the worker tools."""

from concierge.services.addresses import AddressService, normalize_zipcode, to_customer_address
from concierge.services.customers import (
    CUSTOMER_OPTIONAL_FIELDS,
    CUSTOMER_REQUIRED_FIELDS,
    CustomerService,
    validate_customer_fields,
)

__all__ = [
    "CUSTOMER_OPTIONAL_FIELDS",
    "CUSTOMER_REQUIRED_FIELDS",
    "AddressService",
    "CustomerService",
    "normalize_zipcode",
    "to_customer_address",
    "validate_customer_fields",
]
