"""Error handling framework for shiprate.

This package provides:
- Error code registry with E-XXXX format codes
- Typed shipping errors (policy violations, carrier failures)
- Carrier error translation to a single error kind

Error categories:
- E-2xxx: Shipping policy errors
- E-3xxx: Carrier errors
- E-4xxx: System/configuration errors
"""

from shiprate.errors.registry import (
    ErrorCategory,
    ErrorCode,
    ERROR_REGISTRY,
    get_error,
    get_errors_by_category,
)
from shiprate.errors.domain import (
    CarrierError,
    CarrierResponseError,
    ConfigError,
    PolicyViolation,
    ShippingError,
)
from shiprate.errors.carrier_translation import (
    CARRIER_MESSAGE_PATTERNS,
    extract_carrier_message,
    translate_carrier_error,
)

__all__ = [
    # Registry
    "ErrorCode",
    "ErrorCategory",
    "ERROR_REGISTRY",
    "get_error",
    "get_errors_by_category",
    # Domain errors
    "ShippingError",
    "PolicyViolation",
    "CarrierError",
    "CarrierResponseError",
    "ConfigError",
    # Carrier translation
    "translate_carrier_error",
    "extract_carrier_message",
    "CARRIER_MESSAGE_PATTERNS",
]
