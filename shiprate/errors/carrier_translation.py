"""Carrier error translation to shiprate CarrierError.

Carriers report failures in different response shapes. This module pulls
the human-readable message out of whichever shape the carrier used and
maps it onto one error kind with an E-code and remediation.
"""

import logging

from shiprate.errors.domain import CarrierError, CarrierResponseError
from shiprate.utils.redaction import sanitize_error_message

logger = logging.getLogger(__name__)


# Carrier message fragments that map to a more specific E-code.
# Checked in order; service and auth fragments come before address ones.
CARRIER_MESSAGE_PATTERNS: dict[str, str] = {
    "unauthorized": "E-3006",
    "authentication": "E-3006",
    "invalid credentials": "E-3006",
    "rate limit": "E-3002",
    "too many requests": "E-3002",
    "service unavailable": "E-3001",
    "temporarily unavailable": "E-3001",
    "not available": "E-3004",
    "no service": "E-3004",
    "invalid postal": "E-3003",
    "invalid zip": "E-3003",
    "postal code": "E-3003",
    "address not found": "E-3003",
    "invalid address": "E-3003",
}


def _dig(params: dict, *path: str) -> object | None:
    """Walk nested dicts along path, returning None on any gap."""
    node: object = params
    for key in path:
        if not isinstance(node, dict) or key not in node:
            return None
        node = node[key]
    return node


def extract_carrier_message(params: dict | None) -> str | None:
    """Extract the error message from a carrier response body.

    Carrier responses vary in structure. This handles the common formats.

    Args:
        params: Parsed carrier response dictionary.

    Returns:
        The carrier's error description, or None when no known shape matches.
    """
    if not isinstance(params, dict):
        return None

    # Format 1: Response.Error.ErrorDescription
    message = _dig(params, "Response", "Error", "ErrorDescription")
    if message is not None:
        return str(message)

    # Format 2: eparcel.error.statusMessage (Canada Post)
    message = _dig(params, "eparcel", "error", "statusMessage")
    if message is not None:
        return str(message)

    return None


def resolve_error_code(carrier_message: str) -> str:
    """Map a carrier message to a shiprate E-code by pattern."""
    lowered = carrier_message.lower()
    for pattern, code in CARRIER_MESSAGE_PATTERNS.items():
        if pattern in lowered:
            return code
    return "E-3005"


def translate_carrier_error(error: Exception) -> CarrierError:
    """Translate a raw carrier failure to a CarrierError.

    Args:
        error: Exception raised by the carrier transport.

    Returns:
        CarrierError whose message carries the carrier's description.
    """
    params = error.params if isinstance(error, CarrierResponseError) else None
    carrier_message = extract_carrier_message(params)
    if carrier_message is None:
        carrier_message = str(error)

    carrier_message = sanitize_error_message(carrier_message, max_length=500) or ""
    code = resolve_error_code(carrier_message)
    logger.info("carrier_error code=%s message=%s", code, carrier_message)

    return CarrierError.from_code(
        code,
        details={"params": params} if params is not None else None,
        carrier_message=carrier_message,
    )
