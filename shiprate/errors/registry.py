"""Error code registry with E-XXXX format codes.

This module defines the error code system for shiprate, organizing errors
into categories:
- E-2xxx: Shipping policy errors (weight limits, unsupported countries)
- E-3xxx: Carrier errors
- E-4xxx: System/configuration errors

Each error includes a code, title, message template, and remediation steps.
"""

from dataclasses import dataclass
from enum import Enum


class ErrorCategory(str, Enum):
    """Categories for error codes."""

    POLICY = "policy"  # E-2xxx: Shipping policy errors
    CARRIER = "carrier"  # E-3xxx: Carrier errors
    SYSTEM = "system"  # E-4xxx: System/configuration errors


@dataclass
class ErrorCode:
    """Definition of an error code with metadata.

    Attributes:
        code: Error code in E-XXXX format.
        category: Error category for grouping.
        title: Short title for display.
        message_template: Message with {placeholders} for context.
        remediation: Action user should take to resolve.
        is_retryable: Whether the operation can be retried without user action.
    """

    code: str  # E-XXXX format
    category: ErrorCategory
    title: str  # Short title for display
    message_template: str  # Message with {placeholders}
    remediation: str  # Action user should take
    is_retryable: bool = False  # Can be retried without user action


# Error registry - all defined error codes
ERROR_REGISTRY: dict[str, ErrorCode] = {
    # Policy errors (E-2xxx)
    "E-2101": ErrorCode(
        code="E-2101",
        category=ErrorCategory.POLICY,
        title="Package Weight Exceeded",
        message_template=(
            "The maximum per package weight for the selected service from "
            "the selected country is {max_weight} ounces."
        ),
        remediation="Split the order into lighter shipments or choose another service.",
    ),
    "E-2102": ErrorCode(
        code="E-2102",
        category=ErrorCategory.POLICY,
        title="Service Not Offered",
        message_template="The selected service is not offered for country '{country}'.",
        remediation="Choose a different service for this destination.",
    ),
    "E-2103": ErrorCode(
        code="E-2103",
        category=ErrorCategory.POLICY,
        title="Missing Stock Location",
        message_template="Shipment for order {order} has no stock location to ship from.",
        remediation="Assign the shipment to a stock location before requesting rates.",
    ),
    # Carrier errors (E-3xxx)
    "E-3001": ErrorCode(
        code="E-3001",
        category=ErrorCategory.CARRIER,
        title="Carrier Service Unavailable",
        message_template="{carrier_message}",
        remediation="Wait a few minutes and retry. Check the carrier status page if the issue persists.",
        is_retryable=True,
    ),
    "E-3002": ErrorCode(
        code="E-3002",
        category=ErrorCategory.CARRIER,
        title="Carrier Rate Limit Exceeded",
        message_template="{carrier_message}",
        remediation="Wait 60 seconds and retry.",
        is_retryable=True,
    ),
    "E-3003": ErrorCode(
        code="E-3003",
        category=ErrorCategory.CARRIER,
        title="Carrier Address Rejected",
        message_template="{carrier_message}",
        remediation="Verify the destination address is complete and correct. Check for typos.",
    ),
    "E-3004": ErrorCode(
        code="E-3004",
        category=ErrorCategory.CARRIER,
        title="Carrier Service Not Available",
        message_template="{carrier_message}",
        remediation="Try a different service level or verify the destination is serviceable.",
    ),
    "E-3005": ErrorCode(
        code="E-3005",
        category=ErrorCategory.CARRIER,
        title="Carrier Unknown Error",
        message_template="{carrier_message}",
        remediation="Contact support with error code E-3005 and the carrier message for assistance.",
    ),
    "E-3006": ErrorCode(
        code="E-3006",
        category=ErrorCategory.CARRIER,
        title="Carrier Authentication Failed",
        message_template="{carrier_message}",
        remediation="Check the carrier credentials configured for this stock location.",
    ),
    # System errors (E-4xxx)
    "E-4101": ErrorCode(
        code="E-4101",
        category=ErrorCategory.SYSTEM,
        title="Configuration Error",
        message_template="Invalid rate configuration: {details}",
        remediation="Correct the configuration file or SHIPRATE_ environment overrides.",
    ),
}


def get_error(code: str) -> ErrorCode | None:
    """Get error definition by code.

    Args:
        code: Error code in E-XXXX format.

    Returns:
        ErrorCode if found, None otherwise.
    """
    return ERROR_REGISTRY.get(code)


def get_errors_by_category(category: ErrorCategory) -> list[ErrorCode]:
    """Get all errors in a category.

    Args:
        category: The error category to filter by.

    Returns:
        List of ErrorCode objects in the specified category.
    """
    return [e for e in ERROR_REGISTRY.values() if e.category == category]
