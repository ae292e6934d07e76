"""Typed domain exceptions for rate calculation.

Callers distinguish the recognized shipping failures (``ShippingError``
and its subclasses) from everything else. Only the recognized kinds are
downgraded to "no rate offered" by the availability check.

Usage:
    # In package building
    raise PolicyViolation.from_code("E-2101", max_weight=150)

    # In a caller deciding whether to offer a service
    try:
        price = calculator.compute(shipment)
    except ShippingError as e:
        logger.info("rate_unavailable error=%s", e)
"""

from dataclasses import dataclass

from shiprate.errors.registry import get_error

SHIPPING_ERROR_PREFIX = "Shipping error"


@dataclass
class ShippingError(Exception):
    """Recognized shipping failure.

    Attributes:
        code: Error code (E-XXXX format)
        message: Human-readable error message
        remediation: Suggested fix
        details: Raw error details
    """

    code: str
    message: str
    remediation: str = ""
    details: dict | None = None

    def __str__(self) -> str:
        """Return formatted error message."""
        return f"[{self.code}] {self.message}"

    @classmethod
    def from_code(cls, code: str, details: dict | None = None, **context: object) -> "ShippingError":
        """Create error from registry code with context substitution.

        Args:
            code: Error code in E-XXXX format.
            details: Raw details to attach to the error.
            **context: Values for message template substitution.

        Returns:
            Error instance with a prefixed, formatted message.
        """
        error_def = get_error(code)
        if not error_def:
            return cls(
                code=code,
                message=f"{SHIPPING_ERROR_PREFIX}: unknown error {code}",
                remediation="Contact support.",
                details=details,
            )

        message = error_def.message_template
        try:
            message = message.format(**context)
        except KeyError:
            # Keep template if some placeholders are missing
            pass

        return cls(
            code=error_def.code,
            message=f"{SHIPPING_ERROR_PREFIX}: {message}",
            remediation=error_def.remediation,
            details=details,
        )


class PolicyViolation(ShippingError):
    """A package or item breaks the weight policy for the destination."""


class CarrierError(ShippingError):
    """Normalized carrier failure, safe to cache and replay."""


class CarrierResponseError(Exception):
    """Raw failure raised by a carrier transport.

    Attributes:
        params: Parsed carrier response body, when the carrier returned one.
    """

    def __init__(self, message: str, params: dict | None = None) -> None:
        super().__init__(message)
        self.params = params


class ConfigError(ValueError):
    """Rate configuration could not be loaded or validated."""

    def __init__(self, details: str) -> None:
        error_def = get_error("E-4101")
        message = error_def.message_template.format(details=details) if error_def else details
        super().__init__(message)
        self.code = "E-4101"
        self.details = details
