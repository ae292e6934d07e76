"""Deterministic cache keys for carrier requests.

Two requests share a key exactly when they would send the carrier the
same question: same stock location, carrier, order, destination,
contents, options and locale. Content order does not matter.
"""

import hashlib
import json
from typing import Any

from shiprate.models import ShipmentPackage

TIMINGS_SUFFIX = "-timings"


def compute_contents_hash(shipment: ShipmentPackage) -> str:
    """MD5 over sorted ``variant_quantity`` pairs."""
    pairs = sorted(f"{item.variant.id}_{item.quantity}" for item in shipment.contents)
    return hashlib.md5("|".join(pairs).encode("utf-8")).hexdigest()


def serialize_options(options: dict[str, Any]) -> str:
    """Stable text form of request options, keys sorted at every level."""
    parts = []
    for key in sorted(options):
        value = options[key]
        if isinstance(value, dict):
            value = json.dumps(value, sort_keys=True, separators=(",", ":"), default=str)
        parts.append(f"{key}={value}")
    return ":".join(parts)


def compute_options_hash(options: dict[str, Any]) -> str:
    """MD5 of the serialized options, so credentials never appear in a key."""
    return hashlib.md5(serialize_options(options).encode("utf-8")).hexdigest()


def cache_key(
    shipment: ShipmentPackage,
    carrier_name: str,
    options: dict[str, Any] | None = None,
    locale: str = "en",
) -> str:
    """Build the cache fingerprint for a rate request.

    Args:
        shipment: Shipment being rated.
        carrier_name: Name of the carrier transport.
        options: Request options sent with the rate call.
        locale: Active locale (carrier service names are localized).

    Returns:
        Fingerprint string with all whitespace removed.
    """
    stock_location = shipment.stock_location
    prefix = "" if stock_location is None else f"{stock_location.id}-"
    address = shipment.order.ship_address
    fields = [
        carrier_name,
        shipment.order.number,
        address.country,
        address.best_state,
        address.city,
        address.zipcode,
        compute_contents_hash(shipment),
        compute_options_hash(options or {}),
        locale,
    ]
    key = prefix + "-".join(str(f) for f in fields)
    return "".join(key.split())


def timings_key(rate_key: str) -> str:
    return rate_key + TIMINGS_SUFFIX
