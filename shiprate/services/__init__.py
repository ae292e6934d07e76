"""Rate calculation services.

Provides the rate calculator and the building blocks it composes:
package bucketing, location building, request fingerprints and the
carrier response cache.
"""

from shiprate.services.carrier import CarrierTransport, RateEstimate, RateResponse
from shiprate.services.locations import CarrierLocation, build_location
from shiprate.services.packages import (
    PhysicalPackage,
    WeightPolicy,
    build_packages,
    check_shippable,
    resolve_max_weight,
)
from shiprate.services.rate_cache import RateCache, get_rate_cache, reset_rate_cache
from shiprate.services.rate_calculator import RateCalculator

__all__ = [
    "RateCalculator",
    "RateCache",
    "get_rate_cache",
    "reset_rate_cache",
    "CarrierTransport",
    "RateEstimate",
    "RateResponse",
    "CarrierLocation",
    "build_location",
    "PhysicalPackage",
    "WeightPolicy",
    "build_packages",
    "check_shippable",
    "resolve_max_weight",
]
