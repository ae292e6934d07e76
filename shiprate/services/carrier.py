"""Contract between the rating core and a carrier transport.

Transports own the wire protocol. They raise CarrierResponseError on
failure and declare up front whether they can estimate transit times.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol

from shiprate.services.locations import CarrierLocation
from shiprate.services.packages import PhysicalPackage


@dataclass(frozen=True)
class RateEstimate:
    """One priced service. ``price`` is in minor currency units."""

    service_name: str
    price: int | float


@dataclass(frozen=True)
class RateResponse:
    rates: Sequence[RateEstimate] = field(default_factory=tuple)


class CarrierTransport(Protocol):
    """Rate-capable carrier transport.

    Attributes:
        name: Carrier name, part of every cache key.
        supports_time_in_transit: Whether find_time_in_transit is usable.
    """

    name: str
    supports_time_in_transit: bool

    def find_rates(
        self,
        origin: CarrierLocation,
        destination: CarrierLocation,
        packages: Sequence[PhysicalPackage],
        options: dict[str, Any],
    ) -> RateResponse:
        ...

    def find_time_in_transit(
        self,
        origin: CarrierLocation,
        destination: CarrierLocation,
        packages: Sequence[PhysicalPackage],
        options: dict[str, Any],
    ) -> Mapping[str, Any]:
        ...
