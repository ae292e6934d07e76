"""Split shipment contents into carrier-compliant physical packages.

Units are bucketed greedily: per-unit weights are sorted ascending and
poured into packages until the next unit would push a package over the
effective max weight. Products that ship in their own custom packaging
are never mixed into those buckets; every unit becomes its own package.

Weights handed to the carrier are in ounces (stored weight multiplied by
``unit_multiplier``).
"""

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from shiprate.config import RateConfig
from shiprate.errors.domain import PolicyViolation
from shiprate.models import ContentItem, ShipmentPackage

logger = logging.getLogger(__name__)

DimensionsFn = Callable[[ShipmentPackage], Sequence[float]]


@dataclass(frozen=True)
class PhysicalPackage:
    """One parcel in a carrier rate request."""

    weight: float
    dimensions: tuple[float, ...] = ()
    units: str = "imperial"


def resolve_max_weight(country_cap: float, global_cap: float) -> float:
    """Combine the country cap and the global per-package cap.

    Zero means unlimited on both sides, so the result is the smaller of
    the nonzero caps and only zero when both are zero.
    """
    if country_cap == 0 and global_cap > 0:
        return global_cap
    if country_cap > 0 and 0 < global_cap < country_cap:
        return global_cap
    return country_cap


@dataclass(frozen=True)
class WeightPolicy:
    """Weight limits in force for one rate request.

    Attributes:
        country_max_weights: ISO code to max ounces per package. 0 means
            unlimited, None means the service does not ship there.
        max_weight_per_package: Global cap in stored weight units.
        unit_multiplier: Stored weight units to ounces.
        default_weight: Substitute for variants without a positive weight.
        units: Unit system reported on greedy packages.
    """

    country_max_weights: dict[str, float | None] = field(default_factory=dict)
    max_weight_per_package: float = 0.0
    unit_multiplier: float = 1.0
    default_weight: float = 0.0
    units: str = "imperial"

    @classmethod
    def from_config(cls, config: RateConfig) -> "WeightPolicy":
        return cls(
            country_max_weights=dict(config.country_max_weights),
            max_weight_per_package=config.max_weight_per_package,
            unit_multiplier=config.unit_multiplier,
            default_weight=config.default_weight,
            units=config.units,
        )

    def country_cap(self, country: str) -> float | None:
        """Max ounces for a destination country, 0 when unrestricted."""
        return self.country_max_weights.get(country.upper(), 0)

    def max_weight_for(self, country: str) -> float:
        """Effective per-package max weight in ounces for a destination.

        Raises:
            PolicyViolation: If the service does not ship to the country.
        """
        country_cap = self.country_cap(country)
        if country_cap is None:
            raise PolicyViolation.from_code("E-2102", country=country)
        global_cap = self.max_weight_per_package * self.unit_multiplier
        return resolve_max_weight(country_cap, global_cap)

    def unit_weight(self, raw_weight: float) -> float:
        """Ounce weight of one unit, substituting the default weight."""
        weight = float(raw_weight or 0)
        if weight <= 0:
            weight = self.default_weight
        return weight * self.unit_multiplier


def _weight_error(max_weight: float) -> PolicyViolation:
    return PolicyViolation.from_code("E-2101", max_weight=f"{max_weight:g}")


def _has_custom_packaging(item: ContentItem) -> bool:
    return bool(item.variant.product.packages)


def unit_weights(shipment: ShipmentPackage, policy: WeightPolicy, max_weight: float) -> list[float]:
    """Ascending per-unit weights of everything without custom packaging.

    Raises:
        PolicyViolation: If a single unit is heavier than max_weight.
    """
    weights = []
    for item in shipment.contents:
        if _has_custom_packaging(item):
            continue
        weight = policy.unit_weight(item.variant.weight)
        if max_weight > 0 and weight > max_weight:
            raise _weight_error(max_weight)
        weights.extend([weight] * item.quantity)
    return sorted(weights)


def custom_packages(shipment: ShipmentPackage, policy: WeightPolicy, max_weight: float) -> list[PhysicalPackage]:
    """One package per unit per custom packaging definition.

    Raises:
        PolicyViolation: If a custom package is heavier than max_weight.
    """
    packages = []
    for item in shipment.contents:
        for definition in item.variant.product.packages:
            weight = definition.weight * policy.unit_multiplier
            if max_weight > 0 and weight > max_weight:
                raise _weight_error(max_weight)
            dimensions = (definition.length, definition.width, definition.height)
            packages.extend(
                PhysicalPackage(weight=weight, dimensions=dimensions, units="imperial")
                for _ in range(item.quantity)
            )
    return packages


def build_packages(
    shipment: ShipmentPackage,
    policy: WeightPolicy,
    dimensions: DimensionsFn | None = None,
) -> list[PhysicalPackage]:
    """Partition shipment contents into physical packages.

    Args:
        shipment: Shipment being rated.
        policy: Weight limits for this request.
        dimensions: Optional callable computing greedy package dimensions
            (used for dimensional-weight pricing).

    Returns:
        Greedy packages followed by custom packages. Empty when there is
        nothing to ship.

    Raises:
        PolicyViolation: If any unit or custom package exceeds the cap, or
            the service does not ship to the destination country.
    """
    max_weight = policy.max_weight_for(shipment.order.ship_address.country)
    weights = unit_weights(shipment, policy, max_weight)
    dims = tuple(dimensions(shipment)) if dimensions else ()

    packages: list[PhysicalPackage] = []
    if weights and max_weight <= 0:
        packages.append(PhysicalPackage(weight=sum(weights), dimensions=dims, units=policy.units))
    elif weights:
        package_weight = 0.0
        for weight in weights:
            if package_weight + weight <= max_weight:
                package_weight += weight
            else:
                packages.append(PhysicalPackage(weight=package_weight, dimensions=dims, units=policy.units))
                package_weight = weight
        if package_weight > 0:
            packages.append(PhysicalPackage(weight=package_weight, dimensions=dims, units=policy.units))

    packages.extend(custom_packages(shipment, policy, max_weight))

    logger.debug(
        "packages_built order=%s max_weight=%s count=%d",
        shipment.order.number,
        max_weight,
        len(packages),
    )
    return packages


def check_shippable(shipment: ShipmentPackage, policy: WeightPolicy) -> None:
    """Reject shipments whose total weight breaks the country limit.

    A zero cap means no limit; a missing (None) cap means the service is
    not offered for the destination country.

    Raises:
        PolicyViolation: If the shipment cannot go out with this service.
    """
    country = shipment.order.ship_address.country
    country_cap = policy.country_cap(country)
    if country_cap is None:
        raise PolicyViolation.from_code("E-2102", country=country)
    if country_cap == 0:
        return
    total = shipment.weight * policy.unit_multiplier
    if total > country_cap:
        raise _weight_error(country_cap)
