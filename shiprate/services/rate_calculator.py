"""Shipping rate calculator backed by a carrier transport.

One calculator prices one carrier service (``service_name``). A single
carrier call returns every service the carrier offers for the request;
that whole result is cached by fingerprint, so sibling calculators for
the same carrier share one call.

Example:
    calc = RateCalculator(carrier=fedex, config=load_config(),
                          service_name="FedEx Ground")
    if calc.available(shipment):
        price = calc.compute(shipment)
"""

import html
import logging
from collections.abc import Mapping, Sequence
from typing import Any

from shiprate.config import RateConfig
from shiprate.errors.carrier_translation import translate_carrier_error
from shiprate.errors.domain import CarrierResponseError, ShippingError
from shiprate.models import ShipmentPackage, StockLocation
from shiprate.services.carrier import CarrierTransport
from shiprate.services.fingerprint import cache_key, timings_key
from shiprate.services.locations import CarrierLocation, build_location
from shiprate.services.options import build_options
from shiprate.services.packages import (
    DimensionsFn,
    PhysicalPackage,
    WeightPolicy,
    build_packages,
    check_shippable,
)
from shiprate.services.rate_cache import CachedFailure, RateCache, get_rate_cache
from shiprate.utils.redaction import redact_for_logging

logger = logging.getLogger(__name__)


class RateCalculator:
    """Prices one carrier service for a shipment.

    Args:
        carrier: Transport used on cache misses.
        config: Rate configuration for this calculator.
        service_name: Carrier service this calculator prices.
        cache: Rate cache; defaults to the process-wide cache.
        freight: Whether the service is a freight service.
        dimensions: Optional callable computing package dimensions.
    """

    def __init__(
        self,
        carrier: CarrierTransport,
        config: RateConfig,
        service_name: str,
        cache: RateCache | None = None,
        freight: bool = False,
        dimensions: DimensionsFn | None = None,
    ) -> None:
        self.carrier = carrier
        self.config = config
        self.service_name = service_name
        self.cache = cache if cache is not None else get_rate_cache(config.cache_ttl_seconds)
        self.freight = freight
        self.dimensions = dimensions

    # ── Request assembly ──────────────────────────────────────────────

    def weight_policy(self) -> WeightPolicy:
        return WeightPolicy.from_config(self.config)

    def packages(self, shipment: ShipmentPackage) -> list[PhysicalPackage]:
        return build_packages(shipment, self.weight_policy(), self.dimensions)

    def build_options(self, stock_location: StockLocation | None) -> dict[str, Any]:
        return build_options(stock_location, self.config, freight=self.freight)

    def cache_key(self, shipment: ShipmentPackage, options: dict[str, Any]) -> str:
        return cache_key(shipment, self.carrier.name, options, self.config.locale)

    def _locations(self, shipment: ShipmentPackage) -> tuple[CarrierLocation, CarrierLocation]:
        if shipment.stock_location is None:
            raise ShippingError.from_code("E-2103", order=shipment.order.number)
        origin = build_location(shipment.stock_location)
        destination = build_location(shipment.order.ship_address)
        return origin, destination

    # ── Rates ─────────────────────────────────────────────────────────

    def compute(self, shipment: ShipmentPackage) -> float | None:
        """Price this service for a shipment.

        Returns:
            Price in major currency units including the handling fee, or
            None when the carrier offers no rate for this service or an
            earlier identical request left a cached carrier error.

        Raises:
            PolicyViolation: If the contents break the weight policy.
            ShippingError: E-2103 if the shipment has no stock location.
            CarrierError: If the carrier rejected this request on a cache
                miss. The error is cached for later identical requests.
        """
        origin, destination = self._locations(shipment)
        options = self.build_options(shipment.stock_location)
        key = self.cache_key(shipment, options)

        def _fetch() -> dict[str, Any]:
            shipment_packages = self.packages(shipment)
            if not shipment_packages:
                return {}
            return self._retrieve_rates(origin, destination, shipment_packages, options)

        outcome = self.cache.fetch(key, _fetch)
        if isinstance(outcome, CachedFailure):
            logger.info(
                "rates_result order=%s service=%s cached_error=%s",
                shipment.order.number,
                self.service_name,
                outcome.error,
            )
            return None

        rates = outcome.value
        logger.info(
            "rates_result order=%s service=%s rates=%s",
            shipment.order.number,
            self.service_name,
            rates,
        )
        if not rates:
            return None

        rate = rates.get(self.service_name)
        if rate is None:
            return None

        # carrier prices are in minor units
        return float(rate) / 100.0 + self.config.handling_fee

    def available(self, shipment: ShipmentPackage) -> bool:
        """Whether this service can price the shipment.

        Only recognized shipping errors are turned into False; anything
        else propagates.
        """
        try:
            check_shippable(shipment, self.weight_policy())
            return self.compute(shipment) is not None
        except ShippingError as e:
            logger.info(
                "rate_unavailable order=%s service=%s error=%s",
                shipment.order.number,
                self.service_name,
                e,
            )
            return False

    def _retrieve_rates(
        self,
        origin: CarrierLocation,
        destination: CarrierLocation,
        packages: Sequence[PhysicalPackage],
        options: dict[str, Any],
    ) -> dict[str, Any]:
        logger.debug(
            "carrier_find_rates carrier=%s packages=%d options=%s",
            self.carrier.name,
            len(packages),
            redact_for_logging(options),
        )
        try:
            response = self.carrier.find_rates(origin, destination, packages, options)
        except CarrierResponseError as e:
            raise translate_carrier_error(e) from e

        return {html.unescape(rate.service_name): rate.price for rate in response.rates}

    # ── Transit time ──────────────────────────────────────────────────

    def timing(self, shipment: ShipmentPackage) -> Any | None:
        """Transit-time estimate for this service.

        Returns:
            The carrier's estimate for this service, or None when the
            carrier cannot estimate transit times or has no entry.

        Raises:
            PolicyViolation: If the contents break the weight policy.
            ShippingError: E-2103 if the shipment has no stock location.
            CarrierError: If the carrier rejected this request, now or on
                an earlier identical request still in the cache.
        """
        if not self.carrier.supports_time_in_transit:
            return None

        origin, destination = self._locations(shipment)
        options = self.build_options(shipment.stock_location)
        key = timings_key(self.cache_key(shipment, options))

        def _fetch() -> Any:
            return self._retrieve_timings(origin, destination, self.packages(shipment), options)

        timings = self.cache.get_or_compute(key, _fetch)
        if not isinstance(timings, Mapping) or not timings:
            return None
        return timings.get(self.service_name)

    def _retrieve_timings(
        self,
        origin: CarrierLocation,
        destination: CarrierLocation,
        packages: Sequence[PhysicalPackage],
        options: dict[str, Any],
    ) -> Any:
        try:
            return self.carrier.find_time_in_transit(origin, destination, packages, options)
        except CarrierResponseError as e:
            raise translate_carrier_error(e) from e
