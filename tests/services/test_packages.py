"""Tests for package bucketing and weight policy resolution."""

import pytest

from shiprate.config import RateConfig
from shiprate.errors.domain import PolicyViolation
from shiprate.services.packages import (
    PhysicalPackage,
    WeightPolicy,
    build_packages,
    check_shippable,
    resolve_max_weight,
)
from tests.helpers import make_address, make_custom_item, make_item, make_shipment


class TestResolveMaxWeight:
    """Country cap and global cap combine to the smaller nonzero value."""

    def test_smaller_global_cap_wins(self):
        assert resolve_max_weight(20, 15) == 15

    def test_global_cap_used_when_country_unlimited(self):
        assert resolve_max_weight(0, 15) == 15

    def test_country_cap_used_when_global_unlimited(self):
        assert resolve_max_weight(20, 0) == 20

    def test_larger_global_cap_ignored(self):
        assert resolve_max_weight(20, 30) == 20

    def test_both_unlimited(self):
        assert resolve_max_weight(0, 0) == 0


class TestWeightPolicy:
    """Policy lookups derived from configuration."""

    def test_from_config_copies_limits(self):
        config = RateConfig(
            unit_multiplier=16,
            default_weight=2,
            max_weight_per_package=10,
            country_max_weights={"ca": 150},
            units="metric",
        )
        policy = WeightPolicy.from_config(config)
        assert policy.country_max_weights == {"CA": 150}
        assert policy.unit_multiplier == 16
        assert policy.default_weight == 2
        assert policy.units == "metric"

    def test_global_cap_is_scaled_by_multiplier(self):
        policy = WeightPolicy(max_weight_per_package=10, unit_multiplier=16)
        assert policy.max_weight_for("US") == 160

    def test_unknown_country_is_unlimited(self):
        policy = WeightPolicy(country_max_weights={"CA": 150})
        assert policy.country_cap("US") == 0
        assert policy.max_weight_for("US") == 0

    def test_country_lookup_is_case_insensitive(self):
        policy = WeightPolicy(country_max_weights={"CA": 150})
        assert policy.max_weight_for("ca") == 150

    def test_unserved_country_raises(self):
        policy = WeightPolicy(country_max_weights={"CU": None})
        with pytest.raises(PolicyViolation) as exc_info:
            policy.max_weight_for("CU")
        assert exc_info.value.code == "E-2102"
        assert "CU" in exc_info.value.message

    def test_unit_weight_substitutes_default(self):
        policy = WeightPolicy(default_weight=5, unit_multiplier=2)
        assert policy.unit_weight(0) == 10
        assert policy.unit_weight(-1) == 10
        assert policy.unit_weight(3) == 6


class TestBuildPackages:
    """Greedy bucketing of unit weights into packages."""

    def test_example_three_pound_units_into_two_packages(self):
        shipment = make_shipment([make_item(weight=16, quantity=3)])
        policy = WeightPolicy(country_max_weights={"US": 32})

        packages = build_packages(shipment, policy)

        assert [p.weight for p in packages] == [32, 16]

    def test_uniform_weights_respect_cap_and_total(self):
        shipment = make_shipment([make_item(weight=7, quantity=11)])
        policy = WeightPolicy(country_max_weights={"US": 30})

        packages = build_packages(shipment, policy)

        assert all(p.weight <= 30 for p in packages)
        assert sum(p.weight for p in packages) == 77

    def test_mixed_weights_sorted_ascending_before_filling(self):
        shipment = make_shipment([
            make_item(variant_id=1, weight=20),
            make_item(variant_id=2, weight=5, quantity=2),
        ])
        policy = WeightPolicy(country_max_weights={"US": 25})

        packages = build_packages(shipment, policy)

        # 5 + 5 fit together; 20 would push the first package to 30
        assert [p.weight for p in packages] == [10, 20]

    def test_unlimited_yields_single_package(self):
        shipment = make_shipment([
            make_item(variant_id=1, weight=40, quantity=2),
            make_item(variant_id=2, weight=3),
        ])

        packages = build_packages(shipment, WeightPolicy())

        assert packages == [PhysicalPackage(weight=83, dimensions=(), units="imperial")]

    def test_single_unit_over_cap_raises(self):
        shipment = make_shipment([make_item(weight=40)])
        policy = WeightPolicy(country_max_weights={"US": 32})

        with pytest.raises(PolicyViolation) as exc_info:
            build_packages(shipment, policy)
        assert exc_info.value.code == "E-2101"
        assert "32" in exc_info.value.message

    def test_unit_equal_to_cap_is_allowed(self):
        shipment = make_shipment([make_item(weight=32, quantity=2)])
        policy = WeightPolicy(country_max_weights={"US": 32})

        assert [p.weight for p in build_packages(shipment, policy)] == [32, 32]

    def test_multiplier_and_default_weight_applied(self):
        shipment = make_shipment([make_item(weight=0, quantity=2)])
        policy = WeightPolicy(default_weight=1, unit_multiplier=16)

        packages = build_packages(shipment, policy)

        assert [p.weight for p in packages] == [32]

    def test_empty_contents_yield_no_packages(self):
        shipment = make_shipment([])
        assert build_packages(shipment, WeightPolicy()) == []
        assert build_packages(shipment, WeightPolicy(country_max_weights={"US": 10})) == []

    def test_units_reported_from_policy(self):
        shipment = make_shipment([make_item(weight=1)])
        packages = build_packages(shipment, WeightPolicy(units="metric"))
        assert packages[0].units == "metric"

    def test_dimensions_callable_applied_to_greedy_packages(self):
        shipment = make_shipment([make_item(weight=16, quantity=3)])
        policy = WeightPolicy(country_max_weights={"US": 32})

        packages = build_packages(shipment, policy, dimensions=lambda s: [9, 6, 3])

        assert all(p.dimensions == (9, 6, 3) for p in packages)

    def test_unserved_country_raises(self):
        shipment = make_shipment(ship_address=make_address(country="CU"))
        with pytest.raises(PolicyViolation):
            build_packages(shipment, WeightPolicy(country_max_weights={"CU": None}))


class TestCustomPackaging:
    """Products with their own packaging ship one package per unit."""

    def test_custom_packages_appended_after_greedy_bins(self):
        shipment = make_shipment([
            make_item(variant_id=1, weight=16, quantity=3),
            make_custom_item(variant_id=2, quantity=2, weight=10, dims=(12, 8, 4)),
        ])
        policy = WeightPolicy(country_max_weights={"US": 32})

        packages = build_packages(shipment, policy)

        assert [p.weight for p in packages] == [32, 16, 10, 10]
        assert packages[-1].dimensions == (12, 8, 4)
        assert packages[-1].units == "imperial"

    def test_all_custom_content_yields_only_custom_packages(self):
        shipment = make_shipment([make_custom_item(quantity=3, weight=5)])

        packages = build_packages(shipment, WeightPolicy())

        assert [p.weight for p in packages] == [5, 5, 5]

    def test_custom_package_weight_uses_multiplier(self):
        shipment = make_shipment([make_custom_item(weight=2)])

        packages = build_packages(shipment, WeightPolicy(unit_multiplier=16))

        assert packages[0].weight == 32

    def test_custom_package_over_cap_raises(self):
        shipment = make_shipment([make_custom_item(weight=50)])
        with pytest.raises(PolicyViolation):
            build_packages(shipment, WeightPolicy(country_max_weights={"US": 32}))


class TestCheckShippable:
    """Total shipment weight against the destination country limit."""

    def test_no_limit_passes(self):
        shipment = make_shipment([make_item(weight=1000)])
        check_shippable(shipment, WeightPolicy())

    def test_within_limit_passes(self):
        shipment = make_shipment([make_item(weight=10, quantity=3)])
        check_shippable(shipment, WeightPolicy(country_max_weights={"US": 30}))

    def test_over_limit_raises(self):
        shipment = make_shipment([make_item(weight=10, quantity=4)])
        with pytest.raises(PolicyViolation) as exc_info:
            check_shippable(shipment, WeightPolicy(country_max_weights={"US": 30}))
        assert exc_info.value.code == "E-2101"

    def test_unserved_country_raises(self):
        shipment = make_shipment(ship_address=make_address(country="CU"))
        with pytest.raises(PolicyViolation) as exc_info:
            check_shippable(shipment, WeightPolicy(country_max_weights={"CU": None}))
        assert exc_info.value.code == "E-2102"
