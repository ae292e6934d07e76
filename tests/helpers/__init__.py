"""Test helper utilities for rate calculation tests."""

from tests.helpers.builders import (
    make_address,
    make_custom_item,
    make_item,
    make_shipment,
    make_stock_location,
)
from tests.helpers.fake_carrier import FakeCarrier, ups_style_error

__all__ = [
    "FakeCarrier",
    "ups_style_error",
    "make_address",
    "make_custom_item",
    "make_item",
    "make_shipment",
    "make_stock_location",
]
