"""Builders for shipment test data."""

from shiprate.models import (
    Address,
    ContentItem,
    Order,
    Product,
    ProductPackage,
    ShipmentPackage,
    StockLocation,
    Variant,
)


def make_address(**overrides) -> Address:
    fields = {
        "country": "US",
        "state": "CA",
        "city": "Los Angeles",
        "zipcode": "90001",
        "address1": "123 Main St",
    }
    fields.update(overrides)
    return Address(**fields)


def make_stock_location(**overrides) -> StockLocation:
    fields = {
        "id": 1,
        "country": "US",
        "state": "NY",
        "city": "New York",
        "zipcode": "10001",
        "address1": "1 Warehouse Way",
    }
    fields.update(overrides)
    return StockLocation(**fields)


def make_item(variant_id=1, weight=16.0, quantity=1, packages=()) -> ContentItem:
    product = Product(name=f"Product {variant_id}", packages=tuple(packages))
    return ContentItem(
        variant=Variant(id=variant_id, weight=weight, product=product),
        quantity=quantity,
    )


def make_custom_item(variant_id=1, quantity=1, weight=10.0, dims=(12, 8, 4)) -> ContentItem:
    length, width, height = dims
    return make_item(
        variant_id=variant_id,
        weight=weight,
        quantity=quantity,
        packages=[ProductPackage(weight=weight, length=length, width=width, height=height)],
    )


def make_shipment(
    contents=None,
    number="R123456789",
    ship_address=None,
    stock_location=None,
    no_stock_location=False,
) -> ShipmentPackage:
    if contents is None:
        contents = [make_item()]
    location = None if no_stock_location else (stock_location or make_stock_location())
    return ShipmentPackage(
        order=Order(number=number, ship_address=ship_address or make_address()),
        stock_location=location,
        contents=tuple(contents),
    )
