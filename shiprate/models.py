"""Read-only views of the order data a rate request needs.

The storefront owns persistence; these frozen dataclasses are the shape
the rating core reads. Weights are in the store's configured unit and
are converted to ounces with ``RateConfig.unit_multiplier``.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Address:
    """Postal address of a destination or stock location.

    ``state`` is the state abbreviation when the country has a state list;
    otherwise ``state_name`` holds free text.
    """

    country: str
    city: str = ""
    zipcode: str = ""
    state: str | None = None
    state_name: str = ""
    address1: str = ""
    address2: str = ""

    @property
    def best_state(self) -> str:
        """State abbreviation if known, free-text state name otherwise."""
        return self.state if self.state else self.state_name


@dataclass(frozen=True)
class StockLocation(Address):
    """Warehouse shipments originate from.

    Carrier credentials are optional and only used when multi-warehouse
    accounts are enabled.
    """

    id: int | str = ""
    key: str = ""
    password: str = ""
    account: str = ""
    login: str = ""
    freight_account: str = ""

    @property
    def has_carrier_credentials(self) -> bool:
        return bool(self.key and self.password and self.account and self.login)


@dataclass(frozen=True)
class ProductPackage:
    """Custom packaging a product always ships in."""

    weight: float
    length: float = 0
    width: float = 0
    height: float = 0


@dataclass(frozen=True)
class Product:
    name: str = ""
    packages: tuple[ProductPackage, ...] = ()


@dataclass(frozen=True)
class Variant:
    id: int | str
    weight: float = 0.0
    product: Product = field(default_factory=Product)


@dataclass(frozen=True)
class ContentItem:
    variant: Variant
    quantity: int = 1


@dataclass(frozen=True)
class Order:
    number: str
    ship_address: Address


@dataclass(frozen=True)
class ShipmentPackage:
    """Items of one order leaving one stock location together."""

    order: Order
    stock_location: StockLocation | None
    contents: tuple[ContentItem, ...] = ()

    @property
    def weight(self) -> float:
        """Raw weight of all contents, in stored units."""
        return sum(item.variant.weight * item.quantity for item in self.contents)
