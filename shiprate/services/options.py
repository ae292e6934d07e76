"""Carrier request options: freight details and per-warehouse accounts."""

from typing import Any

from shiprate.config import RateConfig
from shiprate.models import StockLocation
from shiprate.services.locations import build_location

FREIGHT_PAYMENT_TYPE = "SENDER"
FREIGHT_ROLE = "SHIPPER"
FREIGHT_CLASS = "CLASS_050"
FREIGHT_PACKAGING = "PALLET"


def build_options(
    stock_location: StockLocation | None,
    config: RateConfig,
    freight: bool = False,
) -> dict[str, Any]:
    """Assemble the options dict sent with a rate request.

    Args:
        stock_location: Origin warehouse, possibly carrying its own
            carrier credentials.
        config: Rate configuration.
        freight: Whether the calculator prices a freight service.

    Returns:
        Options dict; empty for plain parcel services on shared accounts.
    """
    options: dict[str, Any] = {}
    if freight and config.freight_account and stock_location is not None:
        options["freight"] = {
            "payment_type": FREIGHT_PAYMENT_TYPE,
            "role": FREIGHT_ROLE,
            "account": config.freight_account,
            "billing_location": build_location(stock_location).to_dict(),
            "freight_class": FREIGHT_CLASS,
            "packaging": FREIGHT_PACKAGING,
        }

    if (
        config.multi_warehouse
        and stock_location is not None
        and stock_location.has_carrier_credentials
    ):
        options.update({
            "key": stock_location.key,
            "password": stock_location.password,
            "account": stock_location.account,
            "login": stock_location.login,
        })
        if "freight" in options and stock_location.freight_account:
            options["freight"]["account"] = stock_location.freight_account

    return options
