"""Carrier-neutral origin and destination descriptors."""

from dataclasses import dataclass

from shiprate.models import Address


@dataclass(frozen=True)
class CarrierLocation:
    """Location as handed to a carrier transport."""

    country: str
    state: str
    city: str
    zip: str
    address1: str = ""
    address2: str = ""

    def to_dict(self) -> dict[str, str]:
        return {
            "country": self.country,
            "state": self.state,
            "city": self.city,
            "zip": self.zip,
            "address1": self.address1,
            "address2": self.address2,
        }


def build_location(address: Address) -> CarrierLocation:
    """Convert an address or stock location into a CarrierLocation.

    Args:
        address: Destination address or stock location.

    Returns:
        CarrierLocation with the best available state value.
    """
    return CarrierLocation(
        country=address.country,
        state=address.best_state,
        city=address.city,
        zip=address.zipcode,
        address1=address.address1,
        address2=address.address2,
    )
