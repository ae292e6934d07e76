"""shiprate: carrier rate calculation for storefront shipments."""

__version__ = "0.1.0"
