"""RentDesk: property, tenant and rent management API."""

__version__ = "1.0.0"
