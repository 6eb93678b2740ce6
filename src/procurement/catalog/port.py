"""Catalog port: read-only view of a supplier's products.

The catalog is owned elsewhere. Procurement only ever reads the current price
and stock of a product and never writes back.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class ProductSnapshot:
    """Price and stock of a product at the moment it was looked up."""

    product_id: str
    supplier_id: str
    price: float
    stock_quantity: int


class CatalogPort(ABC):
    """Abstract catalog interface."""

    @abstractmethod
    def get_product(self, product_id: str) -> ProductSnapshot | None:
        """Return the product's current snapshot, or None if it does not exist."""
        ...
