"""Abstract catalog port.

Defined in the domain layer so the domain never depends on the catalog
service. The order core only needs to look products up by ID.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from stockhold.domain.model.product import Product


class ProductCatalog(ABC):

    @abstractmethod
    def get_by_id(self, product_id: str) -> Product | None:
        """Return a product by its ID, or None if not found."""

    @abstractmethod
    def list_all(self) -> list[Product]:
        """Return every product in the catalog."""

    @abstractmethod
    def save(self, product: Product) -> None:
        """Persist a new or updated product."""
