"""Abstract stock ledger: the authoritative on-hand quantity per product.

Only confirmation-time deduction (and administrative restocking) changes
the on-hand count. Reservations never touch it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class StockLedger(ABC):

    @abstractmethod
    def get_stock(self, product_id: str) -> int:
        """Return the on-hand quantity. Raises ResourceNotFoundError."""

    @abstractmethod
    def deduct(self, product_id: str, quantity: int) -> None:
        """Atomically check ``stock >= quantity`` and subtract.

        Raises InsufficientStockError and leaves the stock untouched if the
        check fails.
        """

    @abstractmethod
    def deduct_many(self, quantities: dict[str, int]) -> None:
        """Deduct several products all-or-nothing.

        Either every product is decremented or, on the first shortfall,
        none is and InsufficientStockError is raised.
        """

    @abstractmethod
    def restock_many(self, quantities: dict[str, int]) -> None:
        """Add quantities back, undoing a ``deduct_many`` whose caller failed later."""

    @abstractmethod
    def set_stock(self, product_id: str, quantity: int) -> None:
        """Set the on-hand quantity (seeding and restocking)."""

    @abstractmethod
    def list_all(self) -> dict[str, int]:
        """Return a snapshot of every product's on-hand quantity."""
