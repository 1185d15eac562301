"""Application service: Show Inventory use case (query)."""

from __future__ import annotations

from dataclasses import dataclass

from stockhold.domain.repository.product_catalog import ProductCatalog
from stockhold.domain.repository.reservation_store import ReservationStore
from stockhold.domain.repository.stock_ledger import StockLedger


@dataclass(frozen=True)
class InventoryLineDTO:
    product_id: str
    product_name: str
    stock: int
    reserved: int
    available: int


class ShowInventoryHandler:

    def __init__(
        self,
        stock_ledger: StockLedger,
        reservation_store: ReservationStore,
        product_catalog: ProductCatalog,
    ) -> None:
        self._stock_ledger = stock_ledger
        self._reservation_store = reservation_store
        self._product_catalog = product_catalog

    def handle(self) -> list[InventoryLineDTO]:
        """Snapshot of stock per product. Not taken under the product locks."""
        lines = []
        for product_id, stock in sorted(self._stock_ledger.list_all().items()):
            product = self._product_catalog.get_by_id(product_id)
            reserved = self._reservation_store.sum_active_quantity(product_id)
            lines.append(
                InventoryLineDTO(
                    product_id=product_id,
                    product_name=product.name if product else "?",
                    stock=stock,
                    reserved=reserved,
                    available=stock - reserved,
                )
            )
        return lines
