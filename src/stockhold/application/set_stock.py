"""Application service: Set Stock use case."""

from __future__ import annotations

import structlog

from stockhold.domain.exceptions import ResourceNotFoundError, ValidationError
from stockhold.domain.repository.product_catalog import ProductCatalog
from stockhold.domain.repository.reservation_store import ReservationStore
from stockhold.domain.repository.stock_ledger import StockLedger
from stockhold.domain.service.reservation_manager import ReservationManager

logger = structlog.get_logger(__name__)


class SetStockHandler:

    def __init__(
        self,
        stock_ledger: StockLedger,
        reservation_store: ReservationStore,
        product_catalog: ProductCatalog,
        reservations: ReservationManager,
    ) -> None:
        self._stock_ledger = stock_ledger
        self._reservation_store = reservation_store
        self._product_catalog = product_catalog
        self._reservations = reservations

    def handle(self, product_id: str, quantity: int) -> None:
        """Set the on-hand quantity for a product.

        Refuses to go below what is currently held ACTIVE, which would
        break the no-oversell invariant.
        """
        if self._product_catalog.get_by_id(product_id) is None:
            raise ResourceNotFoundError(f"Product not found: '{product_id}'")

        with self._reservations.hold(product_id):
            held = self._reservation_store.sum_active_quantity(product_id)
            if quantity < held:
                raise ValidationError(
                    f"Cannot set stock of '{product_id}' to {quantity}: "
                    f"{held} units are currently reserved"
                )
            self._stock_ledger.set_stock(product_id, quantity)

        logger.info("Stock set", product_id=product_id, quantity=quantity)
