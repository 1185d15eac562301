"""Application service: place a standalone product hold for a user.

Same rules as the holds placed by order creation, but with the longer
product-level TTL.
"""

from __future__ import annotations

from stockhold.application.dto import ReservationDTO
from stockhold.domain.exceptions import ResourceNotFoundError
from stockhold.domain.repository.product_catalog import ProductCatalog
from stockhold.domain.service.reservation_manager import ReservationManager


class ReserveStockHandler:

    def __init__(
        self,
        product_catalog: ProductCatalog,
        reservations: ReservationManager,
    ) -> None:
        self._product_catalog = product_catalog
        self._reservations = reservations

    def handle(self, product_id: str, owner_id: str, quantity: int) -> ReservationDTO:
        if self._product_catalog.get_by_id(product_id) is None:
            raise ResourceNotFoundError(f"Product not found: '{product_id}'")
        reservation = self._reservations.reserve(product_id, owner_id, quantity)
        return ReservationDTO.from_reservation(reservation)
