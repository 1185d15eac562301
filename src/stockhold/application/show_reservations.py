"""Application service: Show Reservations use case (query)."""

from __future__ import annotations

from stockhold.application.dto import ReservationDTO
from stockhold.domain.exceptions import ValidationError
from stockhold.domain.repository.reservation_store import ReservationStore


class ShowReservationsHandler:

    def __init__(self, reservation_store: ReservationStore) -> None:
        self._reservation_store = reservation_store

    def handle(
        self,
        owner_id: str | None = None,
        product_id: str | None = None,
    ) -> list[ReservationDTO]:
        """List every reservation of an owner, or the ACTIVE ones of a product."""
        if owner_id is not None:
            reservations = self._reservation_store.list_by_owner(owner_id)
            if product_id is not None:
                reservations = [r for r in reservations if r.product_id == product_id]
        elif product_id is not None:
            reservations = self._reservation_store.list_active_by_product(product_id)
        else:
            raise ValidationError("Specify an owner or a product")
        return [
            ReservationDTO.from_reservation(r)
            for r in sorted(reservations, key=lambda r: r.id)
        ]
