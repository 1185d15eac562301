"""Application service: Release Reservation use case."""

from __future__ import annotations

from stockhold.domain.service.reservation_manager import ReservationManager


class ReleaseReservationHandler:

    def __init__(self, reservations: ReservationManager) -> None:
        self._reservations = reservations

    def handle(self, reservation_id: int) -> bool:
        """Release a hold. Returns False if it was already terminal.

        Raises ResourceNotFoundError for unknown reservations.
        """
        self._reservations.get(reservation_id)
        return self._reservations.release(reservation_id)
