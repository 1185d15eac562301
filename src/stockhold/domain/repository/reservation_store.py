"""Abstract store for Reservation records."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime, timedelta

from stockhold.domain.model.reservation import Reservation, ReservationStatus


class ReservationStore(ABC):

    @abstractmethod
    def create(
        self,
        product_id: str,
        owner_id: str,
        quantity: int,
        ttl: timedelta,
        now: datetime,
    ) -> Reservation:
        """Persist a new ACTIVE reservation expiring at ``now + ttl``."""

    @abstractmethod
    def get_by_id(self, reservation_id: int) -> Reservation | None:
        """Return a reservation by its ID, or None."""

    @abstractmethod
    def sum_active_quantity(self, product_id: str) -> int:
        """Sum the quantity of ACTIVE reservations for a product."""

    @abstractmethod
    def transition(
        self,
        reservation_id: int,
        from_status: ReservationStatus,
        to_status: ReservationStatus,
    ) -> bool:
        """Conditionally move a reservation between states.

        Returns False without changing anything when the reservation is not
        in ``from_status``. Raises ResourceNotFoundError for unknown IDs.
        """

    @abstractmethod
    def find_active_expired(self, now: datetime) -> list[Reservation]:
        """Return ACTIVE reservations whose ``expires_at`` is before ``now``."""

    @abstractmethod
    def list_active_by_product(self, product_id: str) -> list[Reservation]:
        """Return the ACTIVE reservations held against a product."""

    @abstractmethod
    def list_by_owner(self, owner_id: str) -> list[Reservation]:
        """Return every reservation (any status) held by an owner."""
