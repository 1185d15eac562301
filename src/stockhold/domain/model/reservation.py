"""Reservation entity: a time-bounded claim on a product's stock.

A reservation starts ACTIVE and ends in exactly one terminal state:

    ACTIVE -> CONFIRMED   stock was deducted for it (order confirmed)
    ACTIVE -> RELEASED    the owner gave it up (order cancelled, rollback)
    ACTIVE -> EXPIRED     the sweeper found it past ``expires_at``

Terminal reservations never change again, which is what makes release and
expiry idempotent.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from stockhold.domain.exceptions import ReservationConflict


class ReservationStatus(Enum):
    ACTIVE = "ACTIVE"
    CONFIRMED = "CONFIRMED"
    RELEASED = "RELEASED"
    EXPIRED = "EXPIRED"

    @property
    def is_terminal(self) -> bool:
        return self is not ReservationStatus.ACTIVE


@dataclass
class Reservation:

    id: int
    product_id: str
    owner_id: str
    quantity: int
    reserved_at: datetime
    expires_at: datetime
    status: ReservationStatus = ReservationStatus.ACTIVE

    @property
    def is_active(self) -> bool:
        return self.status == ReservationStatus.ACTIVE

    def is_stale(self, now: datetime) -> bool:
        """True once ``now`` is strictly past the expiry instant."""
        return now > self.expires_at

    def transition(
        self, from_status: ReservationStatus, to_status: ReservationStatus
    ) -> None:
        """Compare-and-set the status.

        Raises ReservationConflict if the reservation is no longer in
        ``from_status``.
        """
        if self.status != from_status:
            raise ReservationConflict(
                f"Reservation #{self.id} is {self.status.value}, "
                f"expected {from_status.value}"
            )
        if from_status.is_terminal:
            raise ReservationConflict(
                f"Reservation #{self.id} is already {self.status.value}"
            )
        self.status = to_status
