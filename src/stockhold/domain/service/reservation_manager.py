"""Domain service: reservation rules on top of the ledger and the store.

Availability of a product is ``stock - sum(ACTIVE reservations)``. The
read of both terms and the creation of a new reservation happen under the
product's lock, so two concurrent reserves on one product are serialized
while reserves on different products never wait for each other.

State changes of an existing reservation (release, consume, expire) go
through the store's conditional ``transition`` only, so they need no lock
and are safe to race against the expiration sweeper.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from contextlib import AbstractContextManager
from datetime import datetime, timedelta, timezone

import structlog

from stockhold.domain.exceptions import (
    InsufficientStockError,
    ResourceNotFoundError,
    ValidationError,
)
from stockhold.domain.model.reservation import Reservation, ReservationStatus
from stockhold.domain.repository.reservation_store import ReservationStore
from stockhold.domain.repository.stock_ledger import StockLedger
from stockhold.domain.service.product_locks import ProductLocks

logger = structlog.get_logger(__name__)

Clock = Callable[[], datetime]

DEFAULT_TTL = timedelta(minutes=30)


def utc_clock() -> datetime:
    return datetime.now(timezone.utc)


class ReservationManager:

    def __init__(
        self,
        stock_ledger: StockLedger,
        reservation_store: ReservationStore,
        locks: ProductLocks | None = None,
        default_ttl: timedelta = DEFAULT_TTL,
        clock: Clock = utc_clock,
    ) -> None:
        self._stock = stock_ledger
        self._store = reservation_store
        self._locks = locks or ProductLocks()
        self._default_ttl = default_ttl
        self._clock = clock

    # --- Queries --------------------------------------------------------------

    def available(self, product_id: str) -> int:
        """Physical stock minus everything currently held ACTIVE."""
        with self._locks.hold(product_id):
            return self._available(product_id)

    def get(self, reservation_id: int) -> Reservation:
        reservation = self._store.get_by_id(reservation_id)
        if reservation is None:
            raise ResourceNotFoundError(f"Reservation #{reservation_id} not found")
        return reservation

    def committable(self, product_id: str, reservation_ids: Iterable[int]) -> int:
        """Stock that may be deducted by the holder of ``reservation_ids``.

        This is the on-hand stock minus every ACTIVE reservation that does
        not belong to the caller: a deduction may use the caller's own
        holds but never capacity held for somebody else. Call under
        ``hold(product_id)``.
        """
        own = 0
        for reservation_id in reservation_ids:
            reservation = self._store.get_by_id(reservation_id)
            if (
                reservation is not None
                and reservation.is_active
                and reservation.product_id == product_id
            ):
                own += reservation.quantity
        return self._available(product_id) + own

    # --- Commands -------------------------------------------------------------

    def reserve(
        self,
        product_id: str,
        owner_id: str,
        quantity: int,
        ttl: timedelta | None = None,
    ) -> Reservation:
        """Place an ACTIVE hold on ``quantity`` units of a product.

        Raises InsufficientStockError, creating nothing, if fewer than
        ``quantity`` units are available.
        """
        if quantity <= 0:
            raise ValidationError("Reservation quantity must be positive")
        ttl = ttl if ttl is not None else self._default_ttl

        with self._locks.hold(product_id):
            available = self._available(product_id)
            if available < quantity:
                logger.info(
                    "Reservation rejected",
                    product_id=product_id,
                    owner_id=owner_id,
                    requested=quantity,
                    available=available,
                )
                raise InsufficientStockError(
                    f"Not enough stock available for product '{product_id}' "
                    f"(need {quantity}, have {available} available)",
                    product_id=product_id,
                )
            reservation = self._store.create(
                product_id=product_id,
                owner_id=owner_id,
                quantity=quantity,
                ttl=ttl,
                now=self._clock(),
            )

        logger.info(
            "Reservation created",
            reservation_id=reservation.id,
            product_id=product_id,
            owner_id=owner_id,
            quantity=quantity,
            expires_at=reservation.expires_at.isoformat(),
        )
        return reservation

    def release(self, reservation_id: int) -> bool:
        """Give the held quantity back. No-op unless the reservation is ACTIVE."""
        return self._transition(reservation_id, ReservationStatus.RELEASED)

    def consume(self, reservation_id: int) -> bool:
        """Mark the hold as turned into a real deduction (order confirmed)."""
        return self._transition(reservation_id, ReservationStatus.CONFIRMED)

    def expire_if_stale(self, reservation_id: int, now: datetime | None = None) -> bool:
        """Expire the reservation if its TTL has elapsed at ``now``."""
        now = now or self._clock()
        reservation = self.get(reservation_id)
        if not reservation.is_stale(now):
            return False
        return self._transition(reservation_id, ReservationStatus.EXPIRED)

    def hold(self, *product_ids: str) -> AbstractContextManager[None]:
        """Lock products for a multi-step operation (see ProductLocks.hold)."""
        return self._locks.hold(*product_ids)

    # --- Internal helpers -----------------------------------------------------

    def _available(self, product_id: str) -> int:
        return self._stock.get_stock(product_id) - self._store.sum_active_quantity(
            product_id
        )

    def _transition(self, reservation_id: int, to_status: ReservationStatus) -> bool:
        changed = self._store.transition(
            reservation_id, ReservationStatus.ACTIVE, to_status
        )
        if changed:
            logger.info(
                "Reservation transitioned",
                reservation_id=reservation_id,
                status=to_status.value,
            )
        else:
            logger.debug(
                "Reservation transition skipped",
                reservation_id=reservation_id,
                wanted=to_status.value,
            )
        return changed
