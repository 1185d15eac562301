"""Application service: Cancel Order use case.

Only PENDING orders can be cancelled. Cancelling releases every hold the
order placed and never touches physical stock (nothing was deducted yet).
The order is saved as CANCELLED before its holds are released.
"""

from __future__ import annotations

import structlog

from stockhold.domain.exceptions import OrderStatusError, ResourceNotFoundError
from stockhold.domain.model.order import Order, OrderStatus
from stockhold.domain.repository.order_repository import OrderRepository
from stockhold.domain.service.reservation_manager import ReservationManager

logger = structlog.get_logger(__name__)


def release_order_holds(order: Order, reservations: ReservationManager) -> None:
    """Release every reservation of an already saved ``order``. Safe to repeat.

    A hold that cannot be released stays ACTIVE until the sweeper expires it.
    """
    for reservation_id in order.reservation_ids:
        try:
            reservations.release(reservation_id)
        except Exception:
            logger.exception(
                "Failed to release reservation of cancelled order",
                order_id=order.id,
                reservation_id=reservation_id,
            )


class CancelOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        reservations: ReservationManager,
    ) -> None:
        self._order_repo = order_repo
        self._reservations = reservations

    def handle(self, order_id: int) -> None:
        order = self._load(order_id)

        # Serialize with a concurrent confirm of the same order.
        with self._reservations.hold(*order.quantities_by_product()):
            order = self._load(order_id)
            if order.status != OrderStatus.PENDING:
                raise OrderStatusError("Only pending orders can be cancelled")

            order.cancel()
            self._order_repo.save(order)
            release_order_holds(order, self._reservations)

        logger.info("Order cancelled", order_id=order.id, order_number=order.order_number)

    def _load(self, order_id: int) -> Order:
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise ResourceNotFoundError(f"Order #{order_id} not found")
        return order
