"""Application service: Update Order Status use case.

Confirming a PENDING order turns its holds into real stock deductions.
Under the locks of every product in the order, the order's own holds that
are past their TTL are expired first. Each line must then be covered by
the on-hand stock that is not held for somebody else, and all products
are deducted in one all-or-nothing step. The order is saved next; if the
save fails the deduction is added back. Only a saved confirmation
consumes the order's reservations. On any shortfall nothing is deducted,
nothing is consumed and the order keeps its status.
"""

from __future__ import annotations

import structlog

from stockhold.application.cancel_order import release_order_holds
from stockhold.application.dto import OrderDTO
from stockhold.domain.exceptions import (
    InsufficientStockError,
    OrderStatusError,
    ResourceNotFoundError,
)
from stockhold.domain.model.order import Order, OrderStatus, PaymentStatus
from stockhold.domain.repository.order_repository import OrderRepository
from stockhold.domain.repository.stock_ledger import StockLedger
from stockhold.domain.service.reservation_manager import ReservationManager

logger = structlog.get_logger(__name__)


class UpdateOrderStatusHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        stock_ledger: StockLedger,
        reservations: ReservationManager,
    ) -> None:
        self._order_repo = order_repo
        self._stock_ledger = stock_ledger
        self._reservations = reservations

    def handle(
        self,
        order_id: int,
        new_status: OrderStatus,
        payment_status: PaymentStatus | None = None,
        tracking_number: str | None = None,
    ) -> OrderDTO:
        order = self._load(order_id)

        with self._reservations.hold(*order.quantities_by_product()):
            # Re-read under the locks; another request may have moved it.
            order = self._load(order_id)
            previous = order.status
            order.ensure_transition_allowed(new_status)

            confirming = new_status == OrderStatus.CONFIRMED and previous != OrderStatus.CONFIRMED
            cancelling = new_status == OrderStatus.CANCELLED and previous != OrderStatus.CANCELLED

            deducted = self._deduct_stock(order) if confirming else {}
            order.advance_to(new_status)
            order.record_payment(payment_status, tracking_number)
            try:
                self._order_repo.save(order)
            except Exception:
                if deducted:
                    self._stock_ledger.restock_many(deducted)
                    logger.warning(
                        "Order confirmation rolled back",
                        order_id=order.id,
                        restocked=deducted,
                    )
                raise

            if confirming:
                self._consume_holds(order)
            elif cancelling:
                release_order_holds(order, self._reservations)

        logger.info(
            "Order status updated",
            order_id=order.id,
            order_number=order.order_number,
            previous=previous.value,
            status=order.status.value,
            payment_status=order.payment_status.value,
        )
        return OrderDTO.from_order(order)

    def _deduct_stock(self, order: Order) -> dict[str, int]:
        """Deduct stock for every line and return what was deducted.

        Must run under ``hold()`` of every product in the order.
        """
        quantities = order.quantities_by_product()
        own_reservations = order.reservation_ids

        # A hold past its TTL no longer backs the order, swept or not.
        for reservation_id in own_reservations:
            self._reservations.expire_if_stale(reservation_id)

        for product_id, quantity in quantities.items():
            committable = self._reservations.committable(product_id, own_reservations)
            if committable < quantity:
                raise OrderStatusError(
                    f"Insufficient stock for product '{product_id}' "
                    f"(need {quantity}, have {committable} committable)"
                )

        try:
            self._stock_ledger.deduct_many(quantities)
        except InsufficientStockError as exc:
            raise OrderStatusError(f"Insufficient stock: {exc}") from exc

        logger.info(
            "Order stock committed",
            order_id=order.id,
            deducted=quantities,
        )
        return quantities

    def _consume_holds(self, order: Order) -> None:
        # A hold left ACTIVE here is expired later by the sweeper.
        for reservation_id in order.reservation_ids:
            try:
                self._reservations.consume(reservation_id)
            except Exception:
                logger.exception(
                    "Failed to consume reservation of confirmed order",
                    order_id=order.id,
                    reservation_id=reservation_id,
                )

    def _load(self, order_id: int) -> Order:
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise ResourceNotFoundError(f"Order #{order_id} not found")
        return order
