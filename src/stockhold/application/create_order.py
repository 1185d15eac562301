"""Application service: Create Order use case.

Validates the whole request first, then places one reservation per line
item. If any reservation fails, every hold already placed by this call is
released before the error propagates, so a failed creation leaves neither
an order nor an ACTIVE reservation behind.
"""

from __future__ import annotations

from datetime import timedelta

import structlog

from stockhold.application.dto import OrderDTO, OrderItemSpec
from stockhold.domain.exceptions import OrderStatusError, ResourceNotFoundError
from stockhold.domain.model.order import Order, OrderItem
from stockhold.domain.model.product import Product
from stockhold.domain.model.reservation import Reservation
from stockhold.domain.model.value_objects import Quantity
from stockhold.domain.repository.order_repository import OrderRepository
from stockhold.domain.repository.product_catalog import ProductCatalog
from stockhold.domain.service.pricing import PricingPolicy, StandardPricingPolicy
from stockhold.domain.service.reservation_manager import ReservationManager

logger = structlog.get_logger(__name__)


class CreateOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        product_catalog: ProductCatalog,
        reservations: ReservationManager,
        pricing: PricingPolicy | None = None,
        hold_ttl: timedelta | None = None,
    ) -> None:
        self._order_repo = order_repo
        self._product_catalog = product_catalog
        self._reservations = reservations
        self._pricing = pricing or StandardPricingPolicy()
        self._hold_ttl = hold_ttl

    def handle(self, user_id: str, item_specs: list[OrderItemSpec]) -> OrderDTO:
        """Create a PENDING order holding stock for every line item.

        Steps:
        1. Validate every item and resolve its product (no side effects).
        2. Reserve each item; on failure release earlier holds and re-raise.
        3. Price the order and persist it as PENDING / payment PENDING.
        """
        resolved = self._resolve(item_specs)

        reserved: list[Reservation] = []
        try:
            items: list[OrderItem] = []
            for spec, product in resolved:
                reservation = self._reservations.reserve(
                    product.id, user_id, spec.quantity, ttl=self._hold_ttl
                )
                reserved.append(reservation)
                items.append(
                    OrderItem(
                        product_id=product.id,
                        product_name=product.name,
                        quantity=Quantity(spec.quantity),
                        unit_price=product.price,  # price snapshot
                        reservation_id=reservation.id,
                    )
                )

            order = Order.create(user_id=user_id, items=items, pricing=self._pricing)
            self._order_repo.save(order)
        except Exception:
            self._rollback(reserved)
            raise

        logger.info(
            "Order created",
            order_id=order.id,
            order_number=order.order_number,
            user_id=user_id,
            items=len(items),
            total=str(order.total),
        )
        return OrderDTO.from_order(order)

    def _resolve(self, item_specs: list[OrderItemSpec]) -> list[tuple[OrderItemSpec, Product]]:
        if not item_specs:
            raise OrderStatusError("Order must contain at least one item")

        resolved: list[tuple[OrderItemSpec, Product]] = []
        for spec in item_specs:
            if spec.quantity <= 0:
                raise OrderStatusError("Item quantity must be positive")

            product = self._product_catalog.get_by_id(spec.product_id)
            if product is None:
                raise ResourceNotFoundError(f"Product not found: '{spec.product_id}'")
            if not product.is_orderable:
                raise OrderStatusError(
                    f"Product price must be positive: '{product.name}'"
                )
            resolved.append((spec, product))
        return resolved

    def _rollback(self, reserved: list[Reservation]) -> None:
        for reservation in reserved:
            self._reservations.release(reservation.id)
        if reserved:
            logger.info(
                "Order creation rolled back",
                released=[r.id for r in reserved],
            )
