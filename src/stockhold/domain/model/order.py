"""Order aggregate and its status state machine.

The Order is an aggregate root that owns its line items. Status moves
forward only::

    PENDING -> CONFIRMED -> PROCESSING -> PAID -> SHIPPED -> DELIVERED -> REFUNDED
       |
       +-----> CANCELLED

Leaving PENDING is only possible through CONFIRMED (which deducts stock)
or CANCELLED (which releases the holds). CANCELLED is final.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING

from stockhold.domain.exceptions import OrderStatusError
from stockhold.domain.model.value_objects import Money, Quantity

if TYPE_CHECKING:
    from stockhold.domain.service.pricing import PricingPolicy


class OrderStatus(Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    PROCESSING = "PROCESSING"
    PAID = "PAID"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    REFUNDED = "REFUNDED"
    CANCELLED = "CANCELLED"


class PaymentStatus(Enum):
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    REFUNDED = "REFUNDED"
    PARTIALLY_REFUNDED = "PARTIALLY_REFUNDED"


# Forward-only progression; CANCELLED sits outside it.
_PROGRESSION = [
    OrderStatus.PENDING,
    OrderStatus.CONFIRMED,
    OrderStatus.PROCESSING,
    OrderStatus.PAID,
    OrderStatus.SHIPPED,
    OrderStatus.DELIVERED,
    OrderStatus.REFUNDED,
]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def generate_order_number() -> str:
    return "ORD-" + uuid.uuid4().hex[:8].upper()


@dataclass
class OrderItem:
    """A line item with the product price captured at order-creation time."""

    product_id: str
    product_name: str
    quantity: Quantity
    unit_price: Money
    reservation_id: int | None = None

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity.value


@dataclass
class Order:
    """Aggregate root for customer orders.

    Use ``Order.create()`` for new orders. The ``__init__`` is kept plain so
    repositories can reconstitute persisted orders without re-validating.
    """

    id: int | None
    order_number: str
    user_id: str
    items: list[OrderItem]
    status: OrderStatus = OrderStatus.PENDING
    payment_status: PaymentStatus = PaymentStatus.PENDING
    shipping_cost: Money = field(default_factory=Money.zero)
    tax: Money = field(default_factory=Money.zero)
    total: Money = field(default_factory=Money.zero)
    tracking_number: str | None = None
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(
        user_id: str,
        items: list[OrderItem],
        pricing: PricingPolicy,
    ) -> Order:
        if not items:
            raise OrderStatusError("Order must contain at least one item")

        order = Order(
            id=None,
            order_number=generate_order_number(),
            user_id=user_id,
            items=list(items),
        )
        order.apply_pricing(pricing)
        return order

    # --- Pricing --------------------------------------------------------------

    @property
    def subtotal(self) -> Money:
        result = Money.zero()
        for item in self.items:
            result = result + item.line_total
        return result

    def apply_pricing(self, pricing: PricingPolicy) -> None:
        subtotal = self.subtotal
        self.shipping_cost = pricing.shipping_cost(subtotal)
        self.tax = pricing.tax(subtotal)
        self.total = pricing.total(subtotal, self.shipping_cost, self.tax)

    # --- State transitions ----------------------------------------------------

    def ensure_transition_allowed(self, new_status: OrderStatus) -> None:
        """Raise OrderStatusError if ``new_status`` is not reachable from here.

        Moving to the current status is allowed (payment/tracking updates).
        """
        if self.status == OrderStatus.CANCELLED:
            raise OrderStatusError(
                f"Cannot update status of cancelled order {self.order_number}"
            )
        if new_status == self.status:
            return
        if new_status == OrderStatus.CANCELLED:
            if self.status != OrderStatus.PENDING:
                raise OrderStatusError("Only pending orders can be cancelled")
            return
        if self.status == OrderStatus.PENDING and new_status != OrderStatus.CONFIRMED:
            raise OrderStatusError(
                f"Order {self.order_number} must be confirmed before moving "
                f"to {new_status.value}"
            )
        if _PROGRESSION.index(new_status) < _PROGRESSION.index(self.status):
            raise OrderStatusError(
                f"Cannot move order {self.order_number} from "
                f"{self.status.value} back to {new_status.value}"
            )

    def advance_to(self, new_status: OrderStatus) -> None:
        """Apply a validated status change.

        Stock deduction (for CONFIRMED) and reservation release (for
        CANCELLED) must happen *before* calling this, coordinated by the
        application handlers.
        """
        self.ensure_transition_allowed(new_status)
        if new_status != self.status:
            self.status = new_status
            self.touch()

    def cancel(self) -> None:
        """Transition PENDING -> CANCELLED."""
        if self.status != OrderStatus.PENDING:
            raise OrderStatusError("Only pending orders can be cancelled")
        self.advance_to(OrderStatus.CANCELLED)

    def record_payment(
        self,
        payment_status: PaymentStatus | None = None,
        tracking_number: str | None = None,
    ) -> None:
        if payment_status is not None:
            self.payment_status = payment_status
        if tracking_number is not None:
            self.tracking_number = tracking_number
        self.touch()

    def touch(self) -> None:
        self.updated_at = _utcnow()

    # --- Queries --------------------------------------------------------------

    @property
    def reservation_ids(self) -> list[int]:
        return [i.reservation_id for i in self.items if i.reservation_id is not None]

    def quantities_by_product(self) -> dict[str, int]:
        """Total ordered quantity per product (an order may repeat a product)."""
        result: dict[str, int] = {}
        for item in self.items:
            result[item.product_id] = result.get(item.product_id, 0) + item.quantity.value
        return result
