"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass

from stockhold.domain.model.order import Order
from stockhold.domain.model.reservation import Reservation


@dataclass(frozen=True)
class OrderItemSpec:
    """Input: what the customer asked for (product ID + quantity)."""

    product_id: str
    quantity: int


@dataclass(frozen=True)
class OrderItemDTO:
    product_id: str
    product_name: str
    quantity: int
    unit_price: str  # formatted, e.g. "$15.00"
    line_total: str
    reservation_id: int | None


@dataclass(frozen=True)
class OrderDTO:
    id: int
    order_number: str
    user_id: str
    status: str
    payment_status: str
    items: list[OrderItemDTO]
    subtotal: str
    shipping_cost: str
    tax: str
    total: str
    tracking_number: str | None
    created_at: str

    @staticmethod
    def from_order(order: Order) -> OrderDTO:
        return OrderDTO(
            id=order.id,  # type: ignore[arg-type]
            order_number=order.order_number,
            user_id=order.user_id,
            status=order.status.value,
            payment_status=order.payment_status.value,
            items=[
                OrderItemDTO(
                    product_id=item.product_id,
                    product_name=item.product_name,
                    quantity=item.quantity.value,
                    unit_price=str(item.unit_price),
                    line_total=str(item.line_total),
                    reservation_id=item.reservation_id,
                )
                for item in order.items
            ],
            subtotal=str(order.subtotal),
            shipping_cost=str(order.shipping_cost),
            tax=str(order.tax),
            total=str(order.total),
            tracking_number=order.tracking_number,
            created_at=order.created_at.strftime("%Y-%m-%d %H:%M UTC"),
        )


@dataclass(frozen=True)
class ReservationDTO:
    id: int
    product_id: str
    owner_id: str
    quantity: int
    status: str
    reserved_at: str
    expires_at: str

    @staticmethod
    def from_reservation(reservation: Reservation) -> ReservationDTO:
        return ReservationDTO(
            id=reservation.id,
            product_id=reservation.product_id,
            owner_id=reservation.owner_id,
            quantity=reservation.quantity,
            status=reservation.status.value,
            reserved_at=reservation.reserved_at.isoformat(timespec="seconds"),
            expires_at=reservation.expires_at.isoformat(timespec="seconds"),
        )
