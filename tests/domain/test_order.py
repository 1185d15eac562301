"""Unit tests for the Order aggregate and its status state machine."""

import re

import pytest

from stockhold.domain.exceptions import OrderStatusError
from stockhold.domain.model.order import (
    Order,
    OrderItem,
    OrderStatus,
    PaymentStatus,
)
from stockhold.domain.model.value_objects import Money, Quantity
from stockhold.domain.service.pricing import StandardPricingPolicy


def _item(product_id="A", qty=3, price="10.00", reservation_id=1) -> OrderItem:
    return OrderItem(
        product_id=product_id,
        product_name=f"Product {product_id}",
        quantity=Quantity(qty),
        unit_price=Money.of(price),
        reservation_id=reservation_id,
    )


def _order(*items: OrderItem, status=OrderStatus.PENDING) -> Order:
    order = Order.create("u1", list(items) or [_item()], StandardPricingPolicy())
    order.status = status
    return order


class TestCreate:

    def test_new_order_is_pending_with_pending_payment(self):
        order = _order()
        assert order.id is None
        assert order.status == OrderStatus.PENDING
        assert order.payment_status == PaymentStatus.PENDING

    def test_order_number_format(self):
        order = _order()
        assert re.fullmatch(r"ORD-[0-9A-F]{8}", order.order_number)

    def test_empty_items_rejected(self):
        with pytest.raises(OrderStatusError, match="at least one item"):
            Order.create("u1", [], StandardPricingPolicy())

    def test_pricing_applied(self):
        order = _order(_item("A", 3, "10.00"), _item("B", 1, "5.00", reservation_id=2))
        assert order.subtotal == Money.of("35.00")
        assert order.shipping_cost == Money.of("10.00")
        assert order.tax == Money.of("3.50")
        assert order.total == Money.of("48.50")

    def test_quantities_by_product_merges_repeated_products(self):
        order = _order(_item("A", 2), _item("A", 1, reservation_id=2), _item("B", 4, reservation_id=3))
        assert order.quantities_by_product() == {"A": 3, "B": 4}
        assert order.reservation_ids == [1, 2, 3]


class TestTransitions:

    def test_pending_to_confirmed(self):
        order = _order()
        order.advance_to(OrderStatus.CONFIRMED)
        assert order.status == OrderStatus.CONFIRMED

    def test_pending_cannot_skip_confirmation(self):
        order = _order()
        with pytest.raises(OrderStatusError, match="must be confirmed before"):
            order.advance_to(OrderStatus.SHIPPED)
        assert order.status == OrderStatus.PENDING

    def test_forward_moves_allowed(self):
        order = _order(status=OrderStatus.CONFIRMED)
        for status in (OrderStatus.PROCESSING, OrderStatus.PAID, OrderStatus.DELIVERED):
            order.advance_to(status)
        assert order.status == OrderStatus.DELIVERED

    def test_backward_move_rejected(self):
        order = _order(status=OrderStatus.PROCESSING)
        with pytest.raises(OrderStatusError, match="back to CONFIRMED"):
            order.advance_to(OrderStatus.CONFIRMED)

    def test_back_to_pending_rejected(self):
        order = _order(status=OrderStatus.CONFIRMED)
        with pytest.raises(OrderStatusError, match="back to PENDING"):
            order.advance_to(OrderStatus.PENDING)

    def test_same_status_is_allowed(self):
        order = _order(status=OrderStatus.CONFIRMED)
        order.advance_to(OrderStatus.CONFIRMED)
        assert order.status == OrderStatus.CONFIRMED

    def test_cancel_pending(self):
        order = _order()
        order.cancel()
        assert order.status == OrderStatus.CANCELLED

    @pytest.mark.parametrize("status", [OrderStatus.CONFIRMED, OrderStatus.SHIPPED])
    def test_cancel_non_pending_rejected(self, status):
        order = _order(status=status)
        with pytest.raises(OrderStatusError, match="Only pending orders can be cancelled"):
            order.cancel()
        assert order.status == status

    @pytest.mark.parametrize("target", list(OrderStatus))
    def test_nothing_leaves_cancelled(self, target):
        order = _order(status=OrderStatus.CANCELLED)
        with pytest.raises(OrderStatusError, match="cancelled order"):
            order.ensure_transition_allowed(target)


class TestRecordPayment:

    def test_updates_payment_and_tracking(self):
        order = _order(status=OrderStatus.CONFIRMED)
        order.record_payment(PaymentStatus.COMPLETED, "TRK-1")
        assert order.payment_status == PaymentStatus.COMPLETED
        assert order.tracking_number == "TRK-1"

    def test_none_leaves_fields_untouched(self):
        order = _order()
        order.record_payment()
        assert order.payment_status == PaymentStatus.PENDING
        assert order.tracking_number is None
