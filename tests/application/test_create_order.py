"""Tests for the CreateOrderHandler use case."""

from datetime import timedelta

import pytest

from stockhold.application.dto import OrderItemSpec
from stockhold.domain.exceptions import (
    InsufficientStockError,
    OrderStatusError,
    ResourceNotFoundError,
)
from stockhold.domain.model.order import OrderStatus
from stockhold.domain.model.product import Product
from stockhold.domain.model.reservation import ReservationStatus
from stockhold.domain.model.value_objects import Money
from tests.fakes import T0, make_system


def _specs(*pairs: tuple[str, int]) -> list[OrderItemSpec]:
    return [OrderItemSpec(product_id=pid, quantity=qty) for pid, qty in pairs]


class TestCreateOrder:

    def test_creates_pending_order_with_one_hold_per_item(self):
        system = make_system({"A": 5, "B": 2})

        dto = system.create_handler().handle("u1", _specs(("A", 3), ("B", 1)))

        assert dto.id == 1
        assert dto.status == "PENDING"
        assert dto.payment_status == "PENDING"
        assert dto.order_number.startswith("ORD-")
        assert [i.product_id for i in dto.items] == ["A", "B"]
        reservations = system.store.list_by_owner("u1")
        assert {r.product_id: r.quantity for r in reservations} == {"A": 3, "B": 1}
        assert all(r.status == ReservationStatus.ACTIVE for r in reservations)
        assert system.manager.available("A") == 2
        assert system.manager.available("B") == 1
        # nothing deducted until confirmation
        assert system.ledger.get_stock("A") == 5

    def test_hold_ttl_applies_to_order_holds(self):
        system = make_system({"A": 5})

        dto = system.create_handler(hold_ttl=timedelta(minutes=15)).handle("u1", _specs(("A", 1)))

        reservation = system.manager.get(dto.items[0].reservation_id)
        assert reservation.expires_at == T0 + timedelta(minutes=15)

    def test_price_snapshot_is_kept(self):
        system = make_system({"A": 5}, prices={"A": "12.50"})
        dto = system.create_handler().handle("u1", _specs(("A", 2)))

        system.catalog.save(Product(id="A", name="Product A", price=Money.of("99.00")))

        order = system.orders.get_by_id(dto.id)
        assert order.items[0].unit_price == Money.of("12.50")


class TestPricing:

    def test_small_order_pays_shipping(self):
        system = make_system({"A": 5})
        dto = system.create_handler().handle("u1", _specs(("A", 3)))

        assert dto.subtotal == "$30.00"
        assert dto.shipping_cost == "$10.00"
        assert dto.tax == "$3.00"
        assert dto.total == "$43.00"

    def test_large_order_ships_free(self):
        system = make_system({"A": 20})
        dto = system.create_handler().handle("u1", _specs(("A", 15)))

        assert dto.subtotal == "$150.00"
        assert dto.shipping_cost == "$0.00"
        assert dto.tax == "$15.00"
        assert dto.total == "$165.00"


class TestValidation:

    def test_empty_order_rejected(self):
        system = make_system({"A": 5})
        with pytest.raises(OrderStatusError, match="at least one item"):
            system.create_handler().handle("u1", [])

    def test_non_positive_quantity_rejected_before_any_hold(self):
        system = make_system({"A": 5, "B": 5})
        with pytest.raises(OrderStatusError, match="quantity must be positive"):
            system.create_handler().handle("u1", _specs(("A", 1), ("B", 0)))
        assert system.store.list_by_owner("u1") == []

    def test_unknown_product_rejected(self):
        system = make_system({"A": 5})
        with pytest.raises(ResourceNotFoundError, match="Product not found: 'Z'"):
            system.create_handler().handle("u1", _specs(("A", 1), ("Z", 1)))
        assert system.store.list_by_owner("u1") == []
        assert system.orders.list_by_user("u1") == []

    def test_zero_priced_product_rejected(self):
        system = make_system({"A": 5}, prices={"A": "0"})
        with pytest.raises(OrderStatusError, match="price must be positive"):
            system.create_handler().handle("u1", _specs(("A", 1)))


class TestRollback:

    def test_partial_failure_releases_earlier_holds(self):
        system = make_system({"A": 5, "B": 1})

        with pytest.raises(InsufficientStockError, match="product 'B'"):
            system.create_handler().handle("u1", _specs(("A", 3), ("B", 2)))

        assert system.orders.list_by_user("u1") == []
        reservations = system.store.list_by_owner("u1")
        assert [r.status for r in reservations] == [ReservationStatus.RELEASED]
        assert system.manager.available("A") == 5
        assert system.manager.available("B") == 1

    def test_other_users_holds_are_respected(self):
        system = make_system({"A": 5})
        system.manager.reserve("A", "someone-else", 4)

        with pytest.raises(InsufficientStockError):
            system.create_handler().handle("u1", _specs(("A", 2)))
        assert system.manager.available("A") == 1
