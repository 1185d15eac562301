"""Tests for the CancelOrderHandler use case."""

from datetime import timedelta

import pytest

from stockhold.application.dto import OrderItemSpec
from stockhold.domain.exceptions import OrderStatusError, ResourceNotFoundError
from stockhold.domain.model.order import OrderStatus
from stockhold.domain.model.reservation import ReservationStatus
from tests.fakes import BrokenTransitionStore, FlakyOrderRepository, make_system


def _create(system, **quantities):
    specs = [OrderItemSpec(product_id=pid, quantity=qty) for pid, qty in quantities.items()]
    return system.create_handler().handle("u1", specs)


class TestCancelOrder:

    def test_cancel_releases_every_hold(self):
        system = make_system({"A": 5, "B": 2})
        dto = _create(system, A=3, B=1)

        system.cancel_handler().handle(dto.id)

        assert system.orders.get_by_id(dto.id).status == OrderStatus.CANCELLED
        assert [system.manager.get(i.reservation_id).status for i in dto.items] == [
            ReservationStatus.RELEASED,
            ReservationStatus.RELEASED,
        ]
        assert system.manager.available("A") == 5
        assert system.manager.available("B") == 2
        assert system.ledger.list_all() == {"A": 5, "B": 2}

    def test_cancel_after_holds_expired(self):
        system = make_system({"A": 5})
        dto = _create(system, A=3)
        system.clock.advance(hours=1)
        system.sweeper().run_once()

        system.cancel_handler().handle(dto.id)

        assert system.orders.get_by_id(dto.id).status == OrderStatus.CANCELLED
        assert system.manager.get(dto.items[0].reservation_id).status == ReservationStatus.EXPIRED
        assert system.manager.available("A") == 5

    def test_cancel_twice_rejected(self):
        system = make_system({"A": 5})
        dto = _create(system, A=3)
        system.cancel_handler().handle(dto.id)

        with pytest.raises(OrderStatusError, match="Only pending orders can be cancelled"):
            system.cancel_handler().handle(dto.id)

    def test_confirmed_order_cannot_be_cancelled(self):
        system = make_system({"A": 5})
        dto = _create(system, A=3)
        system.update_handler().handle(dto.id, OrderStatus.CONFIRMED)

        with pytest.raises(OrderStatusError, match="Only pending orders can be cancelled"):
            system.cancel_handler().handle(dto.id)
        assert system.ledger.get_stock("A") == 2

    def test_unknown_order(self):
        system = make_system({"A": 5})
        with pytest.raises(ResourceNotFoundError):
            system.cancel_handler().handle(42)

    def test_failed_save_keeps_order_and_holds(self):
        orders = FlakyOrderRepository()
        system = make_system({"A": 5}, orders=orders)
        dto = _create(system, A=3)
        orders.failures = 1

        with pytest.raises(ConnectionError):
            system.cancel_handler().handle(dto.id)

        assert system.orders.get_by_id(dto.id).status == OrderStatus.PENDING
        assert system.manager.get(dto.items[0].reservation_id).status == ReservationStatus.ACTIVE

        system.cancel_handler().handle(dto.id)

        assert system.orders.get_by_id(dto.id).status == OrderStatus.CANCELLED
        assert system.manager.available("A") == 5

    def test_failed_release_still_cancels(self):
        store = BrokenTransitionStore()
        system = make_system({"A": 5}, store=store, ttl=timedelta(minutes=1))
        dto = _create(system, A=3)
        store.broken = True

        system.cancel_handler().handle(dto.id)

        assert system.orders.get_by_id(dto.id).status == OrderStatus.CANCELLED
        assert system.manager.available("A") == 2

        store.broken = False
        system.clock.advance(minutes=5)
        system.sweeper().run_once()
        assert system.manager.available("A") == 5
