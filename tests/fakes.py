"""Test doubles and a small builder for a fully wired in-memory system.

The in-memory adapters from the package are thread-safe and used as-is;
the fakes here only control time and inject store failures.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from stockhold.application.cancel_order import CancelOrderHandler
from stockhold.application.create_order import CreateOrderHandler
from stockhold.application.update_order_status import UpdateOrderStatusHandler
from stockhold.domain.model.order import Order
from stockhold.domain.model.product import Product
from stockhold.domain.model.reservation import Reservation, ReservationStatus
from stockhold.domain.model.value_objects import Money
from stockhold.domain.service.expiration_sweeper import ExpirationSweeper
from stockhold.domain.service.reservation_manager import ReservationManager
from stockhold.infrastructure.persistence.in_memory import (
    InMemoryOrderRepository,
    InMemoryProductCatalog,
    InMemoryReservationStore,
    InMemoryStockLedger,
)

T0 = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


class FakeClock:

    def __init__(self, start: datetime = T0) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


class FlakyReservationStore(InMemoryReservationStore):
    """Fails ``find_active_expired`` a given number of times, then recovers."""

    def __init__(self, failures: int) -> None:
        super().__init__()
        self.failures = failures

    def find_active_expired(self, now: datetime) -> list[Reservation]:
        if self.failures > 0:
            self.failures -= 1
            raise ConnectionError("reservation store unavailable")
        return super().find_active_expired(now)



class FlakyOrderRepository(InMemoryOrderRepository):
    """Fails the next ``failures`` calls to ``save``, then recovers."""

    def __init__(self, failures: int = 0) -> None:
        super().__init__()
        self.failures = failures

    def save(self, order: Order) -> None:
        if self.failures > 0:
            self.failures -= 1
            raise ConnectionError("order repository unavailable")
        super().save(order)


class BrokenTransitionStore(InMemoryReservationStore):
    """Fails every status transition once ``broken`` is set."""

    def __init__(self) -> None:
        super().__init__()
        self.broken = False

    def transition(
        self,
        reservation_id: int,
        from_status: ReservationStatus,
        to_status: ReservationStatus,
    ) -> bool:
        if self.broken:
            raise ConnectionError("reservation store unavailable")
        return super().transition(reservation_id, from_status, to_status)


@dataclass
class System:
    clock: FakeClock
    catalog: InMemoryProductCatalog
    ledger: InMemoryStockLedger
    store: InMemoryReservationStore
    orders: InMemoryOrderRepository
    manager: ReservationManager

    def create_handler(self, hold_ttl: timedelta | None = None) -> CreateOrderHandler:
        return CreateOrderHandler(self.orders, self.catalog, self.manager, hold_ttl=hold_ttl)

    def update_handler(self) -> UpdateOrderStatusHandler:
        return UpdateOrderStatusHandler(self.orders, self.ledger, self.manager)

    def cancel_handler(self) -> CancelOrderHandler:
        return CancelOrderHandler(self.orders, self.manager)

    def sweeper(self) -> ExpirationSweeper:
        return ExpirationSweeper(self.store, self.manager, interval_seconds=0.01, clock=self.clock)


def make_system(
    stock: dict[str, int],
    prices: dict[str, str] | None = None,
    store: InMemoryReservationStore | None = None,
    orders: InMemoryOrderRepository | None = None,
    ttl: timedelta = timedelta(minutes=30),
) -> System:
    """Wire products ``stock`` keys (named after their IDs) at ``prices`` (default 10.00)."""
    prices = prices or {}
    clock = FakeClock()
    catalog = InMemoryProductCatalog(
        [
            Product(id=pid, name=f"Product {pid}", price=Money.of(prices.get(pid, "10.00")))
            for pid in stock
        ]
    )
    ledger = InMemoryStockLedger(stock)
    store = store or InMemoryReservationStore()
    manager = ReservationManager(ledger, store, default_ttl=ttl, clock=clock)
    return System(
        clock=clock,
        catalog=catalog,
        ledger=ledger,
        store=store,
        orders=orders or InMemoryOrderRepository(),
        manager=manager,
    )
