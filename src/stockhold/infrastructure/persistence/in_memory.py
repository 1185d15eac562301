"""Thread-safe in-memory adapters.

Each adapter guards its own state with a lock, so every single operation
(deduct, create, transition...) is atomic. Records are copied in and out,
so callers can never mutate stored state behind the adapter's back.
"""

from __future__ import annotations

import copy
import itertools
import threading
from dataclasses import replace
from datetime import datetime, timedelta

from stockhold.domain.exceptions import (
    InsufficientStockError,
    ReservationConflict,
    ResourceNotFoundError,
    ValidationError,
)
from stockhold.domain.model.order import Order
from stockhold.domain.model.product import Product
from stockhold.domain.model.reservation import Reservation, ReservationStatus
from stockhold.domain.repository.order_repository import OrderRepository
from stockhold.domain.repository.product_catalog import ProductCatalog
from stockhold.domain.repository.reservation_store import ReservationStore
from stockhold.domain.repository.stock_ledger import StockLedger


class InMemoryStockLedger(StockLedger):

    def __init__(self, stock: dict[str, int] | None = None) -> None:
        self._lock = threading.Lock()
        self._stock: dict[str, int] = {}
        for product_id, quantity in (stock or {}).items():
            self.set_stock(product_id, quantity)

    def get_stock(self, product_id: str) -> int:
        with self._lock:
            return self._require(product_id)

    def deduct(self, product_id: str, quantity: int) -> None:
        self.deduct_many({product_id: quantity})

    def deduct_many(self, quantities: dict[str, int]) -> None:
        with self._lock:
            for product_id, quantity in quantities.items():
                if quantity <= 0:
                    raise ValidationError("Deduction quantity must be positive")
                current = self._require(product_id)
                if current < quantity:
                    raise InsufficientStockError(
                        f"Insufficient stock for product '{product_id}' "
                        f"(need {quantity}, have {current})",
                        product_id=product_id,
                    )
            for product_id, quantity in quantities.items():
                self._stock[product_id] -= quantity

    def restock_many(self, quantities: dict[str, int]) -> None:
        with self._lock:
            for product_id in quantities:
                self._require(product_id)
            for product_id, quantity in quantities.items():
                self._stock[product_id] += quantity

    def set_stock(self, product_id: str, quantity: int) -> None:
        if quantity < 0:
            raise ValidationError("Stock quantity cannot be negative")
        with self._lock:
            self._stock[product_id] = quantity

    def list_all(self) -> dict[str, int]:
        with self._lock:
            return dict(self._stock)

    def _require(self, product_id: str) -> int:
        if product_id not in self._stock:
            raise ResourceNotFoundError(f"No stock record for product '{product_id}'")
        return self._stock[product_id]


class InMemoryReservationStore(ReservationStore):

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._store: dict[int, Reservation] = {}
        self._ids = itertools.count(1)

    def create(
        self,
        product_id: str,
        owner_id: str,
        quantity: int,
        ttl: timedelta,
        now: datetime,
    ) -> Reservation:
        with self._lock:
            reservation = Reservation(
                id=next(self._ids),
                product_id=product_id,
                owner_id=owner_id,
                quantity=quantity,
                reserved_at=now,
                expires_at=now + ttl,
            )
            self._store[reservation.id] = reservation
            return replace(reservation)

    def get_by_id(self, reservation_id: int) -> Reservation | None:
        with self._lock:
            reservation = self._store.get(reservation_id)
            return replace(reservation) if reservation is not None else None

    def sum_active_quantity(self, product_id: str) -> int:
        with self._lock:
            return sum(
                r.quantity
                for r in self._store.values()
                if r.product_id == product_id and r.is_active
            )

    def transition(
        self,
        reservation_id: int,
        from_status: ReservationStatus,
        to_status: ReservationStatus,
    ) -> bool:
        with self._lock:
            reservation = self._store.get(reservation_id)
            if reservation is None:
                raise ResourceNotFoundError(f"Reservation #{reservation_id} not found")
            try:
                reservation.transition(from_status, to_status)
            except ReservationConflict:
                return False
            return True

    def find_active_expired(self, now: datetime) -> list[Reservation]:
        with self._lock:
            return [
                replace(r)
                for r in self._store.values()
                if r.is_active and r.expires_at < now
            ]

    def list_active_by_product(self, product_id: str) -> list[Reservation]:
        with self._lock:
            return [
                replace(r)
                for r in self._store.values()
                if r.product_id == product_id and r.is_active
            ]

    def list_by_owner(self, owner_id: str) -> list[Reservation]:
        with self._lock:
            return [replace(r) for r in self._store.values() if r.owner_id == owner_id]


class InMemoryOrderRepository(OrderRepository):

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._store: dict[int, Order] = {}
        self._next_id = 1

    def get_by_id(self, order_id: int) -> Order | None:
        with self._lock:
            order = self._store.get(order_id)
            return copy.deepcopy(order) if order is not None else None

    def get_by_number(self, order_number: str) -> Order | None:
        with self._lock:
            for order in self._store.values():
                if order.order_number == order_number:
                    return copy.deepcopy(order)
            return None

    def list_by_user(self, user_id: str) -> list[Order]:
        with self._lock:
            return [
                copy.deepcopy(o)
                for o in sorted(self._store.values(), key=lambda o: o.id)
                if o.user_id == user_id
            ]

    def save(self, order: Order) -> None:
        with self._lock:
            if order.id is None:
                order.id = self._next_id
                self._next_id += 1
            self._store[order.id] = copy.deepcopy(order)


class InMemoryProductCatalog(ProductCatalog):

    def __init__(self, products: list[Product] | None = None) -> None:
        self._lock = threading.Lock()
        self._store: dict[str, Product] = {p.id: p for p in products or []}

    def get_by_id(self, product_id: str) -> Product | None:
        with self._lock:
            return self._store.get(product_id)

    def list_all(self) -> list[Product]:
        with self._lock:
            return list(self._store.values())

    def save(self, product: Product) -> None:
        with self._lock:
            self._store[product.id] = product
