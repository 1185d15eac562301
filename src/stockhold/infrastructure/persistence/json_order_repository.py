"""JSON-file-backed implementation of OrderRepository.

Each order row carries its ``order_items`` inline, mirroring the
``orders`` / ``order_items`` tables.
"""

from __future__ import annotations

import json
import threading
from datetime import datetime
from decimal import Decimal
from pathlib import Path

from stockhold.domain.model.order import Order, OrderItem, OrderStatus, PaymentStatus
from stockhold.domain.model.value_objects import Money, Quantity
from stockhold.domain.repository.order_repository import OrderRepository


class JsonOrderRepository(OrderRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._lock = threading.Lock()
        self._ensure_file()

    # --- OrderRepository interface --------------------------------------------

    def get_by_id(self, order_id: int) -> Order | None:
        return self._find(lambda raw: raw["id"] == order_id)

    def get_by_number(self, order_number: str) -> Order | None:
        return self._find(lambda raw: raw["order_number"] == order_number)

    def list_by_user(self, user_id: str) -> list[Order]:
        with self._lock:
            rows = self._load_raw()
        return [
            self._to_domain(raw)
            for raw in sorted(rows, key=lambda r: r["id"])
            if raw["user_id"] == user_id
        ]

    def save(self, order: Order) -> None:
        with self._lock:
            orders = self._load_raw()

            if order.id is None:
                order.id = self._next_id(orders)

            # Upsert: replace if exists, otherwise append
            for i, raw in enumerate(orders):
                if raw["id"] == order.id:
                    orders[i] = self._to_raw(order)
                    break
            else:
                orders.append(self._to_raw(order))

            self._persist_raw(orders)

    def _find(self, predicate) -> Order | None:
        with self._lock:
            rows = self._load_raw()
        for raw in rows:
            if predicate(raw):
                return self._to_domain(raw)
        return None

    @staticmethod
    def _next_id(orders: list[dict]) -> int:
        return max((o["id"] for o in orders), default=0) + 1

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _money(raw: dict, key: str) -> Money:
        return Money(Decimal(raw[key]), raw.get("currency", "USD"))

    @staticmethod
    def _to_raw(order: Order) -> dict:
        return {
            "id": order.id,
            "order_number": order.order_number,
            "user_id": order.user_id,
            "status": order.status.value,
            "payment_status": order.payment_status.value,
            "subtotal": str(order.subtotal.amount),
            "shipping_cost": str(order.shipping_cost.amount),
            "tax": str(order.tax.amount),
            "total": str(order.total.amount),
            "currency": order.total.currency,
            "tracking_number": order.tracking_number,
            "created_at": order.created_at.isoformat(),
            "updated_at": order.updated_at.isoformat(),
            "items": [
                {
                    "product_id": item.product_id,
                    "product_name": item.product_name,
                    "quantity": item.quantity.value,
                    "unit_price": str(item.unit_price.amount),
                    "currency": item.unit_price.currency,
                    "reservation_id": item.reservation_id,
                }
                for item in order.items
            ],
        }

    @classmethod
    def _to_domain(cls, raw: dict) -> Order:
        items = [
            OrderItem(
                product_id=i["product_id"],
                product_name=i["product_name"],
                quantity=Quantity(i["quantity"]),
                unit_price=cls._money(i, "unit_price"),
                reservation_id=i.get("reservation_id"),
            )
            for i in raw["items"]
        ]
        return Order(
            id=raw["id"],
            order_number=raw["order_number"],
            user_id=raw["user_id"],
            items=items,
            status=OrderStatus(raw["status"]),
            payment_status=PaymentStatus(raw["payment_status"]),
            shipping_cost=cls._money(raw, "shipping_cost"),
            tax=cls._money(raw, "tax"),
            total=cls._money(raw, "total"),
            tracking_number=raw.get("tracking_number"),
            created_at=datetime.fromisoformat(raw["created_at"]),
            updated_at=datetime.fromisoformat(raw["updated_at"]),
        )

    # --- File helpers ---------------------------------------------------------

    def _load_raw(self) -> list[dict]:
        return json.loads(self._file_path.read_text(encoding="utf-8"))

    def _persist_raw(self, orders: list[dict]) -> None:
        self._file_path.write_text(
            json.dumps(orders, indent=2) + "\n", encoding="utf-8"
        )

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("[]", encoding="utf-8")
