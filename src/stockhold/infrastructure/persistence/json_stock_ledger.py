"""JSON-file-backed implementation of StockLedger.

Rows follow the ``product_id, stock_quantity`` shape. Every operation is
a load-modify-persist cycle under one lock, which makes it atomic within
this process.
"""

from __future__ import annotations

import json
import threading
from pathlib import Path

from stockhold.domain.exceptions import (
    InsufficientStockError,
    ResourceNotFoundError,
    ValidationError,
)
from stockhold.domain.repository.stock_ledger import StockLedger


class JsonStockLedger(StockLedger):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._lock = threading.Lock()
        self._ensure_file()

    # --- StockLedger interface ------------------------------------------------

    def get_stock(self, product_id: str) -> int:
        with self._lock:
            stock = self._load()
        if product_id not in stock:
            raise ResourceNotFoundError(f"No stock record for product '{product_id}'")
        return stock[product_id]

    def deduct(self, product_id: str, quantity: int) -> None:
        self.deduct_many({product_id: quantity})

    def deduct_many(self, quantities: dict[str, int]) -> None:
        with self._lock:
            stock = self._load()
            for product_id, quantity in quantities.items():
                if quantity <= 0:
                    raise ValidationError("Deduction quantity must be positive")
                if product_id not in stock:
                    raise ResourceNotFoundError(
                        f"No stock record for product '{product_id}'"
                    )
                if stock[product_id] < quantity:
                    raise InsufficientStockError(
                        f"Insufficient stock for product '{product_id}' "
                        f"(need {quantity}, have {stock[product_id]})",
                        product_id=product_id,
                    )
            for product_id, quantity in quantities.items():
                stock[product_id] -= quantity
            self._persist(stock)

    def restock_many(self, quantities: dict[str, int]) -> None:
        with self._lock:
            stock = self._load()
            for product_id, quantity in quantities.items():
                if product_id not in stock:
                    raise ResourceNotFoundError(
                        f"No stock record for product '{product_id}'"
                    )
                stock[product_id] += quantity
            self._persist(stock)

    def set_stock(self, product_id: str, quantity: int) -> None:
        if quantity < 0:
            raise ValidationError("Stock quantity cannot be negative")
        with self._lock:
            stock = self._load()
            stock[product_id] = quantity
            self._persist(stock)

    def list_all(self) -> dict[str, int]:
        with self._lock:
            return self._load()

    # --- File helpers ---------------------------------------------------------

    def _load(self) -> dict[str, int]:
        raw = json.loads(self._file_path.read_text(encoding="utf-8"))
        return {row["product_id"]: row["stock_quantity"] for row in raw}

    def _persist(self, stock: dict[str, int]) -> None:
        rows = [
            {"product_id": product_id, "stock_quantity": quantity}
            for product_id, quantity in stock.items()
        ]
        self._file_path.write_text(json.dumps(rows, indent=2) + "\n", encoding="utf-8")

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("[]", encoding="utf-8")
