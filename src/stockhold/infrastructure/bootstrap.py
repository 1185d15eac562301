"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from functools import lru_cache

from stockhold.domain.service.expiration_sweeper import ExpirationSweeper
from stockhold.domain.service.pricing import StandardPricingPolicy
from stockhold.domain.service.product_locks import ProductLocks
from stockhold.domain.service.reservation_manager import ReservationManager
from stockhold.infrastructure.config import get_settings
from stockhold.infrastructure.persistence.json_order_repository import (
    JsonOrderRepository,
)
from stockhold.infrastructure.persistence.json_product_catalog import (
    JsonProductCatalog,
)
from stockhold.infrastructure.persistence.json_reservation_store import (
    JsonReservationStore,
)
from stockhold.infrastructure.persistence.json_stock_ledger import JsonStockLedger

# One lock registry per process: every manager must share it.
_PRODUCT_LOCKS = ProductLocks()


@lru_cache
def product_catalog() -> JsonProductCatalog:
    return JsonProductCatalog(get_settings().data_dir / "products.json")


@lru_cache
def stock_ledger() -> JsonStockLedger:
    return JsonStockLedger(get_settings().data_dir / "stock.json")


@lru_cache
def reservation_store() -> JsonReservationStore:
    return JsonReservationStore(get_settings().data_dir / "reservations.json")


@lru_cache
def order_repository() -> JsonOrderRepository:
    return JsonOrderRepository(get_settings().data_dir / "orders.json")


def pricing_policy() -> StandardPricingPolicy:
    return StandardPricingPolicy()


@lru_cache
def reservation_manager() -> ReservationManager:
    return ReservationManager(
        stock_ledger=stock_ledger(),
        reservation_store=reservation_store(),
        locks=_PRODUCT_LOCKS,
        default_ttl=get_settings().reservation_ttl,
    )


def expiration_sweeper() -> ExpirationSweeper:
    return ExpirationSweeper(
        reservation_store=reservation_store(),
        reservation_manager=reservation_manager(),
        interval_seconds=get_settings().sweep_interval_seconds,
    )
