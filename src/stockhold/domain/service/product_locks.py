"""Per-product lock registry.

Every operation that reads "stock minus active reservations" and then
acts on it runs under the lock of the product it touches. Locks are
re-entrant so a caller holding a product (the confirm path) can still call
``reserve``/``consume`` for it on the same thread.
"""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import ExitStack, contextmanager


class ProductLocks:

    def __init__(self) -> None:
        self._registry_lock = threading.Lock()
        self._locks: dict[str, threading.RLock] = {}

    def _lock_for(self, product_id: str) -> threading.RLock:
        with self._registry_lock:
            lock = self._locks.get(product_id)
            if lock is None:
                lock = threading.RLock()
                self._locks[product_id] = lock
            return lock

    @contextmanager
    def hold(self, *product_ids: str) -> Iterator[None]:
        """Acquire the locks of ``product_ids``.

        Locks are taken in sorted order so two callers holding overlapping
        product sets can never deadlock.
        """
        with ExitStack() as stack:
            for product_id in sorted(set(product_ids)):
                stack.enter_context(self._lock_for(product_id))
            yield
