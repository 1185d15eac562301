"""Expiration sweeper: frees capacity held by stale ACTIVE reservations.

Runs independently of request traffic. It only ever uses the store's
conditional transition (ACTIVE -> EXPIRED), so a reservation consumed or
released between being listed and being expired is simply skipped. It
never touches the stock ledger: nothing was deducted for an ACTIVE hold.
"""

from __future__ import annotations

import threading
from datetime import datetime

import structlog

from stockhold.domain.exceptions import DomainException
from stockhold.domain.repository.reservation_store import ReservationStore
from stockhold.domain.service.reservation_manager import Clock, ReservationManager, utc_clock

logger = structlog.get_logger(__name__)


class ExpirationSweeper:

    def __init__(
        self,
        reservation_store: ReservationStore,
        reservation_manager: ReservationManager,
        interval_seconds: float = 60.0,
        clock: Clock = utc_clock,
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError("Sweep interval must be positive")
        self._store = reservation_store
        self._manager = reservation_manager
        self._interval = interval_seconds
        self._clock = clock
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    def run_once(self, now: datetime | None = None) -> int:
        """Expire every stale ACTIVE reservation. Returns how many were expired."""
        now = now or self._clock()
        candidates = self._store.find_active_expired(now)
        if not candidates:
            logger.debug("No stale reservations found", as_of=now.isoformat())
            return 0

        expired_count = 0
        for reservation in candidates:
            try:
                if self._manager.expire_if_stale(reservation.id, now):
                    expired_count += 1
                    logger.info(
                        "Expired stale reservation",
                        reservation_id=reservation.id,
                        product_id=reservation.product_id,
                        owner_id=reservation.owner_id,
                        expires_at=reservation.expires_at.isoformat(),
                    )
            except DomainException as exc:
                logger.warning(
                    "Failed to expire stale reservation",
                    reservation_id=reservation.id,
                    error=str(exc),
                )

        logger.info(
            "Stale reservation cleanup complete",
            candidates=len(candidates),
            expired_count=expired_count,
        )
        return expired_count

    # --- Background loop ------------------------------------------------------

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start sweeping every ``interval_seconds`` in a daemon thread."""
        if self.is_running:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._loop, name="reservation-sweeper", daemon=True
        )
        self._thread.start()
        logger.info("Reservation sweeper started", interval_seconds=self._interval)

    def stop(self, timeout: float | None = None) -> None:
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
        logger.info("Reservation sweeper stopped")

    def run_forever(self) -> None:
        """Sweep in the calling thread until ``stop()`` is called."""
        self._stop_event.clear()
        self._loop()

    def _loop(self) -> None:
        while not self._stop_event.is_set():
            self.tick()
            self._stop_event.wait(self._interval)

    def tick(self) -> int:
        """One scheduled sweep. Failures are logged; the next tick retries."""
        try:
            return self.run_once()
        except Exception:
            logger.exception("Error during scheduled cleanup of expired reservations")
            return 0
