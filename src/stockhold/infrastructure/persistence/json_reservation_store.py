"""JSON-file-backed implementation of ReservationStore.

Rows mirror the ``reservations`` table: id, product_id, owner_id,
quantity, reserved_at, expires_at, status.
"""

from __future__ import annotations

import json
import threading
from datetime import datetime, timedelta
from pathlib import Path

from stockhold.domain.exceptions import ReservationConflict, ResourceNotFoundError
from stockhold.domain.model.reservation import Reservation, ReservationStatus
from stockhold.domain.repository.reservation_store import ReservationStore


class JsonReservationStore(ReservationStore):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._lock = threading.Lock()
        self._ensure_file()

    # --- ReservationStore interface -------------------------------------------

    def create(
        self,
        product_id: str,
        owner_id: str,
        quantity: int,
        ttl: timedelta,
        now: datetime,
    ) -> Reservation:
        with self._lock:
            reservations = self._load()
            next_id = max((r.id for r in reservations), default=0) + 1
            reservation = Reservation(
                id=next_id,
                product_id=product_id,
                owner_id=owner_id,
                quantity=quantity,
                reserved_at=now,
                expires_at=now + ttl,
            )
            reservations.append(reservation)
            self._persist(reservations)
            return reservation

    def get_by_id(self, reservation_id: int) -> Reservation | None:
        with self._lock:
            for reservation in self._load():
                if reservation.id == reservation_id:
                    return reservation
        return None

    def sum_active_quantity(self, product_id: str) -> int:
        with self._lock:
            return sum(
                r.quantity
                for r in self._load()
                if r.product_id == product_id and r.is_active
            )

    def transition(
        self,
        reservation_id: int,
        from_status: ReservationStatus,
        to_status: ReservationStatus,
    ) -> bool:
        with self._lock:
            reservations = self._load()
            for reservation in reservations:
                if reservation.id == reservation_id:
                    break
            else:
                raise ResourceNotFoundError(f"Reservation #{reservation_id} not found")

            try:
                reservation.transition(from_status, to_status)
            except ReservationConflict:
                return False
            self._persist(reservations)
            return True

    def find_active_expired(self, now: datetime) -> list[Reservation]:
        with self._lock:
            return [r for r in self._load() if r.is_active and r.expires_at < now]

    def list_active_by_product(self, product_id: str) -> list[Reservation]:
        with self._lock:
            return [
                r for r in self._load() if r.product_id == product_id and r.is_active
            ]

    def list_by_owner(self, owner_id: str) -> list[Reservation]:
        with self._lock:
            return [r for r in self._load() if r.owner_id == owner_id]

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(reservation: Reservation) -> dict:
        return {
            "id": reservation.id,
            "product_id": reservation.product_id,
            "owner_id": reservation.owner_id,
            "quantity": reservation.quantity,
            "reserved_at": reservation.reserved_at.isoformat(),
            "expires_at": reservation.expires_at.isoformat(),
            "status": reservation.status.value,
        }

    @staticmethod
    def _to_domain(raw: dict) -> Reservation:
        return Reservation(
            id=raw["id"],
            product_id=raw["product_id"],
            owner_id=raw["owner_id"],
            quantity=raw["quantity"],
            reserved_at=datetime.fromisoformat(raw["reserved_at"]),
            expires_at=datetime.fromisoformat(raw["expires_at"]),
            status=ReservationStatus(raw["status"]),
        )

    # --- File helpers ---------------------------------------------------------

    def _load(self) -> list[Reservation]:
        raw = json.loads(self._file_path.read_text(encoding="utf-8"))
        return [self._to_domain(r) for r in raw]

    def _persist(self, reservations: list[Reservation]) -> None:
        raw = [self._to_raw(r) for r in reservations]
        self._file_path.write_text(json.dumps(raw, indent=2) + "\n", encoding="utf-8")

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("[]", encoding="utf-8")
