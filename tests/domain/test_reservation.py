"""Unit tests for the Reservation entity."""

from datetime import timedelta

import pytest

from stockhold.domain.exceptions import ReservationConflict
from stockhold.domain.model.reservation import Reservation, ReservationStatus
from tests.fakes import T0


def _reservation(status=ReservationStatus.ACTIVE) -> Reservation:
    return Reservation(
        id=1,
        product_id="A",
        owner_id="u1",
        quantity=2,
        reserved_at=T0,
        expires_at=T0 + timedelta(minutes=15),
        status=status,
    )


class TestReservationStatus:

    def test_only_active_is_not_terminal(self):
        assert not ReservationStatus.ACTIVE.is_terminal
        assert ReservationStatus.CONFIRMED.is_terminal
        assert ReservationStatus.RELEASED.is_terminal
        assert ReservationStatus.EXPIRED.is_terminal


class TestTransition:

    @pytest.mark.parametrize(
        "target",
        [ReservationStatus.CONFIRMED, ReservationStatus.RELEASED, ReservationStatus.EXPIRED],
    )
    def test_active_moves_to_any_terminal_state(self, target):
        r = _reservation()
        r.transition(ReservationStatus.ACTIVE, target)
        assert r.status == target
        assert not r.is_active

    def test_wrong_from_status_conflicts(self):
        r = _reservation(ReservationStatus.CONFIRMED)
        with pytest.raises(ReservationConflict, match="expected ACTIVE"):
            r.transition(ReservationStatus.ACTIVE, ReservationStatus.EXPIRED)
        assert r.status == ReservationStatus.CONFIRMED

    def test_terminal_state_never_changes(self):
        r = _reservation(ReservationStatus.RELEASED)
        with pytest.raises(ReservationConflict, match="already RELEASED"):
            r.transition(ReservationStatus.RELEASED, ReservationStatus.ACTIVE)
        assert r.status == ReservationStatus.RELEASED


class TestStaleness:

    def test_stale_only_strictly_after_expiry(self):
        r = _reservation()
        assert not r.is_stale(T0)
        assert not r.is_stale(r.expires_at)
        assert r.is_stale(r.expires_at + timedelta(seconds=1))
