"""Unit tests for domain value objects."""

from decimal import Decimal

import pytest

from stockhold.domain.exceptions import ValidationError
from stockhold.domain.model.value_objects import Money, Quantity


# ── Money ────────────────────────────────────────────────────────────────────


class TestMoney:

    def test_of_factory_from_string(self):
        m = Money.of("25.99")
        assert m.amount == Decimal("25.99")
        assert m.currency == "USD"

    def test_invalid_amount_rejected(self):
        with pytest.raises(ValidationError, match="Invalid money amount"):
            Money.of("ten")

    def test_negative_amount_rejected(self):
        with pytest.raises(ValidationError, match="cannot be negative"):
            Money(Decimal("-1"))

    def test_float_amount_rejected(self):
        with pytest.raises(ValidationError, match="must be a Decimal"):
            Money(10.5)

    def test_addition_and_multiplication(self):
        assert Money.of("10") + Money.of("5.50") == Money.of("15.50")
        assert Money.of("7.50") * 3 == Money.of("22.50")

    def test_percent_rounds_to_cents(self):
        assert Money.of("33.35").percent(Decimal("0.10")) == Money.of("3.34")
        assert Money.of("30.00").percent(Decimal("0.10")) == Money.of("3.00")

    def test_zero(self):
        assert Money.zero().is_zero
        assert not Money.of("0.01").is_zero

    def test_currency_mismatch_rejected(self):
        with pytest.raises(ValidationError, match="Cannot combine"):
            Money(Decimal("10"), "USD") + Money(Decimal("5"), "EUR")

    def test_str_formatting(self):
        assert str(Money.of("15")) == "$15.00"
        assert str(Money.of("9.5")) == "$9.50"

    def test_greater_than(self):
        assert Money.of("10") > Money.of("5")
        assert not Money.of("10") > Money.of("10")

    def test_compare_across_currencies_rejected(self):
        with pytest.raises(ValidationError, match="Cannot combine"):
            Money(Decimal("10"), "USD") > Money(Decimal("5"), "EUR")


# ── Quantity ─────────────────────────────────────────────────────────────────


class TestQuantity:

    def test_valid_quantity(self):
        assert Quantity(5).value == 5

    @pytest.mark.parametrize("value", [0, -3])
    def test_non_positive_rejected(self, value):
        with pytest.raises(ValidationError, match="must be positive"):
            Quantity(value)

    def test_bool_rejected(self):
        with pytest.raises(ValidationError, match="must be an integer"):
            Quantity(True)
