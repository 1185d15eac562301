"""Pricing policy: shipping, tax and total for an order subtotal.

Kept behind an interface because the formulas are a business decision
that changes independently of the order lifecycle.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal

from stockhold.domain.model.value_objects import Money


class PricingPolicy(ABC):

    @abstractmethod
    def shipping_cost(self, subtotal: Money) -> Money: ...

    @abstractmethod
    def tax(self, subtotal: Money) -> Money: ...

    def total(self, subtotal: Money, shipping_cost: Money, tax: Money) -> Money:
        return subtotal + shipping_cost + tax


class StandardPricingPolicy(PricingPolicy):
    """Flat shipping below a free-shipping threshold, flat-rate tax."""

    def __init__(
        self,
        free_shipping_over: Money = Money.of("100.00"),
        flat_shipping: Money = Money.of("10.00"),
        tax_rate: Decimal = Decimal("0.10"),
    ) -> None:
        self._free_shipping_over = free_shipping_over
        self._flat_shipping = flat_shipping
        self._tax_rate = tax_rate

    def shipping_cost(self, subtotal: Money) -> Money:
        if subtotal > self._free_shipping_over:
            return Money.zero(subtotal.currency)
        return self._flat_shipping

    def tax(self, subtotal: Money) -> Money:
        return subtotal.percent(self._tax_rate)
