"""Product as seen from the order core.

The catalog owns products; the order core only reads the name and the
current price to snapshot them onto order items.
"""

from __future__ import annotations

from dataclasses import dataclass

from stockhold.domain.model.value_objects import Money


@dataclass
class Product:
    id: str
    name: str
    price: Money

    @property
    def is_orderable(self) -> bool:
        """Products without a positive price cannot be ordered."""
        return not self.price.is_zero
