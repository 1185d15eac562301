"""Application service: Add Product use case.

Seeds the catalog collaborator with a product and its opening stock.
"""

from __future__ import annotations

from stockhold.domain.exceptions import ValidationError
from stockhold.domain.model.product import Product
from stockhold.domain.model.value_objects import Money
from stockhold.domain.repository.product_catalog import ProductCatalog
from stockhold.domain.repository.stock_ledger import StockLedger


class AddProductHandler:

    def __init__(
        self,
        product_catalog: ProductCatalog,
        stock_ledger: StockLedger,
    ) -> None:
        self._product_catalog = product_catalog
        self._stock_ledger = stock_ledger

    def handle(self, name: str, price: str, stock: int = 0) -> Product:
        if not name or not name.strip():
            raise ValidationError("Product name is required")
        if stock < 0:
            raise ValidationError("Opening stock cannot be negative")

        # Auto-assign ID based on existing products
        all_products = self._product_catalog.list_all()
        if all_products:
            next_id = str(max(int(p.id) for p in all_products) + 1)
        else:
            next_id = "1"

        product = Product(id=next_id, name=name.strip(), price=Money.of(price))
        self._product_catalog.save(product)
        self._stock_ledger.set_stock(product.id, stock)
        return product
