"""CLI commands for catalog products."""

from __future__ import annotations

import click

from stockhold.application.add_product import AddProductHandler
from stockhold.domain.exceptions import DomainException
from stockhold.infrastructure.bootstrap import product_catalog, stock_ledger


@click.command("add")
@click.option("--name", required=True, help="Product name.")
@click.option("--price", required=True, help="Price (e.g. 15.00).")
@click.option("--stock", "opening_stock", default=0, show_default=True, type=int, help="Opening stock.")
def product_add(name: str, price: str, opening_stock: int) -> None:
    """Add a new product to the catalog."""
    handler = AddProductHandler(
        product_catalog=product_catalog(),
        stock_ledger=stock_ledger(),
    )

    try:
        product = handler.handle(name=name, price=price, stock=opening_stock)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(
        f"Product #{product.id} '{product.name}' added at {product.price} "
        f"(stock={opening_stock})"
    )


@click.command("list")
def product_list() -> None:
    """List all products in the catalog."""
    products = product_catalog().list_all()

    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<6} {'Name':<20} {'Price':>10}")
    click.echo("-" * 38)
    for p in products:
        click.echo(f"{p.id:<6} {p.name:<20} {str(p.price):>10}")
