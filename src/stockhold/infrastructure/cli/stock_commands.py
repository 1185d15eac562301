"""CLI commands for on-hand stock."""

from __future__ import annotations

import click

from stockhold.application.set_stock import SetStockHandler
from stockhold.application.show_inventory import ShowInventoryHandler
from stockhold.domain.exceptions import DomainException
from stockhold.infrastructure.bootstrap import (
    product_catalog,
    reservation_manager,
    reservation_store,
    stock_ledger,
)


@click.command("set")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--quantity", required=True, type=int, help="On-hand quantity.")
def stock_set(product_id: str, quantity: int) -> None:
    """Set the on-hand stock of a product."""
    handler = SetStockHandler(
        stock_ledger=stock_ledger(),
        reservation_store=reservation_store(),
        product_catalog=product_catalog(),
        reservations=reservation_manager(),
    )

    try:
        handler.handle(product_id=product_id, quantity=quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Stock for product #{product_id} set to {quantity}")


@click.command("show")
def stock_show() -> None:
    """Show stock, reserved and available quantities."""
    handler = ShowInventoryHandler(
        stock_ledger=stock_ledger(),
        reservation_store=reservation_store(),
        product_catalog=product_catalog(),
    )
    lines = handler.handle()

    if not lines:
        click.echo("No stock records found.")
        return

    click.echo(f"{'ID':<6} {'Product':<20} {'Stock':>8} {'Reserved':>10} {'Available':>10}")
    click.echo("-" * 58)
    for line in lines:
        click.echo(
            f"{line.product_id:<6} {line.product_name:<20} {line.stock:>8} "
            f"{line.reserved:>10} {line.available:>10}"
        )
