"""CLI commands for stock reservations and the expiration sweeper."""

from __future__ import annotations

import click

from stockhold.application.release_reservation import ReleaseReservationHandler
from stockhold.application.reserve_stock import ReserveStockHandler
from stockhold.application.show_reservations import ShowReservationsHandler
from stockhold.domain.exceptions import DomainException
from stockhold.infrastructure.bootstrap import (
    expiration_sweeper,
    product_catalog,
    reservation_manager,
    reservation_store,
)


@click.command("reserve")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--owner", "owner_id", required=True, help="User or order holding the stock.")
@click.option("--quantity", required=True, type=int, help="Units to hold.")
def reservation_reserve(product_id: str, owner_id: str, quantity: int) -> None:
    """Hold stock of a product for an owner."""
    handler = ReserveStockHandler(
        product_catalog=product_catalog(),
        reservations=reservation_manager(),
    )

    try:
        dto = handler.handle(product_id=product_id, owner_id=owner_id, quantity=quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Reservation #{dto.id} holds {dto.quantity} of product #{dto.product_id} until {dto.expires_at}")


@click.command("release")
@click.option("--id", "reservation_id", required=True, type=int, help="Reservation ID.")
def reservation_release(reservation_id: int) -> None:
    """Release a reservation (no-op if it already ended)."""
    handler = ReleaseReservationHandler(reservations=reservation_manager())

    try:
        released = handler.handle(reservation_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if released:
        click.echo(f"Reservation #{reservation_id} released.")
    else:
        click.echo(f"Reservation #{reservation_id} was not active; nothing to do.")


@click.command("list")
@click.option("--owner", "owner_id", default=None, help="List every hold of this owner.")
@click.option("--product", "product_id", default=None, help="List active holds on this product.")
def reservation_list(owner_id: str | None, product_id: str | None) -> None:
    """List reservations by owner or by product."""
    handler = ShowReservationsHandler(reservation_store=reservation_store())

    try:
        rows = handler.handle(owner_id=owner_id, product_id=product_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not rows:
        click.echo("No reservations found.")
        return

    click.echo(f"{'ID':<6} {'Product':<8} {'Owner':<12} {'Qty':>5} {'Status':<10} {'Expires':<20}")
    click.echo("-" * 66)
    for r in rows:
        click.echo(
            f"{r.id:<6} {r.product_id:<8} {r.owner_id:<12} {r.quantity:>5} "
            f"{r.status:<10} {r.expires_at:<20}"
        )


@click.command("sweep")
@click.option("--loop", is_flag=True, default=False, help="Keep sweeping on the configured interval.")
def sweep(loop: bool) -> None:
    """Expire stale reservations (once, or forever with --loop)."""
    sweeper = expiration_sweeper()

    if loop:
        try:
            sweeper.run_forever()
        except KeyboardInterrupt:
            sweeper.stop()
        return

    expired = sweeper.run_once()
    click.echo(f"Expired {expired} stale reservation(s).")
