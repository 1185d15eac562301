"""CLI commands for the Order aggregate."""

from __future__ import annotations

import click

from stockhold.application.cancel_order import CancelOrderHandler
from stockhold.application.create_order import CreateOrderHandler
from stockhold.application.dto import OrderDTO, OrderItemSpec
from stockhold.application.list_orders import ListUserOrdersHandler
from stockhold.application.show_order import ShowOrderHandler
from stockhold.application.update_order_status import UpdateOrderStatusHandler
from stockhold.domain.exceptions import DomainException
from stockhold.domain.model.order import OrderStatus, PaymentStatus
from stockhold.infrastructure.bootstrap import (
    order_repository,
    pricing_policy,
    product_catalog,
    reservation_manager,
    stock_ledger,
)
from stockhold.infrastructure.config import get_settings

_ORDER_STATUSES = [s.value for s in OrderStatus]
_PAYMENT_STATUSES = [s.value for s in PaymentStatus]


def _parse_items(raw: str) -> list[OrderItemSpec]:
    """Parse '1:3,2:5' (product ID : quantity) into OrderItemSpec list."""
    specs: list[OrderItemSpec] = []
    for pair in raw.split(","):
        pair = pair.strip()
        if ":" not in pair:
            raise click.BadParameter(
                f"Invalid item format '{pair}'. Expected 'ProductID:Quantity'."
            )
        product_id, qty_str = pair.rsplit(":", 1)
        try:
            qty = int(qty_str)
        except ValueError:
            raise click.BadParameter(
                f"Invalid quantity '{qty_str}' for product '{product_id}'."
            )
        specs.append(OrderItemSpec(product_id=product_id.strip(), quantity=qty))
    return specs


def _display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order #{dto.id} {dto.order_number}  (status={dto.status}, payment={dto.payment_status})")
    click.echo(f"User:     {dto.user_id}")
    click.echo(f"Created:  {dto.created_at}")
    if dto.tracking_number:
        click.echo(f"Tracking: {dto.tracking_number}")
    click.echo()
    click.echo(f"  {'Product':<20} {'Qty':>5} {'Price':>10} {'Total':>10} {'Hold':>6}")
    click.echo(f"  {'-'*54}")
    for item in dto.items:
        hold = f"#{item.reservation_id}" if item.reservation_id is not None else "-"
        click.echo(
            f"  {item.product_name:<20} {item.quantity:>5} {item.unit_price:>10} "
            f"{item.line_total:>10} {hold:>6}"
        )
    click.echo(f"  {'-'*54}")
    click.echo(f"  {'Subtotal':<27} {dto.subtotal:>20}")
    click.echo(f"  {'Shipping':<27} {dto.shipping_cost:>20}")
    click.echo(f"  {'Tax':<27} {dto.tax:>20}")
    click.echo(f"  {'Order Total':<27} {dto.total:>20}")


def _update_handler() -> UpdateOrderStatusHandler:
    return UpdateOrderStatusHandler(
        order_repo=order_repository(),
        stock_ledger=stock_ledger(),
        reservations=reservation_manager(),
    )


@click.command("create")
@click.option("--user", "user_id", required=True, help="User placing the order.")
@click.option("--items", required=True, help="Items as 'ProductID:Qty,ProductID:Qty'.")
def order_create(user_id: str, items: str) -> None:
    """Create a PENDING order (reserves stock for every item)."""
    specs = _parse_items(items)

    handler = CreateOrderHandler(
        order_repo=order_repository(),
        product_catalog=product_catalog(),
        reservations=reservation_manager(),
        pricing=pricing_policy(),
        hold_ttl=get_settings().order_hold_ttl,
    )

    try:
        dto = handler.handle(user_id=user_id, item_specs=specs)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order(dto)


@click.command("show")
@click.option("--id", "order_id", type=int, default=None, help="Order ID to display.")
@click.option("--number", "order_number", default=None, help="Order number to display.")
def order_show(order_id: int | None, order_number: str | None) -> None:
    """Show details of an existing order."""
    if (order_id is None) == (order_number is None):
        raise click.UsageError("Pass exactly one of --id or --number")

    handler = ShowOrderHandler(order_repo=order_repository())

    try:
        if order_id is not None:
            dto = handler.handle(order_id)
        else:
            dto = handler.handle_by_number(order_number)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order(dto)


@click.command("list")
@click.option("--user", "user_id", required=True, help="User whose orders to list.")
def order_list(user_id: str) -> None:
    """List a user's orders."""
    orders = ListUserOrdersHandler(order_repo=order_repository()).handle(user_id)

    if not orders:
        click.echo("No orders found.")
        return

    click.echo(f"{'ID':<6} {'Number':<14} {'Status':<12} {'Payment':<12} {'Total':>10}")
    click.echo("-" * 58)
    for dto in orders:
        click.echo(
            f"{dto.id:<6} {dto.order_number:<14} {dto.status:<12} "
            f"{dto.payment_status:<12} {dto.total:>10}"
        )


@click.command("confirm")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to confirm.")
def order_confirm(order_id: int) -> None:
    """Confirm a pending order (deducts stock, consumes its holds)."""
    try:
        _update_handler().handle(order_id, OrderStatus.CONFIRMED)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{order_id} confirmed; stock deducted.")


@click.command("status")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to update.")
@click.option("--status", "new_status", required=True, type=click.Choice(_ORDER_STATUSES))
@click.option("--payment-status", default=None, type=click.Choice(_PAYMENT_STATUSES))
@click.option("--tracking", "tracking_number", default=None, help="Tracking number.")
def order_status(
    order_id: int,
    new_status: str,
    payment_status: str | None,
    tracking_number: str | None,
) -> None:
    """Move an order forward in its lifecycle."""
    try:
        dto = _update_handler().handle(
            order_id,
            OrderStatus(new_status),
            payment_status=PaymentStatus(payment_status) if payment_status else None,
            tracking_number=tracking_number,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{order_id} is now {dto.status} (payment={dto.payment_status}).")


@click.command("cancel")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to cancel.")
def order_cancel(order_id: int) -> None:
    """Cancel a pending order (releases its holds)."""
    handler = CancelOrderHandler(
        order_repo=order_repository(),
        reservations=reservation_manager(),
    )

    try:
        handler.handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{order_id} cancelled.")
