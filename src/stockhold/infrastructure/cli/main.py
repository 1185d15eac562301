import click

from stockhold.infrastructure.cli.order_commands import (
    order_cancel,
    order_confirm,
    order_create,
    order_list,
    order_show,
    order_status,
)
from stockhold.infrastructure.cli.product_commands import product_add, product_list
from stockhold.infrastructure.cli.reservation_commands import (
    reservation_list,
    reservation_release,
    reservation_reserve,
    sweep,
)
from stockhold.infrastructure.cli.stock_commands import stock_set, stock_show
from stockhold.infrastructure.config import get_settings
from stockhold.infrastructure.logging import configure_logging


@click.group()
def cli() -> None:
    """stockhold: stock reservations and order lifecycle"""
    settings = get_settings()
    configure_logging(settings.log_level, settings.json_logs)


@cli.group()
def order() -> None:
    """Manage orders."""


@cli.group()
def product() -> None:
    """Manage catalog products."""


@cli.group()
def stock() -> None:
    """Manage on-hand stock."""


@cli.group()
def reservation() -> None:
    """Manage stock reservations."""


# Register subcommands
order.add_command(order_cancel)
order.add_command(order_confirm)
order.add_command(order_create)
order.add_command(order_list)
order.add_command(order_show)
order.add_command(order_status)
product.add_command(product_add)
product.add_command(product_list)
stock.add_command(stock_set)
stock.add_command(stock_show)
reservation.add_command(reservation_list)
reservation.add_command(reservation_release)
reservation.add_command(reservation_reserve)
cli.add_command(sweep)
