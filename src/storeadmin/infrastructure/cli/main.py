import logging

import click

from storeadmin.infrastructure import bootstrap
from storeadmin.infrastructure.cli.inventory_commands import inventory_show
from storeadmin.infrastructure.cli.order_commands import (
    order_check_stock,
    order_create,
    order_edit,
    order_payment,
    order_show,
    order_status,
)
from storeadmin.infrastructure.cli.product_commands import (
    product_add,
    product_add_variant,
    product_list,
    product_set_stock,
    product_update,
)


@click.group()
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False),
    envvar="STOREADMIN_DATA_DIR",
    default=None,
    help="Directory holding the JSON data files.",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
)
def cli(data_dir: str | None, log_level: str) -> None:
    """storeadmin: store back office for catalog, stock and orders"""
    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    bootstrap.configure(data_dir)


@cli.group()
def order() -> None:
    """Manage orders."""


@cli.group()
def product() -> None:
    """Manage products."""


@cli.group()
def inventory() -> None:
    """Inspect stock levels."""


# Register subcommands
order.add_command(order_check_stock)
order.add_command(order_create)
order.add_command(order_edit)
order.add_command(order_payment)
order.add_command(order_show)
order.add_command(order_status)
product.add_command(product_add)
product.add_command(product_add_variant)
product.add_command(product_list)
product.add_command(product_set_stock)
product.add_command(product_update)
inventory.add_command(inventory_show)
