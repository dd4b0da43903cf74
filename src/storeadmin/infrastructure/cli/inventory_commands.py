"""CLI commands for inventory inspection."""

from __future__ import annotations

import click

from storeadmin.application.show_inventory import ShowInventoryHandler
from storeadmin.infrastructure.bootstrap import product_repository


@click.command("show")
def inventory_show() -> None:
    """Show current stock levels per product and variant."""
    handler = ShowInventoryHandler(product_repo=product_repository())
    lines = handler.handle()

    if not lines:
        click.echo("No products found.")
        return

    click.echo(f"{'Product':<20} {'Variant':<24} {'SKU':<12} {'Stock':>7}")
    click.echo("-" * 66)
    for line in lines:
        name = line.product_name if not line.variant else ""
        variant = line.variant if line.active else f"{line.variant} (inactive)"
        click.echo(f"{name:<20} {variant:<24} {line.sku:<12} {line.stock:>7}")
