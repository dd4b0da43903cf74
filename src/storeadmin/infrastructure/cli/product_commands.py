"""CLI commands for the Product aggregate."""

from __future__ import annotations

import click

from storeadmin.application.add_product import AddProductHandler
from storeadmin.application.add_variant import AddVariantHandler
from storeadmin.application.dto import StockUpdateSpec
from storeadmin.application.set_stock import SetStockHandler
from storeadmin.application.update_product import UpdateProductHandler
from storeadmin.domain.exceptions import DomainException
from storeadmin.infrastructure.bootstrap import product_repository


def _parse_definitions(raw: tuple[str, ...]) -> dict[str, list[str]]:
    """Parse ('Color=Red,Blue', 'Size=S,M') into {'Color': ['Red', 'Blue'], ...}."""
    definitions: dict[str, list[str]] = {}
    for entry in raw:
        if "=" not in entry:
            raise click.BadParameter(
                f"Invalid attribute '{entry}'. Expected 'Name=Value,Value'."
            )
        name, values = entry.split("=", 1)
        definitions[name.strip()] = [v.strip() for v in values.split(",") if v.strip()]
    return definitions


def _parse_pairs(raw: tuple[str, ...]) -> dict[str, str]:
    """Parse ('Color=Red', 'Size=M') into {'Color': 'Red', 'Size': 'M'}."""
    pairs: dict[str, str] = {}
    for entry in raw:
        if "=" not in entry:
            raise click.BadParameter(f"Invalid attribute '{entry}'. Expected 'Name=Value'.")
        name, value = entry.split("=", 1)
        pairs[name.strip()] = value.strip()
    return pairs


@click.command("add")
@click.option("--name", required=True, help="Product name.")
@click.option("--price", required=True, help="Price (e.g. 15.00).")
@click.option("--sku", default=None, help="Base SKU.")
@click.option("--stock", default=0, type=int, help="Stock of a simple product.")
@click.option("--slug", default=None, help="URL slug (derived from the name if omitted).")
@click.option(
    "--attribute", "attributes", multiple=True,
    help="Variant attribute as 'Name=Value,Value'. Repeat for each attribute.",
)
def product_add(
    name: str, price: str, sku: str | None, stock: int, slug: str | None,
    attributes: tuple[str, ...],
) -> None:
    """Add a new product to the catalog."""
    handler = AddProductHandler(product_repo=product_repository())

    try:
        product = handler.handle(
            name=name,
            price=price,
            sku=sku,
            stock_quantity=stock,
            attribute_definitions=_parse_definitions(attributes),
            slug=slug,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product {product.id} '{product.name}' added at {product.price}")


@click.command("add-variant")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--attr", "attrs", multiple=True, required=True, help="'Name=Value', repeatable.")
@click.option("--stock", default=0, type=int, help="Stock of this variant.")
@click.option("--sku", default=None, help="Variant SKU.")
@click.option("--price", default=None, help="Variant price (defaults to the product price).")
@click.option("--inactive", is_flag=True, default=False, help="Create the variant switched off.")
def product_add_variant(
    product_id: str, attrs: tuple[str, ...], stock: int, sku: str | None,
    price: str | None, inactive: bool,
) -> None:
    """Add a variant (one full attribute combination) to a product."""
    handler = AddVariantHandler(product_repo=product_repository())

    try:
        variant = handler.handle(
            product_id,
            _parse_pairs(attrs),
            stock,
            sku=sku,
            price=price,
            is_active=not inactive,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Variant {variant.id} [{variant.attributes}] added with stock {stock}")


@click.command("list")
def product_list() -> None:
    """List all products in the catalog."""
    repo = product_repository()
    products = repo.list_all()

    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<25} {'Name':<20} {'Price':>10} {'Stock':>7} {'Variants':>9}")
    click.echo("-" * 75)
    for p in products:
        click.echo(
            f"{p.id:<25} {p.name:<20} {str(p.price):>10} "
            f"{p.stock_quantity:>7} {len(p.variants):>9}"
        )


@click.command("update")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--price", required=True, help="New price (e.g. 29.99).")
def product_update(product_id: str, price: str) -> None:
    """Update a product's price."""
    handler = UpdateProductHandler(product_repo=product_repository())

    try:
        handler.handle(product_id=product_id, new_price=price)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product {product_id} price updated to ${price}")


@click.command("set-stock")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--variant", "variant_id", default=None, help="Variant ID (variant products).")
@click.option("--quantity", type=int, default=None, help="New stock level.")
@click.option("--price", default=None, help="New price.")
@click.option("--sku", default=None, help="New SKU.")
def product_set_stock(
    product_id: str, variant_id: str | None, quantity: int | None,
    price: str | None, sku: str | None,
) -> None:
    """Set stock, price or SKU of a product or one of its variants."""
    handler = SetStockHandler(product_repo=product_repository())

    try:
        result = handler.handle([
            StockUpdateSpec(
                product_id=product_id,
                variant_id=variant_id,
                stock_quantity=quantity,
                price=price,
                sku=sku,
            )
        ])
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if result.errors:
        raise click.ClickException(result.errors[0].error)
    click.echo(f"Product {product_id} updated.")
