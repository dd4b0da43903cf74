"""CLI commands for the Order aggregate."""

from __future__ import annotations

import json

import click

from storeadmin.application.check_order_stock import CheckOrderStockHandler
from storeadmin.application.create_order import CreateOrderHandler
from storeadmin.application.dto import (
    AddressSpec,
    CustomerSpec,
    EditItemSpec,
    OrderDTO,
    OrderEditSpec,
    OrderItemSpec,
)
from storeadmin.application.edit_order import EditOrderHandler
from storeadmin.application.show_order import ShowOrderHandler
from storeadmin.application.update_order_status import UpdateOrderStatusHandler
from storeadmin.application.update_payment_status import UpdatePaymentStatusHandler
from storeadmin.domain.exceptions import DomainException, StockDeductionError
from storeadmin.domain.model.order import OrderStatus, PaymentStatus
from storeadmin.domain.service.stock_validator import generate_stock_validation_message
from storeadmin.infrastructure.bootstrap import (
    customer_repository,
    dispatcher,
    order_repository,
    product_repository,
)


def _parse_item(raw: str) -> OrderItemSpec:
    """Parse 'ID:QTY', 'ID:QTY:Color=Red;Size=L' or 'ID:QTY:VARIANT_ID'."""
    parts = raw.strip().split(":", 2)
    if len(parts) < 2:
        raise click.BadParameter(
            f"Invalid item format '{raw}'. Expected 'ProductId:Quantity[:Selection]'."
        )
    product_id, qty_str = parts[0].strip(), parts[1].strip()
    try:
        qty = int(qty_str)
    except ValueError:
        raise click.BadParameter(f"Invalid quantity '{qty_str}' for product '{product_id}'.")

    selected, variant_id = None, None
    if len(parts) == 3 and parts[2].strip():
        selection = parts[2].strip()
        if "=" in selection:
            selected = {}
            for pair in selection.split(";"):
                name, _, value = pair.partition("=")
                selected[name.strip()] = value.strip()
        else:
            variant_id = selection
    return OrderItemSpec(
        product_id=product_id,
        quantity=qty,
        selected_attributes=selected,
        variant_id=variant_id,
    )


def _load_edit_spec(path: str) -> OrderEditSpec:
    """Read an order edit payload from a JSON file."""
    with open(path, encoding="utf-8") as fh:
        try:
            raw = json.load(fh)
        except ValueError as exc:
            raise click.BadParameter(f"Invalid JSON in {path}: {exc}")

    address = raw.get("shipping_address")
    items = raw.get("items")
    try:
        return OrderEditSpec(
            shipping_address=AddressSpec(**address) if address is not None else None,
            payment_method=raw.get("payment_method", ""),
            items=[EditItemSpec(**i) for i in items] if items is not None else None,
            payment_status=raw.get("payment_status"),
            status=raw.get("status"),
            delivery_note=raw.get("delivery_note", ""),
        )
    except TypeError as exc:
        raise click.BadParameter(f"Unexpected field in {path}: {exc}")


def _display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order {dto.order_number}  ({dto.id})")
    click.echo(f"Status:   {dto.status}  - {dto.status_reason}")
    click.echo(f"Payment:  {dto.payment_status}")
    click.echo(f"Customer: {dto.customer_name}")
    click.echo(f"Created:  {dto.created_at}")
    click.echo()
    click.echo(f"  {'Product':<20} {'SKU':<12} {'Qty':>5} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*60}")
    for item in dto.items:
        click.echo(
            f"  {item.name:<20} {item.sku:<12} {item.quantity:>5} "
            f"{item.unit_price:>10} {item.line_total:>10}"
        )
        if item.attributes:
            click.echo(f"    {item.attributes}")
    click.echo(f"  {'-'*60}")
    click.echo(f"  {'Order Total':<40} {dto.total:>20}")

    sv = dto.stock_validation
    if sv is None or not sv.is_validated:
        click.echo()
        click.echo("Stock: not validated yet")
        return

    click.echo()
    deducted = "deducted" if sv.stock_deducted else "not deducted"
    click.echo(f"Stock: {sv.validation_result} on {sv.validation_date} ({deducted})")
    for label, lines in (
        ("partially available", sv.partially_available),
        ("unavailable", sv.unavailable),
    ):
        for line in lines:
            sku = f" [{line.variant_sku}]" if line.variant_sku else ""
            click.echo(
                f"  {label}: {line.name}{sku} requested {line.requested}, "
                f"available {line.available}, short {line.shortfall}"
            )


@click.command("create")
@click.option("--customer-id", default=None, help="Existing customer ID.")
@click.option("--email", default=None, help="Customer email (created if unknown).")
@click.option("--first-name", default=None, help="First name of a new customer.")
@click.option("--last-name", default=None, help="Last name of a new customer.")
@click.option(
    "--item", "items", multiple=True, required=True,
    help="Item as 'ProductId:Qty[:Color=Red;Size=L]' or 'ProductId:Qty:VariantId'.",
)
@click.option("--payment-method", default=None, help="Payment method.")
@click.option("--note", default="", help="Delivery note.")
def order_create(
    customer_id: str | None, email: str | None, first_name: str | None,
    last_name: str | None, items: tuple[str, ...], payment_method: str | None,
    note: str,
) -> None:
    """Create an order; stock is validated right after it is saved."""
    specs = [_parse_item(raw) for raw in items]

    handler = CreateOrderHandler(
        order_repo=order_repository(),
        product_repo=product_repository(),
        customer_repo=customer_repository(),
        dispatch=dispatcher(),
    )

    try:
        dto = handler.handle(
            CustomerSpec(
                customer_id=customer_id,
                email=email,
                first_name=first_name,
                last_name=last_name,
            ),
            specs,
            payment_method=payment_method,
            delivery_note=note,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {dto.order_number} created  (id={dto.id}, status={dto.status})")
    click.echo(f"Customer: {dto.customer_name}")
    click.echo(f"Total:    {dto.total}")


@click.command("show")
@click.option("--id", "order_id", required=True, help="Order ID.")
def order_show(order_id: str) -> None:
    """Show order details with its stock validation."""
    handler = ShowOrderHandler(
        order_repo=order_repository(),
        product_repo=product_repository(),
    )

    try:
        dto = handler.handle(order_id=order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order(dto)


@click.command("edit")
@click.option("--id", "order_id", required=True, help="Order ID.")
@click.option(
    "--file", "payload", required=True, type=click.Path(exists=True, dir_okay=False),
    help="JSON file with shipping_address, payment_method, items and optional "
         "payment_status, status and delivery_note.",
)
def order_edit(order_id: str, payload: str) -> None:
    """Replace an order's items, address and payment fields."""
    spec = _load_edit_spec(payload)
    handler = EditOrderHandler(
        order_repo=order_repository(),
        product_repo=product_repository(),
    )

    try:
        result = handler.handle(order_id, spec)
    except StockDeductionError as exc:
        raise click.ClickException(f"{exc} ({'; '.join(exc.errors)})")
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(result.message)
    click.echo()
    _display_order(result.order)


@click.command("status")
@click.option("--id", "order_id", required=True, help="Order ID.")
@click.option(
    "--to", "new_status", required=True,
    type=click.Choice([s.value for s in OrderStatus]),
    help="New order status.",
)
def order_status(order_id: str, new_status: str) -> None:
    """Change an order's status, adjusting stock where the status requires it."""
    handler = UpdateOrderStatusHandler(
        order_repo=order_repository(),
        product_repo=product_repository(),
    )

    try:
        dto = handler.handle(order_id, new_status)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {dto.order_number} is {dto.status}: {dto.status_reason}")


@click.command("payment")
@click.option("--id", "order_id", required=True, help="Order ID.")
@click.option(
    "--to", "payment_status", required=True,
    type=click.Choice([s.value for s in PaymentStatus]),
    help="New payment status.",
)
def order_payment(order_id: str, payment_status: str) -> None:
    """Change an order's payment status."""
    handler = UpdatePaymentStatusHandler(order_repo=order_repository())

    try:
        dto = handler.handle(order_id, payment_status)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {dto.order_number} payment is {dto.payment_status}")


@click.command("check-stock")
@click.option("--id", "order_id", required=True, help="Order ID.")
def order_check_stock(order_id: str) -> None:
    """Check an order's items against current stock without changing anything."""
    handler = CheckOrderStockHandler(
        order_repo=order_repository(),
        product_repo=product_repository(),
    )

    try:
        result = handler.handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(generate_stock_validation_message(result))
    for item in result.available_items:
        click.echo(f"  ok: {item.name} x{item.requested_quantity} ({item.available_quantity} in stock)")
    for item in result.partially_available_items + result.unavailable_items:
        click.echo(
            f"  short: {item.name} x{item.requested_quantity} "
            f"({item.available_quantity} in stock, short {item.shortfall})"
        )
