"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from storeadmin.domain.model.order import Order
from storeadmin.domain.model.stock import StockValidationResult


# --- Input --------------------------------------------------------------------


@dataclass(frozen=True)
class OrderItemSpec:
    """Input: a product the customer asked for, at current catalog price."""

    product_id: str
    quantity: int
    selected_attributes: dict[str, str] | None = None
    variant_id: str | None = None


@dataclass(frozen=True)
class CustomerSpec:
    """Input: who the order is for, by existing id or by email."""

    customer_id: str | None = None
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    phone: str = ""


@dataclass(frozen=True)
class EditItemSpec:
    """Input: a line item of an order edit; the admin-supplied price is kept."""

    product_id: str
    name: str
    price: str | int | float | Decimal
    quantity: int
    sku: str = ""
    image: str | None = None
    selected_attributes: dict[str, str] | None = None
    is_variant_product: bool = False
    variant_id: str | None = None


@dataclass(frozen=True)
class AddressSpec:
    full_name: str = ""
    phone: str = ""
    street: str = ""
    city: str = ""
    district: str = ""
    postal_code: str = ""
    country: str = ""
    email: str | None = None
    state: str | None = None


@dataclass(frozen=True)
class OrderEditSpec:
    """Input: full replacement of an order's editable fields."""

    shipping_address: AddressSpec | None
    payment_method: str
    items: list[EditItemSpec] | None
    payment_status: str | None = None  # defaults to unpaid
    status: str | None = None  # defaults to pending
    delivery_note: str = ""


@dataclass(frozen=True)
class StockUpdateSpec:
    """Input: one entry of a bulk stock/price/SKU update."""

    product_id: str
    variant_id: str | None = None
    stock_quantity: int | None = None
    price: str | int | float | Decimal | None = None
    sku: str | None = None


# --- Output -------------------------------------------------------------------


@dataclass(frozen=True)
class OrderLineItemDTO:
    """Output: a single line item as displayed to the user."""

    product_id: str
    name: str
    sku: str
    quantity: int
    unit_price: str  # formatted, e.g. "$15.00"
    line_total: str
    attributes: str = ""
    variant_id: str | None = None


@dataclass(frozen=True)
class ValidationLineDTO:
    name: str
    requested: int
    available: int
    shortfall: int = 0
    variant_id: str | None = None
    variant_sku: str | None = None


@dataclass(frozen=True)
class StockValidationDTO:
    is_validated: bool
    validation_result: str | None
    validation_date: str | None
    stock_deducted: bool
    available: list[ValidationLineDTO] = field(default_factory=list)
    partially_available: list[ValidationLineDTO] = field(default_factory=list)
    unavailable: list[ValidationLineDTO] = field(default_factory=list)


@dataclass(frozen=True)
class OrderDTO:
    """Output: a complete order as displayed to the user."""

    id: str
    order_number: str
    customer_name: str
    status: str
    status_reason: str
    payment_status: str
    items: list[OrderLineItemDTO]
    total: str
    created_at: str
    stock_validation: StockValidationDTO | None = None


@dataclass(frozen=True)
class EditOrderResult:
    order: OrderDTO
    stock_validation: StockValidationResult
    message: str


# --- Mapping ------------------------------------------------------------------


def order_to_dto(
    order: Order, variant_skus: dict[str, str] | None = None
) -> OrderDTO:
    """Map an order; ``variant_skus`` backfills SKUs missing from the snapshot."""
    skus = variant_skus or {}
    snapshot = order.stock_validation

    def line(item, shortfall: int = 0) -> ValidationLineDTO:
        sku = item.variant_sku
        if not sku and item.variant_id:
            sku = skus.get(item.variant_id)
        return ValidationLineDTO(
            name=item.name,
            requested=item.requested_quantity,
            available=item.available_quantity,
            shortfall=shortfall,
            variant_id=item.variant_id,
            variant_sku=sku,
        )

    return OrderDTO(
        id=order.id,
        order_number=order.order_number,
        customer_name=order.customer_name,
        status=order.status.value,
        status_reason=order.status_reason,
        payment_status=order.payment_status.value,
        items=[
            OrderLineItemDTO(
                product_id=item.product_id,
                name=item.name,
                sku=item.sku,
                quantity=item.quantity.value,
                unit_price=str(item.unit_price),
                line_total=str(item.line_total),
                attributes=str(item.selected_attributes or ""),
                variant_id=item.variant_id,
            )
            for item in order.items
        ],
        total=str(order.total_amount),
        created_at=order.created_at.strftime("%Y-%m-%d %H:%M UTC"),
        stock_validation=StockValidationDTO(
            is_validated=snapshot.is_validated,
            validation_result=(
                snapshot.validation_result.value if snapshot.validation_result else None
            ),
            validation_date=(
                snapshot.validation_date.strftime("%Y-%m-%d %H:%M UTC")
                if snapshot.validation_date
                else None
            ),
            stock_deducted=snapshot.stock_deducted,
            available=[line(i) for i in snapshot.available_items],
            partially_available=[
                line(i, i.shortfall) for i in snapshot.partially_available_items
            ],
            unavailable=[line(i, i.shortfall) for i in snapshot.unavailable_items],
        ),
    )
