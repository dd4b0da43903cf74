"""Order aggregate, the core of the domain.

The Order is an aggregate root that owns its line items.  Status is partly
set directly by an admin and partly derived from stock validation by the
reconciliation service; the last validation is kept on the order as an
audit snapshot.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum

from storeadmin.domain.exceptions import ValidationError
from storeadmin.domain.model.stock import (
    AvailableItem,
    ShortfallItem,
    StockValidationResult,
    ValidationItem,
    ValidationOutcome,
)
from storeadmin.domain.model.value_objects import AttributeSelection, Money, Quantity


class OrderStatus(Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    ON_HOLD = "on-hold"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"
    FAILED = "failed"


# Statuses in which the order's items have been deducted from stock.
STOCK_COMMITTED_STATUSES = frozenset(
    {OrderStatus.PROCESSING, OrderStatus.COMPLETED, OrderStatus.DELIVERED}
)

# Statuses for which an edit re-derives the status from stock validation.
DERIVABLE_STATUSES = frozenset({OrderStatus.PENDING, OrderStatus.PROCESSING})


class PaymentStatus(Enum):
    UNPAID = "unpaid"
    PAID = "paid"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class OrderLineItem:
    """Snapshot of a product line taken when the order is committed.

    Name, SKU, price and image are never refreshed from the live product
    (price lock preserved).
    """

    product_id: str
    name: str
    quantity: Quantity
    unit_price: Money  # locked at order time
    sku: str = ""
    image: str | None = None
    selected_attributes: AttributeSelection | None = None
    is_variant_product: bool = False
    variant_id: str | None = None

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity.value

    def to_validation_item(self) -> ValidationItem:
        return ValidationItem(
            product_id=self.product_id,
            name=self.name,
            requested_quantity=self.quantity.value,
            price=self.unit_price,
            variant_id=self.variant_id,
            selected_attributes=self.selected_attributes or None,
        )


_PHONE_RE = re.compile(r"^01\d{9}$")
_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


@dataclass(frozen=True)
class ShippingAddress:
    full_name: str
    phone: str
    street: str
    city: str
    district: str
    postal_code: str
    country: str
    email: str | None = None
    state: str | None = None

    def validate(self) -> None:
        required = {
            "full_name": self.full_name,
            "phone": self.phone,
            "street": self.street,
            "city": self.city,
            "district": self.district,
            "postal_code": self.postal_code,
            "country": self.country,
        }
        missing = [name for name, value in required.items() if not value]
        if missing:
            raise ValidationError(
                f"Incomplete shipping address, missing: {', '.join(missing)}"
            )
        if not _PHONE_RE.match(self.phone):
            raise ValidationError(
                "Invalid phone number in shipping address. "
                "Must be 11 digits starting with 01."
            )
        if self.email and not _EMAIL_RE.match(self.email):
            raise ValidationError("Invalid email format in shipping address.")


@dataclass
class StockValidationSnapshot:
    """Point-in-time stock check stored on the order for audit.

    Historical data: never re-derived on read.
    """

    is_validated: bool = False
    validation_date: datetime | None = None
    validation_result: ValidationOutcome | None = None
    available_items: list[AvailableItem] = field(default_factory=list)
    partially_available_items: list[ShortfallItem] = field(default_factory=list)
    unavailable_items: list[ShortfallItem] = field(default_factory=list)
    stock_deducted: bool = False
    stock_deducted_at: datetime | None = None

    def all_items(self) -> list[AvailableItem | ShortfallItem]:
        return [
            *self.available_items,
            *self.partially_available_items,
            *self.unavailable_items,
        ]


@dataclass
class Order:
    """Aggregate root for customer orders.

    Use the ``Order.create()`` factory for new orders.  The ``__init__`` is
    intentionally simple so the repository can reconstitute persisted
    orders without re-validating.
    """

    id: str
    order_number: str
    items: list[OrderLineItem]
    status: OrderStatus = OrderStatus.PENDING
    status_reason: str = ""
    customer_id: str | None = None
    customer_name: str = ""
    shipping_address: ShippingAddress | None = None
    payment_method: str = "pending"
    payment_status: PaymentStatus = PaymentStatus.UNPAID
    is_paid: bool = False
    paid_at: datetime | None = None
    is_delivered: bool = False
    delivered_at: datetime | None = None
    delivery_note: str = ""
    stock_validation: StockValidationSnapshot = field(
        default_factory=StockValidationSnapshot
    )
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(
        order_id: str,
        items: list[OrderLineItem],
        *,
        customer_id: str | None = None,
        customer_name: str = "",
        shipping_address: ShippingAddress | None = None,
        payment_method: str | None = None,
        delivery_note: str = "",
    ) -> Order:
        """Create a pending order awaiting stock validation."""
        if not items:
            raise ValidationError("Order must contain at least one item")

        created_at = utc_now()
        return Order(
            id=order_id,
            order_number=generate_order_number(order_id, created_at),
            items=list(items),
            status=OrderStatus.PENDING,
            status_reason="Order created, awaiting stock validation.",
            customer_id=customer_id,
            customer_name=customer_name,
            shipping_address=shipping_address,
            payment_method=payment_method or "pending",
            delivery_note=delivery_note,
            created_at=created_at,
            updated_at=created_at,
        )

    # --- Mutations ------------------------------------------------------------

    def replace_items(self, items: list[OrderLineItem]) -> None:
        """Swap the whole item set; ``total_amount`` follows automatically."""
        self.items = list(items)
        self.touch()

    def change_status(self, status: OrderStatus, reason: str | None = None) -> None:
        """Set the status, applying the delivered side effects.

        Moving away from ``delivered`` keeps ``is_delivered`` and
        ``delivered_at`` as a historical marker.
        """
        self.status = status
        if reason is not None:
            self.status_reason = reason
        if status is OrderStatus.DELIVERED:
            self.is_delivered = True
            self.delivered_at = utc_now()
        self.touch()

    def change_payment_status(self, payment_status: PaymentStatus) -> None:
        if payment_status is self.payment_status:
            return
        self.payment_status = payment_status
        if payment_status is PaymentStatus.PAID:
            self.is_paid = True
            self.paid_at = utc_now()
        else:
            self.is_paid = False
            self.paid_at = None
        self.touch()

    def record_validation(self, result: StockValidationResult) -> None:
        """Overwrite the audit snapshot with *result*.

        Whether stock is currently deducted is tracked separately and
        carried over unchanged.
        """
        self.stock_validation = StockValidationSnapshot(
            is_validated=True,
            validation_date=utc_now(),
            validation_result=result.validation_result,
            available_items=list(result.available_items),
            partially_available_items=list(result.partially_available_items),
            unavailable_items=list(result.unavailable_items),
            stock_deducted=self.stock_validation.stock_deducted,
            stock_deducted_at=self.stock_validation.stock_deducted_at,
        )
        self.touch()

    def mark_stock_deducted(self) -> None:
        self.stock_validation = replace(
            self.stock_validation, stock_deducted=True, stock_deducted_at=utc_now()
        )
        self.touch()

    def mark_stock_restored(self) -> None:
        self.stock_validation = replace(
            self.stock_validation, stock_deducted=False, stock_deducted_at=None
        )
        self.touch()

    def touch(self) -> None:
        self.updated_at = utc_now()

    # --- Computed properties --------------------------------------------------

    @property
    def total_amount(self) -> Money:
        return Money.total(item.line_total for item in self.items)

    @property
    def has_committed_stock(self) -> bool:
        return self.status in STOCK_COMMITTED_STATUSES

    def validation_items(self) -> list[ValidationItem]:
        return [item.to_validation_item() for item in self.items]


_BASE36 = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"


def generate_order_number(order_id: str, created_at: datetime) -> str:
    """Human-readable order number: base-36 creation time + id suffix."""
    seconds = int(created_at.timestamp())
    digits = ""
    while seconds:
        seconds, rem = divmod(seconds, 36)
        digits = _BASE36[rem] + digits
    return f"{digits or '0'}{order_id[-4:].upper()}"
