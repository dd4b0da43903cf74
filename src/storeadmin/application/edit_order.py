"""Application service: Edit Order use case (full replace).

Flow:

1. Validate the payload (address, payment/status values, item structure).
2. If the order had committed stock (processing, completed, delivered),
   restore the *original* items to stock first.
3. Validate the new item set.  The status is re-derived only when the
   requested status is pending or processing; any other status the admin
   sends is kept as-is.
4. Replace address, note, payment fields and items.  Prices come from the
   payload and are re-summed into the total; products are not re-read.
5. If the final status is processing, deduct the new items.  When that
   fails, re-deduct the original items (best effort, not a transaction)
   and raise ``StockDeductionError``.

Nothing guards against a concurrent edit of the same order: the last
save wins.
"""

from __future__ import annotations

import logging

from storeadmin.application.dto import (
    AddressSpec,
    EditItemSpec,
    EditOrderResult,
    OrderEditSpec,
    order_to_dto,
)
from storeadmin.domain.exceptions import (
    OrderNotFoundError,
    StockDeductionError,
    ValidationError,
)
from storeadmin.domain.model.identifiers import require_valid_id
from storeadmin.domain.model.order import (
    DERIVABLE_STATUSES,
    OrderLineItem,
    OrderStatus,
    PaymentStatus,
    ShippingAddress,
)
from storeadmin.domain.model.stock import ValidationItem
from storeadmin.domain.model.value_objects import AttributeSelection, Money, Quantity
from storeadmin.domain.repository.order_repository import OrderRepository
from storeadmin.domain.repository.product_repository import ProductRepository
from storeadmin.domain.service.order_reconciliation import (
    OrderReconciliationService,
    derive_status,
)
from storeadmin.domain.service.stock_validator import generate_stock_validation_message

logger = logging.getLogger(__name__)


class EditOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        product_repo: ProductRepository,
    ) -> None:
        self._order_repo = order_repo
        self._product_repo = product_repo

    def handle(self, order_id: str, spec: OrderEditSpec) -> EditOrderResult:
        order_id = require_valid_id(order_id, "order")
        address, payment_status, requested_status, new_items = self._parse(spec)

        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise OrderNotFoundError(order_id)

        svc = OrderReconciliationService(self._product_repo)
        original_items = order.validation_items()
        restored = order.has_committed_stock
        if restored:
            outcome = svc.restore(order)
            if not outcome.success:
                logger.warning(
                    "Order %s: restoring original items reported %s",
                    order.order_number,
                    outcome.errors,
                )

        order.replace_items(new_items)
        result = svc.validate(order, derive=False)

        final_status, reason = requested_status, ""
        if requested_status in DERIVABLE_STATUSES:
            final_status, reason = derive_status(result)

        order.shipping_address = address
        order.delivery_note = spec.delivery_note or ""
        order.payment_method = spec.payment_method
        order.change_payment_status(payment_status)
        order.change_status(final_status, reason)

        if final_status is OrderStatus.PROCESSING:
            outcome = svc.deduct(order)
            if not outcome.success:
                self._compensate(svc, order.order_number, restored, original_items)
                raise StockDeductionError(
                    f"Failed to deduct stock for updated order {order.order_number}; "
                    f"stock may be partially adjusted",
                    outcome.errors,
                )

        self._order_repo.save(order)
        logger.info(
            "Order %s edited: %s (%s)",
            order.order_number,
            final_status.value,
            result.validation_result.value,
        )

        return EditOrderResult(
            order=order_to_dto(order),
            stock_validation=result,
            message=reason or generate_stock_validation_message(result),
        )

    # --- Helpers --------------------------------------------------------------

    @staticmethod
    def _compensate(
        svc: OrderReconciliationService,
        order_number: str,
        restored: bool,
        original_items: list[ValidationItem],
    ) -> None:
        if not restored:
            return
        logger.warning(
            "Order %s: re-deducting original items after failed deduction",
            order_number,
        )
        outcome = svc.deduct_items(original_items)
        if not outcome.success:
            logger.error(
                "Order %s: compensation incomplete: %s", order_number, outcome.errors
            )

    @staticmethod
    def _parse(
        spec: OrderEditSpec,
    ) -> tuple[ShippingAddress, PaymentStatus, OrderStatus, list[OrderLineItem]]:
        if spec.shipping_address is None or not spec.payment_method or spec.items is None:
            raise ValidationError(
                "Missing required fields for update. Ensure shipping address, "
                "payment method, and order items are provided."
            )

        address = _to_address(spec.shipping_address)
        address.validate()

        try:
            payment_status = PaymentStatus(spec.payment_status or "unpaid")
        except ValueError:
            raise ValidationError(
                "Invalid payment status. Must be one of: "
                + ", ".join(s.value for s in PaymentStatus)
            )
        try:
            status = OrderStatus(spec.status or "pending")
        except ValueError:
            raise ValidationError(
                "Invalid order status. Must be one of: "
                + ", ".join(s.value for s in OrderStatus)
            )

        return address, payment_status, status, [_to_line_item(i) for i in spec.items]


def _to_address(spec: AddressSpec) -> ShippingAddress:
    return ShippingAddress(
        full_name=spec.full_name,
        phone=spec.phone,
        street=spec.street,
        city=spec.city,
        district=spec.district,
        postal_code=spec.postal_code,
        country=spec.country,
        email=spec.email or None,
        state=spec.state or None,
    )


def _to_line_item(spec: EditItemSpec) -> OrderLineItem:
    product_id = require_valid_id(spec.product_id, "product")
    if not spec.name:
        raise ValidationError("Each order item needs a name")
    if spec.is_variant_product and not spec.variant_id:
        raise ValidationError("Variant products must have a variantId.")
    selection = AttributeSelection.of(spec.selected_attributes)
    return OrderLineItem(
        product_id=product_id,
        name=spec.name,
        quantity=Quantity(spec.quantity),
        unit_price=Money.of(spec.price),
        sku=spec.sku,
        image=spec.image,
        selected_attributes=selection or None,
        is_variant_product=spec.is_variant_product,
        variant_id=spec.variant_id or None,
    )
