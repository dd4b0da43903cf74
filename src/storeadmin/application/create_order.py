"""Application service: Create Order use case.

Orchestrates the flow between repositories and the domain model:

1. Resolve the customer by id, or by email (creating one if needed).
2. Resolve each product and build line items with *current* prices,
   SKUs and images (snapshot), pinned to the chosen variant.
3. Persist the order as ``pending`` and return it straight away.
4. Hand a ``ValidateNewOrderTask`` to the dispatcher, which validates
   stock, settles the status and deducts stock outside the request.

Unknown or inactive variants do not reject the order here: stock
validation reports them as unavailable.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from storeadmin.application.dto import (
    CustomerSpec,
    OrderDTO,
    OrderItemSpec,
    order_to_dto,
)
from storeadmin.application.validate_new_order import ValidateNewOrderTask
from storeadmin.domain.exceptions import (
    CustomerNotFoundError,
    ProductNotFoundError,
    ValidationError,
)
from storeadmin.domain.model.customer import Customer
from storeadmin.domain.model.identifiers import new_id, require_valid_id
from storeadmin.domain.model.order import Order, OrderLineItem, ShippingAddress
from storeadmin.domain.model.value_objects import AttributeSelection, Quantity
from storeadmin.domain.repository.customer_repository import CustomerRepository
from storeadmin.domain.repository.order_repository import OrderRepository
from storeadmin.domain.repository.product_repository import ProductRepository

logger = logging.getLogger(__name__)

Dispatcher = Callable[[ValidateNewOrderTask], object]


def run_inline(task: ValidateNewOrderTask) -> None:
    task()


class CreateOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        product_repo: ProductRepository,
        customer_repo: CustomerRepository,
        dispatch: Dispatcher = run_inline,
    ) -> None:
        self._order_repo = order_repo
        self._product_repo = product_repo
        self._customer_repo = customer_repo
        self._dispatch = dispatch

    def handle(
        self,
        customer: CustomerSpec,
        item_specs: list[OrderItemSpec],
        shipping_address: ShippingAddress | None = None,
        payment_method: str | None = None,
        delivery_note: str = "",
    ) -> OrderDTO:
        if not item_specs:
            raise ValidationError("Order items are required")

        buyer = self._resolve_customer(customer)
        line_items = [self._line_item(spec) for spec in item_specs]

        order = Order.create(
            new_id(),
            line_items,
            customer_id=buyer.id,
            customer_name=buyer.full_name,
            shipping_address=shipping_address,
            payment_method=payment_method,
            delivery_note=delivery_note,
        )
        self._order_repo.save(order)
        logger.info(
            "Order %s created for %s (%d item(s), total %s)",
            order.order_number,
            buyer.email,
            len(order.items),
            order.total_amount,
        )

        dto = order_to_dto(order)
        self._dispatch(
            ValidateNewOrderTask(order.id, self._order_repo, self._product_repo)
        )
        return dto

    # --- Helpers --------------------------------------------------------------

    def _resolve_customer(self, spec: CustomerSpec) -> Customer:
        if spec.customer_id:
            customer_id = require_valid_id(spec.customer_id, "customer")
            customer = self._customer_repo.get_by_id(customer_id)
            if customer is None:
                raise CustomerNotFoundError(customer_id)
            return customer

        if spec.email:
            customer = self._customer_repo.get_by_email(spec.email)
            if customer is None:
                customer = Customer.create(
                    first_name=spec.first_name or "",
                    last_name=spec.last_name or "",
                    email=spec.email,
                    phone=spec.phone,
                )
                self._customer_repo.save(customer)
                logger.info("Created customer %s", customer.email)
            return customer

        raise ValidationError("Customer ID or customer email is required")

    def _line_item(self, spec: OrderItemSpec) -> OrderLineItem:
        product_id = require_valid_id(spec.product_id, "product")
        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)

        quantity = Quantity(spec.quantity)
        selection = AttributeSelection.of(spec.selected_attributes)

        variant = None
        if product.has_variants:
            if spec.variant_id:
                variant = product.find_variant_by_id(
                    spec.variant_id, include_inactive=True
                )
            elif selection:
                variant = product.find_variant_by_attributes(
                    selection, include_inactive=True
                )

        image = product.images[0] if product.images else None
        if variant is not None and variant.images:
            image = variant.images[0]

        return OrderLineItem(
            product_id=product.id,
            name=product.name,
            quantity=quantity,
            unit_price=product.price_for(variant),
            sku=product.sku_for(variant),
            image=image,
            selected_attributes=(
                variant.attributes if variant is not None else selection or None
            ),
            is_variant_product=product.has_variants,
            variant_id=variant.id if variant is not None else spec.variant_id,
        )
