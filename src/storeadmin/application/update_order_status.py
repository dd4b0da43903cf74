"""Application service: Update Order Status use case.

A direct admin status change, with the stock side effects of the
transition:

- to ``processing``: unless stock is already deducted, validate and
  deduct; anything short of full availability, or a failed deduction,
  parks the order ``on-hold`` with the reason.
- to ``cancelled``: if stock had been deducted, restore it.  A failed
  restore does not block the cancellation; it is noted in the reason.
- ``delivered`` sets the delivery markers.
"""

from __future__ import annotations

import logging

from storeadmin.application.dto import OrderDTO, order_to_dto
from storeadmin.domain.exceptions import OrderNotFoundError, ValidationError
from storeadmin.domain.model.identifiers import require_valid_id
from storeadmin.domain.model.order import Order, OrderStatus
from storeadmin.domain.repository.order_repository import OrderRepository
from storeadmin.domain.repository.product_repository import ProductRepository
from storeadmin.domain.service.order_reconciliation import OrderReconciliationService

logger = logging.getLogger(__name__)

_DEFAULT_REASONS = {
    OrderStatus.DELIVERED: "Order delivered successfully.",
    OrderStatus.SHIPPED: "Order shipped.",
    OrderStatus.FAILED: "Order failed.",
}


class UpdateOrderStatusHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        product_repo: ProductRepository,
    ) -> None:
        self._order_repo = order_repo
        self._product_repo = product_repo

    def handle(self, order_id: str, new_status: str) -> OrderDTO:
        order_id = require_valid_id(order_id, "order")
        try:
            status = OrderStatus(new_status)
        except ValueError:
            raise ValidationError(
                "Invalid order status. Must be one of: "
                + ", ".join(s.value for s in OrderStatus)
            )

        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise OrderNotFoundError(order_id)

        old_status = order.status
        svc = OrderReconciliationService(self._product_repo)
        reason: str | None = None

        if status is OrderStatus.PROCESSING and old_status is not OrderStatus.PROCESSING:
            status, reason = self._to_processing(svc, order)
        elif status is OrderStatus.CANCELLED and old_status is not OrderStatus.CANCELLED:
            reason = self._to_cancelled(svc, order)

        if reason is None:
            reason = _DEFAULT_REASONS.get(status)
        order.change_status(status, reason)
        self._order_repo.save(order)

        logger.info(
            "Order %s status %s -> %s", order.order_number, old_status.value, status.value
        )
        return order_to_dto(order)

    @staticmethod
    def _to_processing(
        svc: OrderReconciliationService, order: Order
    ) -> tuple[OrderStatus, str | None]:
        if order.stock_validation.stock_deducted:
            return OrderStatus.PROCESSING, None

        result = svc.validate(order, derive=False)
        if not result.is_valid:
            return (
                OrderStatus.ON_HOLD,
                "Cannot process: Insufficient stock for some items. "
                f"Validation result: {result.validation_result.value}",
            )

        outcome = svc.deduct(order)
        if not outcome.success:
            return (
                OrderStatus.ON_HOLD,
                f"Stock deduction failed: {', '.join(outcome.errors)}",
            )
        return OrderStatus.PROCESSING, "Stock deducted. Order processing."

    @staticmethod
    def _to_cancelled(svc: OrderReconciliationService, order: Order) -> str:
        if not order.stock_validation.stock_deducted:
            return "Order cancelled."
        outcome = svc.restore(order)
        if outcome.success:
            return "Order cancelled. Stock restored."
        return f"Order cancelled. Stock restoration failed: {', '.join(outcome.errors)}"
