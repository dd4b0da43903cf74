"""Domain service: Order Reconciliation.

Ties the stock validator and the stock mutator to the order lifecycle:
validates an order's items, derives the resulting status, records the
validation snapshot, and deducts or restores the order's stock.

Persisting the order is left to the application handlers, which decide
when a status change must be visible before stock is touched.
"""

from __future__ import annotations

import logging

from storeadmin.domain.model.order import Order, OrderStatus
from storeadmin.domain.model.stock import (
    StockMutationResult,
    StockValidationResult,
    ValidationItem,
    ValidationOutcome,
)
from storeadmin.domain.repository.product_repository import ProductRepository
from storeadmin.domain.service.stock_mutator import StockMutator
from storeadmin.domain.service.stock_validator import (
    StockValidator,
    generate_stock_validation_message,
)

logger = logging.getLogger(__name__)

ALL_AVAILABLE_REASON = "All items available in stock. Order processing."
NONE_AVAILABLE_REASON = "Stock finished - no items available in requested quantities."
SYSTEM_ERROR_REASON = "Stock validation failed due to system error."


def derive_status(result: StockValidationResult) -> tuple[OrderStatus, str]:
    """Map a validation outcome to the order status and its reason."""
    if result.error_message:
        return OrderStatus.FAILED, SYSTEM_ERROR_REASON
    if result.validation_result is ValidationOutcome.ALL_AVAILABLE:
        return OrderStatus.PROCESSING, ALL_AVAILABLE_REASON
    if result.validation_result is ValidationOutcome.PARTIAL_AVAILABLE:
        return OrderStatus.ON_HOLD, generate_stock_validation_message(result)
    return OrderStatus.FAILED, NONE_AVAILABLE_REASON


class OrderReconciliationService:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._validator = StockValidator(product_repo)
        self._mutator = StockMutator(product_repo)

    def check(self, items: list[ValidationItem]) -> StockValidationResult:
        """Validate without touching the order (live checks)."""
        return self._validator.validate(items)

    def validate(
        self,
        order: Order,
        derive: bool = True,
    ) -> StockValidationResult:
        """Validate the order's current items and record the snapshot.

        With ``derive`` the order status and reason follow the outcome;
        otherwise the caller's status stands.
        """
        result = self._validator.validate(order.validation_items())
        order.record_validation(result)
        if derive:
            status, reason = derive_status(result)
            order.change_status(status, reason)
            logger.info(
                "Order %s validated as %s -> %s",
                order.order_number,
                result.validation_result.value,
                status.value,
            )
        return result

    def deduct(self, order: Order) -> StockMutationResult:
        """Deduct the order's items; mark the snapshot on full success."""
        outcome = self._mutator.deduct(order.validation_items())
        if outcome.success:
            order.mark_stock_deducted()
            logger.info("Stock deducted for order %s", order.order_number)
        return outcome

    def deduct_items(self, items: list[ValidationItem]) -> StockMutationResult:
        return self._mutator.deduct(items)

    def restore(self, order: Order) -> StockMutationResult:
        """Return the order's items to stock; clear the deducted flag on full success."""
        outcome = self.restore_items(order.validation_items())
        if outcome.success:
            order.mark_stock_restored()
            logger.info("Stock restored for order %s", order.order_number)
        return outcome

    def restore_items(self, items: list[ValidationItem]) -> StockMutationResult:
        return self._mutator.restore(items)
