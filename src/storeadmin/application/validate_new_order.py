"""Application service: deferred stock validation of a newly created order.

Runs once per order creation, after the order has been persisted as
``pending`` and its id returned to the caller.  It validates stock, writes
the resulting status and snapshot, and only then deducts stock.  Any
unexpected error forces the order to ``failed`` so it never stays
``pending``.
"""

from __future__ import annotations

import logging

from storeadmin.domain.exceptions import PersistenceError
from storeadmin.domain.model.order import OrderStatus
from storeadmin.domain.repository.order_repository import OrderRepository
from storeadmin.domain.repository.product_repository import ProductRepository
from storeadmin.domain.service.order_reconciliation import (
    SYSTEM_ERROR_REASON,
    OrderReconciliationService,
)

logger = logging.getLogger(__name__)


class ValidateNewOrderTask:
    """One-shot callable; a second call is a no-op."""

    def __init__(
        self,
        order_id: str,
        order_repo: OrderRepository,
        product_repo: ProductRepository,
    ) -> None:
        self.order_id = order_id
        self._order_repo = order_repo
        self._product_repo = product_repo
        self._started = False

    @property
    def name(self) -> str:
        return f"validate-order-{self.order_id}"

    def __call__(self) -> None:
        if self._started:
            logger.warning("Validation of order %s already ran", self.order_id)
            return
        self._started = True

        try:
            self._run()
        except Exception:
            logger.exception("Stock validation failed for order %s", self.order_id)
            self._mark_failed()

    def _run(self) -> None:
        order = self._order_repo.get_by_id(self.order_id)
        if order is None:
            logger.warning("Order %s vanished before validation", self.order_id)
            return
        if order.stock_validation.is_validated:
            logger.info("Order %s is already validated", order.order_number)
            return

        svc = OrderReconciliationService(self._product_repo)
        svc.validate(order)
        self._order_repo.save(order)

        if order.status is OrderStatus.PROCESSING:
            outcome = svc.deduct(order)
            if not outcome.success:
                order.change_status(
                    OrderStatus.ON_HOLD,
                    f"Stock deduction failed: {', '.join(outcome.errors)}",
                )
            self._order_repo.save(order)

    def _mark_failed(self) -> None:
        try:
            self._order_repo.update_by_id(
                self.order_id,
                status=OrderStatus.FAILED,
                status_reason=SYSTEM_ERROR_REASON,
            )
        except PersistenceError:
            logger.exception("Could not mark order %s as failed", self.order_id)
