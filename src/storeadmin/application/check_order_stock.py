"""Application service: live stock check of an existing order (query).

Validates the order's current items against current stock without
touching the order or the products.
"""

from __future__ import annotations

from storeadmin.domain.exceptions import OrderNotFoundError
from storeadmin.domain.model.identifiers import require_valid_id
from storeadmin.domain.model.stock import StockValidationResult
from storeadmin.domain.repository.order_repository import OrderRepository
from storeadmin.domain.repository.product_repository import ProductRepository
from storeadmin.domain.service.order_reconciliation import OrderReconciliationService


class CheckOrderStockHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        product_repo: ProductRepository,
    ) -> None:
        self._order_repo = order_repo
        self._product_repo = product_repo

    def handle(self, order_id: str) -> StockValidationResult:
        order_id = require_valid_id(order_id, "order")
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise OrderNotFoundError(order_id)
        svc = OrderReconciliationService(self._product_repo)
        return svc.check(order.validation_items())
