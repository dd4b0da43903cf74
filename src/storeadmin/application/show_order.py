"""Application service: Show Order use case (query).

Snapshot items recorded without a variant SKU get it filled in from the
current catalog, with one batch lookup for all of them.
"""

from __future__ import annotations

from storeadmin.application.dto import OrderDTO, order_to_dto
from storeadmin.domain.exceptions import OrderNotFoundError
from storeadmin.domain.model.identifiers import require_valid_id
from storeadmin.domain.model.order import Order
from storeadmin.domain.repository.order_repository import OrderRepository
from storeadmin.domain.repository.product_repository import ProductRepository


class ShowOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        product_repo: ProductRepository,
    ) -> None:
        self._order_repo = order_repo
        self._product_repo = product_repo

    def handle(self, order_id: str) -> OrderDTO:
        order_id = require_valid_id(order_id, "order")
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise OrderNotFoundError(order_id)
        return order_to_dto(order, self._variant_skus(order))

    def _variant_skus(self, order: Order) -> dict[str, str]:
        wanted = {
            item.variant_id
            for item in order.stock_validation.all_items()
            if item.variant_id and not item.variant_sku
        }
        if not wanted:
            return {}

        skus: dict[str, str] = {}
        for product in self._product_repo.find_by_variant_ids(sorted(wanted)):
            for variant in product.variants:
                if variant.id in wanted and variant.sku:
                    skus[variant.id] = variant.sku
        return skus
