"""Application service: bulk stock / price / SKU update.

Each entry targets a simple product or one variant.  Entries are
independent: a bad entry is reported and the rest still apply.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from storeadmin.application.dto import StockUpdateSpec
from storeadmin.domain.exceptions import (
    DomainException,
    ProductNotFoundError,
    ValidationError,
    VariantNotFoundError,
)
from storeadmin.domain.model.identifiers import require_valid_id
from storeadmin.domain.model.value_objects import Money
from storeadmin.domain.repository.product_repository import ProductRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StockUpdateError:
    product_id: str
    variant_id: str | None
    error: str


@dataclass
class BulkStockUpdateResult:
    updated: list[StockUpdateSpec] = field(default_factory=list)
    errors: list[StockUpdateError] = field(default_factory=list)


class SetStockHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(self, updates: list[StockUpdateSpec]) -> BulkStockUpdateResult:
        if not updates:
            raise ValidationError("At least one stock update is required")

        result = BulkStockUpdateResult()
        for update in updates:
            try:
                self._apply(update)
            except DomainException as exc:
                result.errors.append(
                    StockUpdateError(update.product_id, update.variant_id, str(exc))
                )
            else:
                result.updated.append(update)

        logger.info(
            "Bulk stock update: %d applied, %d rejected",
            len(result.updated),
            len(result.errors),
        )
        return result

    def _apply(self, update: StockUpdateSpec) -> None:
        if update.stock_quantity is not None and (
            isinstance(update.stock_quantity, bool)
            or not isinstance(update.stock_quantity, int)
            or update.stock_quantity < 0
        ):
            raise ValidationError("Stock quantity must be a non-negative integer")
        price = Money.of(update.price) if update.price is not None else None

        product_id = require_valid_id(update.product_id, "product")
        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)

        if update.variant_id:
            variant = product.find_variant_by_id(update.variant_id, include_inactive=True)
            if variant is None:
                raise VariantNotFoundError(product_id, update.variant_id)
            if update.stock_quantity is not None:
                variant.stock_quantity = update.stock_quantity
            if price is not None:
                variant.price = price
            if update.sku is not None:
                variant.sku = update.sku or None
            product.recalculate_stock()
        else:
            if update.stock_quantity is not None:
                product.set_stock(update.stock_quantity)
            if price is not None:
                product.price = price
            if update.sku is not None:
                product.sku = update.sku or None

        self._product_repo.save(product)
