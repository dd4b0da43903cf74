"""Domain service: Stock Mutator.

``deduct`` and ``restore`` apply stock deltas item by item.  Each item is
re-read from the store and saved on its own, so two items touching the
same product see each other's changes.

A failing item is reported in ``errors`` and skipped; the batch carries
on and earlier items are not rolled back.  Store failures are not caught
here: they propagate as ``PersistenceError`` to the orchestrating flow.
"""

from __future__ import annotations

import logging

from storeadmin.domain.model.identifiers import is_valid_id
from storeadmin.domain.model.stock import StockMutationResult, ValidationItem
from storeadmin.domain.repository.product_repository import ProductRepository
from storeadmin.domain.service.stock_location import locate_stock

logger = logging.getLogger(__name__)


class StockMutator:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def deduct(self, items: list[ValidationItem]) -> StockMutationResult:
        """Take requested quantities out of stock, never below zero."""
        errors: list[str] = []
        for item in items:
            error = self._apply(item, -item.requested_quantity)
            if error:
                errors.append(error)
        return self._finish("deduct", errors)

    def restore(self, items: list[ValidationItem]) -> StockMutationResult:
        """Put previously deducted quantities back into stock.

        Inactive variants are included: units go back to where they were
        taken from even if the variant has since been switched off.
        """
        errors: list[str] = []
        for item in items:
            error = self._apply(item, item.requested_quantity, include_inactive=True)
            if error:
                errors.append(error)
        return self._finish("restore", errors)

    def _apply(
        self, item: ValidationItem, delta: int, include_inactive: bool = False
    ) -> str | None:
        if not is_valid_id(item.product_id):
            return f"Invalid product ID: {item.product_id}"
        product = self._product_repo.get_by_id(item.product_id)
        if product is None:
            return f"Product not found: {item.product_id}"

        location = locate_stock(product, item, include_inactive)
        if location is None:
            if item.variant_id:
                return f"Variant not found: {item.variant_id} for product {item.name}"
            if item.selected_attributes:
                return f"Variant not found for attributes in product {item.name}"
            return f"No variant selected for product {item.name}"

        if delta < 0 and location.stock_quantity < -delta:
            return (
                f"Insufficient stock for {item.name} "
                f"(need {-delta}, have {location.stock_quantity})"
            )

        location.adjust(delta)
        self._product_repo.save(product)
        logger.info(
            "Stock of %s%s changed by %+d to %d",
            item.name,
            f" [{location.variant.attributes}]" if location.variant else "",
            delta,
            location.stock_quantity,
        )
        return None

    @staticmethod
    def _finish(operation: str, errors: list[str]) -> StockMutationResult:
        for error in errors:
            logger.warning("Stock %s: %s", operation, error)
        return StockMutationResult(errors=errors)
