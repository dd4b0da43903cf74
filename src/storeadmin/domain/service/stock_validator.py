"""Domain service: Stock Validator.

Classifies every requested item as available, partially available or
unavailable against current stock, and the request as a whole as
``all_available``, ``partial_available`` or ``none_available``.

Validation is read-only: it never saves a product, so it can be repeated
as often as needed (live checks, re-validation on edit).
"""

from __future__ import annotations

import logging

from storeadmin.domain.exceptions import PersistenceError
from storeadmin.domain.model.identifiers import is_valid_id
from storeadmin.domain.model.stock import (
    AvailableItem,
    ShortfallItem,
    StockValidationResult,
    ValidationItem,
    ValidationOutcome,
)
from storeadmin.domain.repository.product_repository import ProductRepository
from storeadmin.domain.service.stock_location import locate_stock

logger = logging.getLogger(__name__)


class StockValidator:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def validate(self, items: list[ValidationItem]) -> StockValidationResult:
        available: list[AvailableItem] = []
        partial: list[ShortfallItem] = []
        unavailable: list[ShortfallItem] = []

        try:
            for item in items:
                quantity, variant_sku = self._available_quantity(item)
                requested = item.requested_quantity

                if quantity >= requested:
                    available.append(
                        AvailableItem(
                            product_id=item.product_id,
                            name=item.name,
                            available_quantity=quantity,
                            requested_quantity=requested,
                            actual_quantity=requested,
                            variant_id=item.variant_id,
                            variant_sku=variant_sku,
                        )
                    )
                elif quantity > 0:
                    partial.append(
                        _shortfall(item, quantity, requested - quantity, variant_sku)
                    )
                else:
                    unavailable.append(_shortfall(item, 0, requested, variant_sku))
        except PersistenceError as exc:
            logger.error("Stock validation aborted by store failure: %s", exc)
            return StockValidationResult(
                validation_result=ValidationOutcome.NONE_AVAILABLE,
                unavailable_items=[
                    _shortfall(item, 0, item.requested_quantity, None) for item in items
                ],
                error_message=str(exc),
            )

        result = StockValidationResult.classify(available, partial, unavailable)
        logger.debug(
            "Validated %d item(s): %s", len(items), result.validation_result.value
        )
        return result

    def _available_quantity(self, item: ValidationItem) -> tuple[int, str | None]:
        if not is_valid_id(item.product_id):
            return 0, None
        product = self._product_repo.get_by_id(item.product_id)
        if product is None:
            return 0, None
        location = locate_stock(product, item)
        if location is None:
            return 0, None
        return max(location.stock_quantity, 0), location.variant_sku


def _shortfall(
    item: ValidationItem, available: int, shortfall: int, variant_sku: str | None
) -> ShortfallItem:
    return ShortfallItem(
        product_id=item.product_id,
        name=item.name,
        available_quantity=available,
        requested_quantity=item.requested_quantity,
        shortfall=shortfall,
        variant_id=item.variant_id,
        variant_sku=variant_sku,
    )


def generate_stock_validation_message(result: StockValidationResult) -> str:
    """One-line human summary of a validation result."""
    if result.validation_result is ValidationOutcome.ALL_AVAILABLE:
        return "All items are available in stock."
    if result.validation_result is ValidationOutcome.NONE_AVAILABLE:
        return "No items are available in stock. All requested items are out of stock."

    parts = []
    if result.available_items:
        parts.append(f"{len(result.available_items)} item(s) fully available")
    if result.partially_available_items:
        parts.append(
            f"{len(result.partially_available_items)} item(s) partially available"
        )
    if result.unavailable_items:
        parts.append(f"{len(result.unavailable_items)} item(s) out of stock")
    return f"{', '.join(parts)}. Please review and edit the order."
