"""Application service: Add Variant use case."""

from __future__ import annotations

from storeadmin.domain.exceptions import ProductNotFoundError
from storeadmin.domain.model.identifiers import require_valid_id
from storeadmin.domain.model.product import ProductVariant
from storeadmin.domain.model.value_objects import AttributeSelection, Money
from storeadmin.domain.repository.product_repository import ProductRepository


class AddVariantHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(
        self,
        product_id: str,
        attributes: dict[str, str],
        stock_quantity: int = 0,
        *,
        sku: str | None = None,
        price: str | None = None,
        is_active: bool = True,
    ) -> ProductVariant:
        """Add one attribute combination; it must cover every defined attribute."""
        product_id = require_valid_id(product_id, "product")
        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)

        variant = product.add_variant(
            AttributeSelection.of(attributes),
            stock_quantity,
            sku=sku,
            price=Money.of(price) if price is not None else None,
            is_active=is_active,
        )
        self._product_repo.save(product)
        return variant
