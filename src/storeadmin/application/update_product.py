"""Application service: Update Product use case."""

from __future__ import annotations

from storeadmin.domain.exceptions import ProductNotFoundError
from storeadmin.domain.model.identifiers import require_valid_id
from storeadmin.domain.model.value_objects import Money
from storeadmin.domain.repository.product_repository import ProductRepository


class UpdateProductHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(self, product_id: str, new_price: str) -> None:
        """Update a product's base price.

        This does NOT affect any existing orders; they captured a
        price snapshot at creation time.
        """
        product_id = require_valid_id(product_id, "product")
        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)

        product.update_price(Money.of(new_price))
        self._product_repo.save(product)
