"""Application service: Add Product use case."""

from __future__ import annotations

import logging

from storeadmin.domain.exceptions import ValidationError
from storeadmin.domain.model.product import Product, slugify
from storeadmin.domain.model.value_objects import Money
from storeadmin.domain.repository.product_repository import ProductRepository

logger = logging.getLogger(__name__)


class AddProductHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(
        self,
        name: str,
        price: str,
        *,
        sku: str | None = None,
        stock_quantity: int = 0,
        attribute_definitions: dict[str, list[str]] | None = None,
        slug: str | None = None,
    ) -> Product:
        """Add a new product to the catalog.

        With ``attribute_definitions`` the product is a variant product and
        its stock comes from variants added afterwards.  The slug is derived
        from the name unless given, and made unique with a numeric suffix.
        An explicit slug that is already taken is rejected.
        """
        product = Product.create(
            name,
            Money.of(price),
            slug=slug,
            sku=sku,
            stock_quantity=stock_quantity,
            attribute_definitions=attribute_definitions,
        )

        if slug:
            if self._product_repo.get_by_slug(product.slug) is not None:
                raise ValidationError(f"Slug '{product.slug}' is already in use")
        else:
            product.slug = self._unique_slug(slugify(name))

        self._product_repo.save(product)
        logger.info("Added product %s (%s)", product.name, product.id)
        return product

    def _unique_slug(self, base: str) -> str:
        candidate, n = base, 1
        while self._product_repo.get_by_slug(candidate) is not None:
            n += 1
            candidate = f"{base}-{n}"
        return candidate
