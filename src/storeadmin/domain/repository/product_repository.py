"""Abstract repository for Product aggregate.

Defined in the domain layer so the domain never depends on
infrastructure. Concrete implementations (JSON, in-memory) live in the
infrastructure layer and the test fakes.

The store does not enforce the derived-stock invariant of variant
products; callers recalculate before ``save()``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from storeadmin.domain.model.product import Product


class ProductRepository(ABC):

    @abstractmethod
    def get_by_id(self, product_id: str) -> Product | None:
        """Return a product by its ID, or None if not found."""

    @abstractmethod
    def get_by_slug(self, slug: str) -> Product | None:
        """Return a product by its slug, or None if not found."""

    @abstractmethod
    def list_all(self) -> list[Product]:
        """Return every product in the catalog."""

    @abstractmethod
    def find_by_variant_ids(self, variant_ids: list[str]) -> list[Product]:
        """Return the products owning any of the given variant IDs."""

    @abstractmethod
    def save(self, product: Product) -> None:
        """Persist a new or updated product."""
