"""Application service: Show Inventory use case (query)."""

from __future__ import annotations

from dataclasses import dataclass

from storeadmin.domain.repository.product_repository import ProductRepository


@dataclass(frozen=True)
class InventoryLineDTO:
    product_id: str
    product_name: str
    variant: str  # "" for the product line itself
    sku: str
    stock: int
    active: bool = True


class ShowInventoryHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(self) -> list[InventoryLineDTO]:
        """One line per product, followed by one per variant."""
        lines: list[InventoryLineDTO] = []
        for product in self._product_repo.list_all():
            lines.append(
                InventoryLineDTO(
                    product_id=product.id,
                    product_name=product.name,
                    variant="",
                    sku=product.sku or "",
                    stock=product.stock_quantity,
                )
            )
            for variant in product.variants:
                lines.append(
                    InventoryLineDTO(
                        product_id=product.id,
                        product_name=product.name,
                        variant=str(variant.attributes),
                        sku=variant.sku or "",
                        stock=variant.stock_quantity,
                        active=variant.is_active,
                    )
                )
        return lines
