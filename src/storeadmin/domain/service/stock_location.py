"""Resolve where a requested item's stock lives: the product or one variant."""

from __future__ import annotations

from dataclasses import dataclass

from storeadmin.domain.model.product import Product, ProductVariant
from storeadmin.domain.model.stock import ValidationItem


@dataclass
class StockLocation:

    product: Product
    variant: ProductVariant | None = None

    @property
    def stock_quantity(self) -> int:
        if self.variant is not None:
            return self.variant.stock_quantity
        return self.product.stock_quantity

    @property
    def variant_sku(self) -> str | None:
        return self.variant.sku if self.variant is not None else None

    def adjust(self, delta: int) -> None:
        """Add *delta* units, then re-derive the product's aggregate stock."""
        if self.variant is not None:
            self.variant.stock_quantity += delta
            self.product.recalculate_stock()
        else:
            self.product.stock_quantity += delta


def locate_stock(
    product: Product, item: ValidationItem, include_inactive: bool = False
) -> StockLocation | None:
    """Return the stock location for *item*, or None if no variant resolves.

    Simple products ignore any variant information on the item.  On a
    variant product an explicit ``variant_id`` wins over
    ``selected_attributes``; with neither, nothing resolves.
    """
    if not product.has_variants:
        return StockLocation(product)

    variant = None
    if item.variant_id:
        variant = product.find_variant_by_id(item.variant_id, include_inactive)
    elif item.selected_attributes:
        variant = product.find_variant_by_attributes(
            item.selected_attributes, include_inactive
        )
    if variant is None:
        return None
    return StockLocation(product, variant)
