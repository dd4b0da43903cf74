"""Product aggregate.

Products live independently of orders. They have their own lifecycle:
prices change, variants are added, stock is counted and adjusted.

A product is either *simple* (its own ``price``, ``sku`` and
``stock_quantity`` are authoritative) or has a *variant matrix*: one
``ProductVariant`` per attribute combination, each with its own stock.
In variant mode the product's ``stock_quantity`` is derived (the sum over
active variants) and must be recalculated before every save.
"""

from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass, field

from storeadmin.domain.exceptions import ValidationError
from storeadmin.domain.model.identifiers import new_id
from storeadmin.domain.model.value_objects import AttributeSelection, Money


def slugify(text: str) -> str:
    """Lower-case, ASCII-only, hyphen-separated form of *text*."""
    normalized = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode()
    slug = re.sub(r"[^a-z0-9]+", "-", normalized.lower()).strip("-")
    return slug


@dataclass
class ProductVariant:
    """One concrete attribute combination with its own stock."""

    id: str
    attributes: AttributeSelection
    stock_quantity: int = 0
    sku: str | None = None
    price: Money | None = None  # falls back to the product price
    is_active: bool = True
    images: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        _check_stock(self.stock_quantity)


@dataclass
class Product:
    """Aggregate root for the catalog.

    Use ``Product.create()`` for new products; ``__init__`` stays plain so
    repositories can reconstitute stored documents without re-validating.
    """

    id: str
    name: str
    slug: str
    price: Money
    sku: str | None = None
    stock_quantity: int = 0
    has_variants: bool = False
    attribute_definitions: dict[str, list[str]] = field(default_factory=dict)
    variants: list[ProductVariant] = field(default_factory=list)
    description: str = ""
    images: list[str] = field(default_factory=list)

    # --- Factory --------------------------------------------------------------

    @staticmethod
    def create(
        name: str,
        price: Money,
        *,
        slug: str | None = None,
        sku: str | None = None,
        stock_quantity: int = 0,
        attribute_definitions: dict[str, list[str]] | None = None,
        description: str = "",
        images: list[str] | None = None,
    ) -> Product:
        """Create a product; passing attribute definitions makes it a variant product."""
        if not name or not name.strip():
            raise ValidationError("Product name is required")
        _check_stock(stock_quantity)

        definitions = {
            attr: list(values) for attr, values in (attribute_definitions or {}).items()
        }
        for attr, values in definitions.items():
            if not values:
                raise ValidationError(f"Attribute '{attr}' needs at least one value")

        final_slug = slugify(slug if slug else name)
        if not final_slug:
            raise ValidationError(f"Cannot derive a slug from {name!r}")

        return Product(
            id=new_id(),
            name=name.strip(),
            slug=final_slug,
            price=price,
            sku=sku or None,
            stock_quantity=0 if definitions else stock_quantity,
            has_variants=bool(definitions),
            attribute_definitions=definitions,
            description=description,
            images=list(images or []),
        )

    # --- Catalog mutations ----------------------------------------------------

    def update_price(self, new_price: Money) -> None:
        """Change the base price.

        This does NOT affect any existing orders because orders
        capture a price snapshot at creation time.
        """
        if new_price.amount <= 0:
            raise ValidationError("Product price must be greater than zero")
        self.price = new_price

    def add_variant(
        self,
        attributes: AttributeSelection,
        stock_quantity: int = 0,
        *,
        sku: str | None = None,
        price: Money | None = None,
        is_active: bool = True,
    ) -> ProductVariant:
        if not self.has_variants:
            raise ValidationError(f"Product '{self.name}' has no attribute definitions")
        self._check_combination(attributes)
        for existing in self.variants:
            if existing.attributes.same_combination(attributes):
                raise ValidationError(
                    f"Variant {attributes} already exists for '{self.name}'"
                )

        variant = ProductVariant(
            id=new_id(),
            attributes=attributes,
            stock_quantity=stock_quantity,
            sku=sku or None,
            price=price,
            is_active=is_active,
        )
        self.variants.append(variant)
        self.recalculate_stock()
        return variant

    def set_stock(self, quantity: int) -> None:
        """Set base stock of a simple product."""
        _check_stock(quantity)
        if self.has_variants:
            raise ValidationError(
                f"Stock of '{self.name}' is derived from its variants; "
                f"set the variant stock instead"
            )
        self.stock_quantity = quantity

    # --- Variant lookup -------------------------------------------------------

    def find_variant_by_id(
        self, variant_id: str, include_inactive: bool = False
    ) -> ProductVariant | None:
        for variant in self.variants:
            if variant.id == variant_id:
                if variant.is_active or include_inactive:
                    return variant
                return None
        return None

    def find_variant_by_attributes(
        self, selection: AttributeSelection, include_inactive: bool = False
    ) -> ProductVariant | None:
        """Return the variant whose combination matches every selected value.

        Attributes missing from *selection* are not inferred, so on a
        multi-attribute product a partial selection may match the first of
        several variants; callers are expected to pass full combinations.
        """
        for variant in self.variants:
            if not (variant.is_active or include_inactive):
                continue
            if variant.attributes.matches(selection):
                return variant
        return None

    def price_for(self, variant: ProductVariant | None) -> Money:
        if variant is not None and variant.price is not None:
            return variant.price
        return self.price

    def sku_for(self, variant: ProductVariant | None) -> str:
        if variant is not None and variant.sku:
            return variant.sku
        return self.sku or ""

    # --- Derived stock --------------------------------------------------------

    def recalculate_stock(self) -> Product:
        """Re-derive ``stock_quantity`` from active variants (variant mode only)."""
        if self.has_variants:
            self.stock_quantity = sum(
                v.stock_quantity for v in self.variants if v.is_active
            )
        return self

    # --- Internal helpers -----------------------------------------------------

    def _check_combination(self, attributes: AttributeSelection) -> None:
        defined = set(self.attribute_definitions)
        given = set(attributes.names())
        if given != defined:
            missing = sorted(defined - given)
            extra = sorted(given - defined)
            raise ValidationError(
                f"Variant must set exactly the attributes {sorted(defined)} "
                f"(missing {missing}, unknown {extra})"
            )
        for name, value in attributes:
            if value not in self.attribute_definitions[name]:
                raise ValidationError(
                    f"'{value}' is not a permitted value for attribute '{name}'"
                )


def _check_stock(quantity: int) -> None:
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise ValidationError(f"Stock quantity must be an integer, got {quantity!r}")
    if quantity < 0:
        raise ValidationError("Stock quantity cannot be negative")
