"""JSON-file-backed implementation of ProductRepository."""

from __future__ import annotations

from pathlib import Path

from storeadmin.domain.model.product import Product, ProductVariant
from storeadmin.domain.model.value_objects import AttributeSelection, Money
from storeadmin.domain.repository.product_repository import ProductRepository
from storeadmin.infrastructure.persistence.json_file import JsonFile


class JsonProductRepository(ProductRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path)

    # --- ProductRepository interface ------------------------------------------

    def get_by_id(self, product_id: str) -> Product | None:
        for raw in self._file.load():
            if raw["id"] == product_id:
                return self._to_domain(raw)
        return None

    def get_by_slug(self, slug: str) -> Product | None:
        for raw in self._file.load():
            if raw["slug"] == slug:
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[Product]:
        return [self._to_domain(raw) for raw in self._file.load()]

    def find_by_variant_ids(self, variant_ids: list[str]) -> list[Product]:
        wanted = set(variant_ids)
        return [
            self._to_domain(raw)
            for raw in self._file.load()
            if any(v["id"] in wanted for v in raw.get("variants", []))
        ]

    def save(self, product: Product) -> None:
        self._file.upsert(self._to_raw(product))

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(product: Product) -> dict:
        return {
            "id": product.id,
            "name": product.name,
            "slug": product.slug,
            "description": product.description,
            "price": str(product.price.amount),
            "currency": product.price.currency,
            "sku": product.sku,
            "stock_quantity": product.stock_quantity,
            "has_variants": product.has_variants,
            "attribute_definitions": product.attribute_definitions,
            "images": product.images,
            "variants": [
                {
                    "id": v.id,
                    "attributes": [list(pair) for pair in v.attributes],
                    "sku": v.sku,
                    "price": str(v.price.amount) if v.price is not None else None,
                    "stock_quantity": v.stock_quantity,
                    "is_active": v.is_active,
                    "images": v.images,
                }
                for v in product.variants
            ],
        }

    @staticmethod
    def _to_domain(raw: dict) -> Product:
        currency = raw.get("currency", "USD")
        return Product(
            id=raw["id"],
            name=raw["name"],
            slug=raw["slug"],
            description=raw.get("description", ""),
            price=Money.of(raw["price"], currency),
            sku=raw.get("sku"),
            stock_quantity=raw.get("stock_quantity", 0),
            has_variants=raw.get("has_variants", False),
            attribute_definitions=raw.get("attribute_definitions", {}),
            images=raw.get("images", []),
            variants=[
                ProductVariant(
                    id=v["id"],
                    attributes=AttributeSelection(
                        tuple((name, value) for name, value in v["attributes"])
                    ),
                    sku=v.get("sku"),
                    price=(
                        Money.of(v["price"], currency)
                        if v.get("price") is not None
                        else None
                    ),
                    stock_quantity=v.get("stock_quantity", 0),
                    is_active=v.get("is_active", True),
                    images=v.get("images", []),
                )
                for v in raw.get("variants", [])
            ],
        )
