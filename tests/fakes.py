"""In-memory fake repositories for testing.

These implement the same abstract interfaces as the JSON repositories
but keep everything in a dict. No file I/O, no side effects.

Entities are copied on the way in and out, like a real document store:
a loaded object is a fresh copy, and changes only stick once saved.
"""

from __future__ import annotations

import copy

from storeadmin.domain.exceptions import PersistenceError
from storeadmin.domain.model.customer import Customer
from storeadmin.domain.model.order import Order
from storeadmin.domain.model.product import Product
from storeadmin.domain.model.value_objects import AttributeSelection, Money
from storeadmin.domain.repository.customer_repository import CustomerRepository
from storeadmin.domain.repository.order_repository import OrderRepository
from storeadmin.domain.repository.product_repository import ProductRepository


class FakeOrderRepository(OrderRepository):

    def __init__(self) -> None:
        self._store: dict[str, Order] = {}
        self.saves = 0

    def get_by_id(self, order_id: str) -> Order | None:
        order = self._store.get(order_id)
        return copy.deepcopy(order) if order is not None else None

    def save(self, order: Order) -> None:
        self._store[order.id] = copy.deepcopy(order)
        self.saves += 1

    def all(self) -> list[Order]:
        return [copy.deepcopy(o) for o in self._store.values()]


class FakeProductRepository(ProductRepository):

    def __init__(self, products: list[Product] | None = None) -> None:
        self._store: dict[str, Product] = {}
        for p in products or []:
            self._store[p.id] = copy.deepcopy(p)

    def get_by_id(self, product_id: str) -> Product | None:
        product = self._store.get(product_id)
        return copy.deepcopy(product) if product is not None else None

    def get_by_slug(self, slug: str) -> Product | None:
        for p in self._store.values():
            if p.slug == slug:
                return copy.deepcopy(p)
        return None

    def list_all(self) -> list[Product]:
        return [copy.deepcopy(p) for p in self._store.values()]

    def find_by_variant_ids(self, variant_ids: list[str]) -> list[Product]:
        wanted = set(variant_ids)
        return [
            copy.deepcopy(p)
            for p in self._store.values()
            if any(v.id in wanted for v in p.variants)
        ]

    def save(self, product: Product) -> None:
        self._store[product.id] = copy.deepcopy(product)


class BrokenProductRepository(FakeProductRepository):
    """Every read fails, as if the store were unreachable."""

    def get_by_id(self, product_id: str) -> Product | None:
        raise PersistenceError("connection refused")


class FakeCustomerRepository(CustomerRepository):

    def __init__(self, customers: list[Customer] | None = None) -> None:
        self._store: dict[str, Customer] = {}
        for c in customers or []:
            self._store[c.id] = copy.deepcopy(c)

    def get_by_id(self, customer_id: str) -> Customer | None:
        customer = self._store.get(customer_id)
        return copy.deepcopy(customer) if customer is not None else None

    def get_by_email(self, email: str) -> Customer | None:
        for c in self._store.values():
            if c.email.lower() == email.strip().lower():
                return copy.deepcopy(c)
        return None

    def save(self, customer: Customer) -> None:
        self._store[customer.id] = copy.deepcopy(customer)

    def all(self) -> list[Customer]:
        return list(self._store.values())


# --- Builders -----------------------------------------------------------------


def simple_product(name: str = "Mug", price: str = "12.50", stock: int = 5) -> Product:
    return Product.create(name, Money.of(price), sku=f"{name.upper()}-1", stock_quantity=stock)


def tshirt(red_m: int = 10, blue_m: int = 4, red_l: int = 0) -> Product:
    """T-shirt with Color x Size variants: Red/M, Blue/M, Red/L."""
    product = Product.create(
        "T-Shirt",
        Money.of("20.00"),
        sku="TS",
        attribute_definitions={"Color": ["Red", "Blue"], "Size": ["M", "L"]},
    )
    product.add_variant(
        AttributeSelection.of({"Color": "Red", "Size": "M"}), red_m, sku="TS-RED-M"
    )
    product.add_variant(
        AttributeSelection.of({"Color": "Blue", "Size": "M"}),
        blue_m,
        sku="TS-BLUE-M",
        price=Money.of("22.00"),
    )
    product.add_variant(
        AttributeSelection.of({"Color": "Red", "Size": "L"}), red_l, sku="TS-RED-L"
    )
    return product


def variant_of(product: Product, **attributes: str):
    return product.find_variant_by_attributes(
        AttributeSelection.of(attributes), include_inactive=True
    )
