"""Integration tests for the ShowOrder and CheckOrderStock queries."""

import pytest

from storeadmin.application.check_order_stock import CheckOrderStockHandler
from storeadmin.application.create_order import CreateOrderHandler
from storeadmin.application.dto import CustomerSpec, OrderItemSpec, StockUpdateSpec
from storeadmin.application.set_stock import SetStockHandler
from storeadmin.application.show_order import ShowOrderHandler
from storeadmin.domain.exceptions import OrderNotFoundError
from storeadmin.domain.model.identifiers import new_id
from storeadmin.domain.model.stock import ValidationOutcome
from tests.fakes import (
    FakeCustomerRepository,
    FakeOrderRepository,
    FakeProductRepository,
    simple_product,
    tshirt,
    variant_of,
)

ALICE = CustomerSpec(email="alice@example.com", first_name="Alice", last_name="Roy")


def _create(products, specs):
    order_repo = FakeOrderRepository()
    product_repo = FakeProductRepository(products)
    dto = CreateOrderHandler(order_repo, product_repo, FakeCustomerRepository()).handle(
        ALICE, specs
    )
    return dto.id, order_repo, product_repo


class TestShowOrder:

    def test_shows_validation_snapshot(self):
        mug = simple_product("Mug", stock=1)
        order_id, order_repo, product_repo = _create([mug], [OrderItemSpec(mug.id, 3)])

        dto = ShowOrderHandler(order_repo, product_repo).handle(order_id)

        assert dto.status == "on-hold"
        sv = dto.stock_validation
        assert sv.is_validated
        assert sv.validation_result == "partial_available"
        assert not sv.stock_deducted
        [line] = sv.partially_available
        assert (line.requested, line.available, line.shortfall) == (3, 1, 2)

    def test_backfills_variant_sku_missing_from_snapshot(self):
        shirt = tshirt(red_m=10)
        red_m = variant_of(shirt, Color="Red", Size="M")
        red_m.sku = None
        order_id, order_repo, product_repo = _create(
            [shirt], [OrderItemSpec(shirt.id, 1, variant_id=red_m.id)]
        )
        SetStockHandler(product_repo).handle(
            [StockUpdateSpec(shirt.id, variant_id=red_m.id, sku="TS-R-M")]
        )

        dto = ShowOrderHandler(order_repo, product_repo).handle(order_id)

        [line] = dto.stock_validation.available
        assert line.variant_sku == "TS-R-M"
        # the stored snapshot itself is historical and stays as recorded
        stored = order_repo.get_by_id(order_id)
        assert stored.stock_validation.available_items[0].variant_sku is None

    def test_unknown_order(self):
        with pytest.raises(OrderNotFoundError):
            ShowOrderHandler(FakeOrderRepository(), FakeProductRepository()).handle(new_id())


class TestCheckOrderStock:

    def test_live_check_reflects_current_stock_without_changes(self):
        mug = simple_product("Mug", stock=5)
        order_id, order_repo, product_repo = _create([mug], [OrderItemSpec(mug.id, 2)])
        SetStockHandler(product_repo).handle([StockUpdateSpec(mug.id, stock_quantity=1)])
        saves_before = order_repo.saves

        result = CheckOrderStockHandler(order_repo, product_repo).handle(order_id)

        assert result.validation_result is ValidationOutcome.PARTIAL_AVAILABLE
        assert order_repo.saves == saves_before
        assert product_repo.get_by_id(mug.id).stock_quantity == 1
        stored = order_repo.get_by_id(order_id)
        assert stored.stock_validation.validation_result is ValidationOutcome.ALL_AVAILABLE
