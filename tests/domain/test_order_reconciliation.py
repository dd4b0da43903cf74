"""Unit tests for the OrderReconciliationService domain service."""

from storeadmin.domain.model.identifiers import new_id
from storeadmin.domain.model.order import Order, OrderLineItem, OrderStatus
from storeadmin.domain.model.stock import ValidationOutcome
from storeadmin.domain.model.value_objects import Quantity
from storeadmin.domain.service.order_reconciliation import (
    ALL_AVAILABLE_REASON,
    NONE_AVAILABLE_REASON,
    SYSTEM_ERROR_REASON,
    OrderReconciliationService,
    derive_status,
)
from tests.fakes import BrokenProductRepository, FakeProductRepository, simple_product


def _order(*lines) -> Order:
    return Order.create(
        new_id(),
        [
            OrderLineItem(
                product_id=product.id,
                name=product.name,
                quantity=Quantity(qty),
                unit_price=product.price,
            )
            for product, qty in lines
        ],
    )


class TestDeriveStatus:

    def test_all_available_goes_processing(self):
        mug = simple_product(stock=5)
        svc = OrderReconciliationService(FakeProductRepository([mug]))
        status, reason = derive_status(svc.check(_order((mug, 2)).validation_items()))
        assert status is OrderStatus.PROCESSING
        assert reason == ALL_AVAILABLE_REASON

    def test_partial_goes_on_hold_with_summary(self):
        mug = simple_product(stock=1)
        svc = OrderReconciliationService(FakeProductRepository([mug]))
        status, reason = derive_status(svc.check(_order((mug, 2)).validation_items()))
        assert status is OrderStatus.ON_HOLD
        assert reason == "1 item(s) partially available. Please review and edit the order."

    def test_none_available_fails(self):
        mug = simple_product(stock=0)
        svc = OrderReconciliationService(FakeProductRepository([mug]))
        status, reason = derive_status(svc.check(_order((mug, 2)).validation_items()))
        assert status is OrderStatus.FAILED
        assert reason == NONE_AVAILABLE_REASON

    def test_store_failure_is_a_system_error_not_a_stock_outcome(self):
        mug = simple_product(stock=5)
        svc = OrderReconciliationService(BrokenProductRepository([mug]))
        status, reason = derive_status(svc.check(_order((mug, 2)).validation_items()))
        assert status is OrderStatus.FAILED
        assert reason == SYSTEM_ERROR_REASON


class TestValidate:

    def test_records_snapshot_and_derives_status(self):
        mug = simple_product(stock=5)
        svc = OrderReconciliationService(FakeProductRepository([mug]))
        order = _order((mug, 2))

        result = svc.validate(order)

        assert result.is_valid
        assert order.status is OrderStatus.PROCESSING
        assert order.stock_validation.is_validated
        assert order.stock_validation.validation_result is ValidationOutcome.ALL_AVAILABLE

    def test_without_derive_status_is_untouched(self):
        mug = simple_product(stock=0)
        svc = OrderReconciliationService(FakeProductRepository([mug]))
        order = _order((mug, 2))

        svc.validate(order, derive=False)

        assert order.status is OrderStatus.PENDING
        assert order.stock_validation.validation_result is ValidationOutcome.NONE_AVAILABLE


class TestDeductAndRestore:

    def test_deduct_marks_order_and_restore_clears_it(self):
        mug = simple_product(stock=5)
        repo = FakeProductRepository([mug])
        svc = OrderReconciliationService(repo)
        order = _order((mug, 2))

        assert svc.deduct(order).success
        assert order.stock_validation.stock_deducted
        assert repo.get_by_id(mug.id).stock_quantity == 3

        assert svc.restore(order).success
        assert not order.stock_validation.stock_deducted
        assert repo.get_by_id(mug.id).stock_quantity == 5

    def test_failed_deduct_leaves_flag_unset(self):
        mug = simple_product(stock=1)
        svc = OrderReconciliationService(FakeProductRepository([mug]))
        order = _order((mug, 2))

        outcome = svc.deduct(order)

        assert not outcome.success
        assert not order.stock_validation.stock_deducted

    def test_incomplete_restore_keeps_flag_set(self):
        mug, gone = simple_product("Mug", stock=5), simple_product("Gone", stock=5)
        repo = FakeProductRepository([mug])
        svc = OrderReconciliationService(repo)
        order = _order((mug, 2), (gone, 1))
        order.mark_stock_deducted()

        outcome = svc.restore(order)

        assert outcome.errors == [f"Product not found: {gone.id}"]
        assert order.stock_validation.stock_deducted
        assert repo.get_by_id(mug.id).stock_quantity == 7
