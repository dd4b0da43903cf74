"""Integration tests for the CreateOrder use case and its deferred validation.

Uses in-memory fake repositories, no file I/O.
"""

import pytest

from storeadmin.application.create_order import CreateOrderHandler
from storeadmin.application.dto import CustomerSpec, OrderItemSpec
from storeadmin.application.validate_new_order import ValidateNewOrderTask
from storeadmin.domain.exceptions import (
    CustomerNotFoundError,
    InvalidIdentifierError,
    ProductNotFoundError,
    ValidationError,
)
from storeadmin.domain.model.customer import Customer
from storeadmin.domain.model.identifiers import new_id
from storeadmin.domain.model.order import OrderStatus
from storeadmin.domain.model.stock import ValidationOutcome
from storeadmin.domain.service.order_reconciliation import (
    ALL_AVAILABLE_REASON,
    NONE_AVAILABLE_REASON,
    SYSTEM_ERROR_REASON,
)
from tests.fakes import (
    BrokenProductRepository,
    FakeCustomerRepository,
    FakeOrderRepository,
    FakeProductRepository,
    simple_product,
    tshirt,
    variant_of,
)

ALICE = CustomerSpec(email="alice@example.com", first_name="Alice", last_name="Roy")


def _setup(products=None, customers=None, dispatch=None):
    """Build handler with fake repos; validation runs inline unless *dispatch* is given."""
    if products is None:
        products = [simple_product("Mug", stock=5), tshirt()]
    order_repo = FakeOrderRepository()
    product_repo = FakeProductRepository(products)
    customer_repo = FakeCustomerRepository(customers)
    kwargs = {"dispatch": dispatch} if dispatch is not None else {}
    handler = CreateOrderHandler(order_repo, product_repo, customer_repo, **kwargs)
    return handler, order_repo, product_repo, customer_repo


class TestCreateOrderHappyPath:

    def test_returns_pending_order_with_snapshot_prices(self):
        mug = simple_product("Mug", price="12.50", stock=5)
        handler, _, _, _ = _setup([mug])

        dto = handler.handle(ALICE, [OrderItemSpec(mug.id, 2)])

        assert dto.status == "pending"
        assert dto.total == "$25.00"
        assert dto.customer_name == "Alice Roy"
        assert dto.items[0].sku == "MUG-1"

    def test_inline_validation_processes_and_deducts(self):
        mug = simple_product("Mug", stock=5)
        handler, order_repo, product_repo, _ = _setup([mug])

        dto = handler.handle(ALICE, [OrderItemSpec(mug.id, 5)])

        order = order_repo.get_by_id(dto.id)
        assert order.status is OrderStatus.PROCESSING
        assert order.status_reason == ALL_AVAILABLE_REASON
        assert order.stock_validation.stock_deducted
        assert product_repo.get_by_id(mug.id).stock_quantity == 0

    def test_variant_line_takes_variant_price_and_sku(self):
        shirt = tshirt(blue_m=4)
        handler, order_repo, product_repo, _ = _setup([shirt])

        dto = handler.handle(
            ALICE,
            [OrderItemSpec(shirt.id, 2, selected_attributes={"Color": "Blue", "Size": "M"})],
        )

        line = dto.items[0]
        assert line.unit_price == "$22.00"
        assert line.sku == "TS-BLUE-M"
        assert line.variant_id == variant_of(shirt, Color="Blue", Size="M").id
        stored = product_repo.get_by_id(shirt.id)
        assert variant_of(stored, Color="Blue", Size="M").stock_quantity == 2


class TestCreateOrderOutcomes:

    def test_partial_stock_goes_on_hold_without_deduction(self):
        mug = simple_product("Mug", stock=1)
        handler, order_repo, product_repo, _ = _setup([mug])

        dto = handler.handle(ALICE, [OrderItemSpec(mug.id, 3)])

        order = order_repo.get_by_id(dto.id)
        assert order.status is OrderStatus.ON_HOLD
        assert "partially available" in order.status_reason
        assert not order.stock_validation.stock_deducted
        assert product_repo.get_by_id(mug.id).stock_quantity == 1

    def test_no_stock_fails(self):
        mug = simple_product("Mug", stock=0)
        handler, order_repo, _, _ = _setup([mug])

        dto = handler.handle(ALICE, [OrderItemSpec(mug.id, 1)])

        order = order_repo.get_by_id(dto.id)
        assert order.status is OrderStatus.FAILED
        assert order.status_reason == NONE_AVAILABLE_REASON

    def test_inactive_variant_is_unavailable(self):
        shirt = tshirt(red_m=10)
        variant_of(shirt, Color="Red", Size="M").is_active = False
        handler, order_repo, _, _ = _setup([shirt.recalculate_stock()])

        dto = handler.handle(
            ALICE, [OrderItemSpec(shirt.id, 1, variant_id=variant_of(shirt, Color="Red", Size="M").id)]
        )

        order = order_repo.get_by_id(dto.id)
        assert order.status is OrderStatus.FAILED
        assert len(order.stock_validation.unavailable_items) == 1

    def test_failed_deduction_parks_order_on_hold(self):
        # Each line fits on its own, both together do not.
        mug = simple_product("Mug", stock=5)
        handler, order_repo, product_repo, _ = _setup([mug])

        dto = handler.handle(ALICE, [OrderItemSpec(mug.id, 3), OrderItemSpec(mug.id, 3)])

        order = order_repo.get_by_id(dto.id)
        assert order.status is OrderStatus.ON_HOLD
        assert order.status_reason == (
            "Stock deduction failed: Insufficient stock for Mug (need 3, have 2)"
        )
        assert not order.stock_validation.stock_deducted
        assert product_repo.get_by_id(mug.id).stock_quantity == 2


class TestDeferredValidation:

    def test_order_stays_pending_until_task_runs(self):
        tasks = []
        mug = simple_product("Mug", stock=5)
        handler, order_repo, _, _ = _setup([mug], dispatch=tasks.append)

        dto = handler.handle(ALICE, [OrderItemSpec(mug.id, 1)])

        assert order_repo.get_by_id(dto.id).status is OrderStatus.PENDING
        [task] = tasks
        assert task.name == f"validate-order-{dto.id}"

        task()
        assert order_repo.get_by_id(dto.id).status is OrderStatus.PROCESSING

    def test_task_runs_only_once(self):
        tasks = []
        mug = simple_product("Mug", stock=5)
        handler, _, product_repo, _ = _setup([mug], dispatch=tasks.append)
        handler.handle(ALICE, [OrderItemSpec(mug.id, 2)])

        tasks[0]()
        tasks[0]()

        assert product_repo.get_by_id(mug.id).stock_quantity == 3

    def test_already_validated_order_is_skipped(self):
        tasks = []
        mug = simple_product("Mug", stock=5)
        handler, order_repo, product_repo, _ = _setup([mug], dispatch=tasks.append)
        dto = handler.handle(ALICE, [OrderItemSpec(mug.id, 2)])
        tasks[0]()

        ValidateNewOrderTask(dto.id, order_repo, product_repo)()

        assert product_repo.get_by_id(mug.id).stock_quantity == 3

    def test_unexpected_error_forces_failed(self):
        class ExplodingProductRepository(FakeProductRepository):
            def get_by_id(self, product_id):
                raise RuntimeError("boom")

        tasks = []
        mug = simple_product("Mug", stock=5)
        handler, order_repo, _, _ = _setup([mug], dispatch=tasks.append)
        dto = handler.handle(ALICE, [OrderItemSpec(mug.id, 1)])

        ValidateNewOrderTask(dto.id, order_repo, ExplodingProductRepository())()

        order = order_repo.get_by_id(dto.id)
        assert order.status is OrderStatus.FAILED
        assert order.status_reason == SYSTEM_ERROR_REASON

    def test_store_failure_during_validation_fails_order(self):
        tasks = []
        mug = simple_product("Mug", stock=5)
        handler, order_repo, _, _ = _setup([mug], dispatch=tasks.append)
        dto = handler.handle(ALICE, [OrderItemSpec(mug.id, 1)])

        ValidateNewOrderTask(dto.id, order_repo, BrokenProductRepository())()

        order = order_repo.get_by_id(dto.id)
        assert order.status is OrderStatus.FAILED
        assert order.status_reason == SYSTEM_ERROR_REASON
        assert order.stock_validation.is_validated
        assert order.stock_validation.validation_result is ValidationOutcome.NONE_AVAILABLE


class TestCustomerResolution:

    def test_unknown_email_creates_customer(self):
        mug = simple_product("Mug", stock=5)
        handler, _, _, customer_repo = _setup([mug])

        handler.handle(
            CustomerSpec(email="Bob@Example.com", first_name="Bob", last_name="Sen"),
            [OrderItemSpec(mug.id, 1)],
        )

        [bob] = customer_repo.all()
        assert bob.email == "bob@example.com"

    def test_known_email_reuses_customer(self):
        existing = Customer.create("Alice", "Roy", "alice@example.com")
        mug = simple_product("Mug", stock=5)
        handler, order_repo, _, customer_repo = _setup([mug], customers=[existing])

        dto = handler.handle(CustomerSpec(email="alice@example.com"), [OrderItemSpec(mug.id, 1)])

        assert len(customer_repo.all()) == 1
        assert order_repo.get_by_id(dto.id).customer_id == existing.id

    def test_customer_by_id(self):
        existing = Customer.create("Alice", "Roy", "alice@example.com")
        mug = simple_product("Mug", stock=5)
        handler, _, _, _ = _setup([mug], customers=[existing])

        dto = handler.handle(CustomerSpec(customer_id=existing.id), [OrderItemSpec(mug.id, 1)])
        assert dto.customer_name == "Alice Roy"

    def test_unknown_customer_id_rejected(self):
        handler, _, _, _ = _setup()
        with pytest.raises(CustomerNotFoundError):
            handler.handle(CustomerSpec(customer_id=new_id()), [OrderItemSpec(new_id(), 1)])

    def test_new_customer_needs_names(self):
        mug = simple_product("Mug", stock=5)
        handler, _, _, _ = _setup([mug])
        with pytest.raises(ValidationError, match="first name and last name"):
            handler.handle(CustomerSpec(email="x@example.com"), [OrderItemSpec(mug.id, 1)])

    def test_no_customer_rejected(self):
        handler, _, _, _ = _setup()
        with pytest.raises(ValidationError, match="Customer ID or customer email"):
            handler.handle(CustomerSpec(), [OrderItemSpec(new_id(), 1)])


class TestCreateOrderValidation:

    def test_empty_items_rejected(self):
        handler, _, _, _ = _setup()
        with pytest.raises(ValidationError, match="items are required"):
            handler.handle(ALICE, [])

    def test_unknown_product_rejected(self):
        handler, order_repo, _, _ = _setup()
        with pytest.raises(ProductNotFoundError) as exc_info:
            handler.handle(ALICE, [OrderItemSpec(new_id(), 1)])
        assert order_repo.all() == []
        assert exc_info.value.status_code == 404

    def test_malformed_product_id_rejected(self):
        handler, _, _, _ = _setup()
        with pytest.raises(InvalidIdentifierError):
            handler.handle(ALICE, [OrderItemSpec("widget", 1)])

    def test_zero_quantity_rejected(self):
        mug = simple_product("Mug", stock=5)
        handler, _, _, _ = _setup([mug])
        with pytest.raises(ValidationError, match="must be positive"):
            handler.handle(ALICE, [OrderItemSpec(mug.id, 0)])
