"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.

Each class carries a ``status_code`` mirroring the HTTP status an API
surface would answer with (400 caller error, 404 missing, 500 system fault).
Running out of stock is *not* an exception: it is reported as data by the
stock validator and the stock mutator.
"""


class DomainException(Exception):
    """Base class for all domain errors."""

    status_code = 400


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class InvalidIdentifierError(ValidationError):
    """A product, variant, order or customer id is malformed."""

    def __init__(self, kind: str, value: object) -> None:
        self.kind = kind
        self.value = value
        super().__init__(f"Invalid {kind} ID: {value!r}")


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""

    status_code = 404


class ProductNotFoundError(EntityNotFoundError):

    def __init__(self, product_id: str) -> None:
        self.product_id = product_id
        super().__init__(f"Product not found: {product_id}")


class VariantNotFoundError(EntityNotFoundError):

    def __init__(self, product_id: str, variant_id: str | None = None) -> None:
        self.product_id = product_id
        self.variant_id = variant_id
        if variant_id:
            msg = f"Variant not found: {variant_id} for product {product_id}"
        else:
            msg = f"No variant matches the selected attributes for product {product_id}"
        super().__init__(msg)


class OrderNotFoundError(EntityNotFoundError):

    def __init__(self, order_id: str) -> None:
        self.order_id = order_id
        super().__init__(f"Order not found: {order_id}")


class CustomerNotFoundError(EntityNotFoundError):

    def __init__(self, customer_id: str) -> None:
        self.customer_id = customer_id
        super().__init__(f"Customer not found: {customer_id}")


class PersistenceError(DomainException):
    """The backing store failed to read or write a document."""

    status_code = 500


class StockDeductionError(DomainException):
    """Stock could not be deducted although validation reported it available.

    Raised when a concurrent change drained stock between validation and
    deduction.  Stock may be left partially adjusted; ``errors`` lists the
    per-item failures reported by the mutator.
    """

    status_code = 500

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        self.errors = list(errors or [])
        super().__init__(message)
