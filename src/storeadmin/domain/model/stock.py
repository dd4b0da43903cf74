"""Stock validation value types.

A ``ValidationItem`` is one requested (product, variant, quantity) line.
The validator classifies every item into exactly one of three lists of a
``StockValidationResult``; the mutator reports ``StockMutationResult``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from storeadmin.domain.model.value_objects import AttributeSelection, Money


class ValidationOutcome(Enum):
    ALL_AVAILABLE = "all_available"
    PARTIAL_AVAILABLE = "partial_available"
    NONE_AVAILABLE = "none_available"


@dataclass(frozen=True)
class ValidationItem:
    """A requested order line, as seen by the stock validator and mutator."""

    product_id: str
    name: str
    requested_quantity: int
    price: Money
    variant_id: str | None = None
    selected_attributes: AttributeSelection | None = None

    @property
    def targets_variant(self) -> bool:
        return bool(self.variant_id) or bool(self.selected_attributes)


@dataclass(frozen=True)
class AvailableItem:
    product_id: str
    name: str
    available_quantity: int
    requested_quantity: int
    actual_quantity: int  # quantity that can be fulfilled
    variant_id: str | None = None
    variant_sku: str | None = None


@dataclass(frozen=True)
class ShortfallItem:
    """A partially available or unavailable item."""

    product_id: str
    name: str
    available_quantity: int
    requested_quantity: int
    shortfall: int
    variant_id: str | None = None
    variant_sku: str | None = None


@dataclass(frozen=True)
class StockValidationResult:
    validation_result: ValidationOutcome
    available_items: list[AvailableItem] = field(default_factory=list)
    partially_available_items: list[ShortfallItem] = field(default_factory=list)
    unavailable_items: list[ShortfallItem] = field(default_factory=list)
    error_message: str | None = None

    @property
    def is_valid(self) -> bool:
        return self.validation_result is ValidationOutcome.ALL_AVAILABLE

    @staticmethod
    def classify(
        available: list[AvailableItem],
        partial: list[ShortfallItem],
        unavailable: list[ShortfallItem],
        error_message: str | None = None,
    ) -> StockValidationResult:
        """Build a result, deriving the aggregate outcome from the three lists."""
        if not partial and not unavailable:
            outcome = ValidationOutcome.ALL_AVAILABLE
        elif available or partial:
            outcome = ValidationOutcome.PARTIAL_AVAILABLE
        else:
            outcome = ValidationOutcome.NONE_AVAILABLE
        return StockValidationResult(
            validation_result=outcome,
            available_items=list(available),
            partially_available_items=list(partial),
            unavailable_items=list(unavailable),
            error_message=error_message,
        )


@dataclass(frozen=True)
class StockMutationResult:
    errors: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.errors
