"""Value objects shared by the catalog and the orders.

Immutable and compared by value.  Construction validates, so a price,
quantity or attribute selection that exists is a legal one.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from storeadmin.domain.exceptions import ValidationError


@dataclass(frozen=True)
class Money:
    """A non-negative price in one currency, held as a Decimal."""

    amount: Decimal
    currency: str = "USD"

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            raise ValidationError(
                f"Money amount must be a Decimal, got {type(self.amount).__name__}"
            )
        if self.amount < 0:
            raise ValidationError(f"Money amount cannot be negative, got {self.amount}")

    def __add__(self, other: Money) -> Money:
        self._check_currency(other)
        return Money(self.amount + other.amount, self.currency)

    def __mul__(self, quantity: int) -> Money:
        """Line total: unit price times a whole number of units."""
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            raise TypeError(f"Can only multiply Money by int, got {type(quantity).__name__}")
        return Money(self.amount * quantity, self.currency)

    def __lt__(self, other: Money) -> bool:
        self._check_currency(other)
        return self.amount < other.amount

    def __str__(self) -> str:
        return f"${self.amount:.2f}"

    def _check_currency(self, other: Money) -> None:
        if self.currency != other.currency:
            raise ValidationError(f"Cannot combine {self.currency} with {other.currency}")

    @staticmethod
    def of(amount: str | float | int | Decimal, currency: str = "USD") -> Money:
        """Parse user or stored input; floats go through ``str`` to keep their digits."""
        if isinstance(amount, bool):
            raise ValidationError(f"Invalid money amount: {amount!r}")
        try:
            value = Decimal(str(amount).strip())
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"Invalid money amount: {amount!r}") from exc
        if not value.is_finite():
            raise ValidationError(f"Invalid money amount: {amount!r}")
        return Money(value, currency)

    @staticmethod
    def zero(currency: str = "USD") -> Money:
        return Money(Decimal("0.00"), currency)

    @staticmethod
    def total(amounts: Iterable[Money]) -> Money:
        """Sum of *amounts*; zero for an empty iterable."""
        result: Money | None = None
        for amount in amounts:
            result = amount if result is None else result + amount
        return result if result is not None else Money.zero()


@dataclass(frozen=True)
class Quantity:
    """Units of one order line: a whole number, at least one."""

    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ValidationError(
                f"Quantity must be an integer, got {type(self.value).__name__}"
            )
        if self.value < 1:
            raise ValidationError("Quantity must be positive")

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class AttributeSelection:
    """Ordered attribute-name -> value pairs, e.g. Color=Red, Size=L.

    Used both for a variant's full attribute combination and for the
    (possibly partial) selection a customer submits.  Insertion order is
    kept for display; matching ignores it.
    """

    pairs: tuple[tuple[str, str], ...] = ()

    def __post_init__(self) -> None:
        names = [name for name, _ in self.pairs]
        if len(set(names)) != len(names):
            raise ValidationError(f"Duplicate attribute in selection: {names}")
        for name, value in self.pairs:
            if not name or not value:
                raise ValidationError("Attribute names and values must be non-empty")

    @staticmethod
    def of(mapping: Mapping[str, str] | AttributeSelection | None) -> AttributeSelection:
        if isinstance(mapping, AttributeSelection):
            return mapping
        return AttributeSelection(
            tuple((str(name), str(value)) for name, value in (mapping or {}).items())
        )

    def get(self, name: str) -> str | None:
        for key, value in self.pairs:
            if key == name:
                return value
        return None

    def names(self) -> list[str]:
        return [name for name, _ in self.pairs]

    def as_dict(self) -> dict[str, str]:
        return dict(self.pairs)

    def matches(self, selection: AttributeSelection) -> bool:
        """True when every attribute in *selection* has the same value here.

        An empty selection never matches: nothing is inferred for
        attributes the caller did not choose.
        """
        if not selection.pairs:
            return False
        return all(self.get(name) == value for name, value in selection.pairs)

    def same_combination(self, other: AttributeSelection) -> bool:
        return self.as_dict() == other.as_dict()

    def __iter__(self) -> Iterator[tuple[str, str]]:
        return iter(self.pairs)

    def __len__(self) -> int:
        return len(self.pairs)

    def __str__(self) -> str:
        return ", ".join(f"{name}={value}" for name, value in self.pairs)
