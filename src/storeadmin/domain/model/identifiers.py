"""Document identifiers.

Products, variants, orders and customers are keyed by 24-character hex
ObjectIds, the same ids the document store assigns.
"""

from __future__ import annotations

from bson import ObjectId

from storeadmin.domain.exceptions import InvalidIdentifierError


def new_id() -> str:
    return str(ObjectId())


def is_valid_id(value: object) -> bool:
    return isinstance(value, str) and ObjectId.is_valid(value)


def require_valid_id(value: object, kind: str) -> str:
    """Return *value* unchanged or raise InvalidIdentifierError."""
    if not is_valid_id(value):
        raise InvalidIdentifierError(kind, value)
    return value  # type: ignore[return-value]
