"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.

The data directory defaults to ``<repo>/data`` and can be overridden by
the ``STOREADMIN_DATA_DIR`` environment variable or ``configure()``.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from pathlib import Path

from storeadmin.infrastructure.deferred import run_in_background
from storeadmin.infrastructure.persistence.json_customer_repository import (
    JsonCustomerRepository,
)
from storeadmin.infrastructure.persistence.json_order_repository import (
    JsonOrderRepository,
)
from storeadmin.infrastructure.persistence.json_product_repository import (
    JsonProductRepository,
)

# When installed in editable mode the project root is the repo root.
_DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"

_data_dir: Path | None = None


def configure(data_dir: Path | str | None) -> None:
    global _data_dir
    _data_dir = Path(data_dir) if data_dir else None


def data_dir() -> Path:
    if _data_dir is not None:
        return _data_dir
    return Path(os.environ.get("STOREADMIN_DATA_DIR", _DEFAULT_DATA_DIR))


def product_repository() -> JsonProductRepository:
    return JsonProductRepository(data_dir() / "products.json")


def order_repository() -> JsonOrderRepository:
    return JsonOrderRepository(data_dir() / "orders.json")


def customer_repository() -> JsonCustomerRepository:
    return JsonCustomerRepository(data_dir() / "customers.json")


def dispatcher() -> Callable[[Callable[[], None]], object]:
    """How deferred order validation runs: on its own thread."""
    return run_in_background
