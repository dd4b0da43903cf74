"""Abstract repository for Order aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from storeadmin.domain.model.order import Order


class OrderRepository(ABC):

    @abstractmethod
    def get_by_id(self, order_id: str) -> Order | None:
        """Return an order by its ID, or None if not found."""

    @abstractmethod
    def save(self, order: Order) -> None:
        """Persist a new or updated order."""

    def update_by_id(self, order_id: str, **changes: object) -> Order | None:
        """Load, set the given attributes, save.  None if the order is gone.

        A plain read-then-write: there is no compare-and-swap guard, so a
        concurrent save of the same order can be overwritten.
        """
        order = self.get_by_id(order_id)
        if order is None:
            return None
        for name, value in changes.items():
            if not hasattr(order, name):
                raise AttributeError(f"Order has no field {name!r}")
            setattr(order, name, value)
        order.touch()
        self.save(order)
        return order
