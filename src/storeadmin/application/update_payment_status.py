"""Application service: Update Payment Status use case."""

from __future__ import annotations

from storeadmin.application.dto import OrderDTO, order_to_dto
from storeadmin.domain.exceptions import OrderNotFoundError, ValidationError
from storeadmin.domain.model.identifiers import require_valid_id
from storeadmin.domain.model.order import PaymentStatus
from storeadmin.domain.repository.order_repository import OrderRepository


class UpdatePaymentStatusHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, order_id: str, payment_status: str) -> OrderDTO:
        """Mark an order paid or unpaid; fulfillment status is untouched."""
        order_id = require_valid_id(order_id, "order")
        try:
            status = PaymentStatus(payment_status)
        except ValueError:
            raise ValidationError('Invalid payment status. Must be "paid" or "unpaid".')

        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise OrderNotFoundError(order_id)

        order.change_payment_status(status)
        self._order_repo.save(order)
        return order_to_dto(order)
