"""JSON-file-backed implementation of OrderRepository."""

from __future__ import annotations

from dataclasses import asdict
from datetime import datetime
from pathlib import Path

from storeadmin.domain.model.order import (
    Order,
    OrderLineItem,
    OrderStatus,
    PaymentStatus,
    ShippingAddress,
    StockValidationSnapshot,
)
from storeadmin.domain.model.stock import AvailableItem, ShortfallItem, ValidationOutcome
from storeadmin.domain.model.value_objects import AttributeSelection, Money, Quantity
from storeadmin.domain.repository.order_repository import OrderRepository
from storeadmin.infrastructure.persistence.json_file import JsonFile


class JsonOrderRepository(OrderRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path)

    # --- OrderRepository interface --------------------------------------------

    def get_by_id(self, order_id: str) -> Order | None:
        for raw in self._file.load():
            if raw["id"] == order_id:
                return self._to_domain(raw)
        return None

    def save(self, order: Order) -> None:
        self._file.upsert(self._to_raw(order))

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(order: Order) -> dict:
        snapshot = order.stock_validation
        return {
            "id": order.id,
            "order_number": order.order_number,
            "status": order.status.value,
            "status_reason": order.status_reason,
            "customer_id": order.customer_id,
            "customer_name": order.customer_name,
            "shipping_address": (
                asdict(order.shipping_address) if order.shipping_address else None
            ),
            "payment_method": order.payment_method,
            "payment_status": order.payment_status.value,
            "is_paid": order.is_paid,
            "paid_at": _iso(order.paid_at),
            "is_delivered": order.is_delivered,
            "delivered_at": _iso(order.delivered_at),
            "delivery_note": order.delivery_note,
            "created_at": order.created_at.isoformat(),
            "updated_at": order.updated_at.isoformat(),
            "items": [
                {
                    "product_id": item.product_id,
                    "name": item.name,
                    "sku": item.sku,
                    "image": item.image,
                    "quantity": item.quantity.value,
                    "unit_price": str(item.unit_price.amount),
                    "currency": item.unit_price.currency,
                    "selected_attributes": (
                        [list(pair) for pair in item.selected_attributes]
                        if item.selected_attributes
                        else None
                    ),
                    "is_variant_product": item.is_variant_product,
                    "variant_id": item.variant_id,
                }
                for item in order.items
            ],
            "stock_validation": {
                "is_validated": snapshot.is_validated,
                "validation_date": _iso(snapshot.validation_date),
                "validation_result": (
                    snapshot.validation_result.value
                    if snapshot.validation_result
                    else None
                ),
                "available_items": [asdict(i) for i in snapshot.available_items],
                "partially_available_items": [
                    asdict(i) for i in snapshot.partially_available_items
                ],
                "unavailable_items": [asdict(i) for i in snapshot.unavailable_items],
                "stock_deducted": snapshot.stock_deducted,
                "stock_deducted_at": _iso(snapshot.stock_deducted_at),
            },
        }

    @staticmethod
    def _to_domain(raw: dict) -> Order:
        items = [
            OrderLineItem(
                product_id=i["product_id"],
                name=i["name"],
                sku=i.get("sku", ""),
                image=i.get("image"),
                quantity=Quantity(i["quantity"]),
                unit_price=Money.of(i["unit_price"], i.get("currency", "USD")),
                selected_attributes=(
                    AttributeSelection(tuple((k, v) for k, v in i["selected_attributes"]))
                    if i.get("selected_attributes")
                    else None
                ),
                is_variant_product=i.get("is_variant_product", False),
                variant_id=i.get("variant_id"),
            )
            for i in raw["items"]
        ]

        sv = raw.get("stock_validation") or {}
        snapshot = StockValidationSnapshot(
            is_validated=sv.get("is_validated", False),
            validation_date=_dt(sv.get("validation_date")),
            validation_result=(
                ValidationOutcome(sv["validation_result"])
                if sv.get("validation_result")
                else None
            ),
            available_items=[AvailableItem(**i) for i in sv.get("available_items", [])],
            partially_available_items=[
                ShortfallItem(**i) for i in sv.get("partially_available_items", [])
            ],
            unavailable_items=[
                ShortfallItem(**i) for i in sv.get("unavailable_items", [])
            ],
            stock_deducted=sv.get("stock_deducted", False),
            stock_deducted_at=_dt(sv.get("stock_deducted_at")),
        )

        address = raw.get("shipping_address")
        return Order(
            id=raw["id"],
            order_number=raw["order_number"],
            items=items,
            status=OrderStatus(raw["status"]),
            status_reason=raw.get("status_reason", ""),
            customer_id=raw.get("customer_id"),
            customer_name=raw.get("customer_name", ""),
            shipping_address=ShippingAddress(**address) if address else None,
            payment_method=raw.get("payment_method", "pending"),
            payment_status=PaymentStatus(raw.get("payment_status", "unpaid")),
            is_paid=raw.get("is_paid", False),
            paid_at=_dt(raw.get("paid_at")),
            is_delivered=raw.get("is_delivered", False),
            delivered_at=_dt(raw.get("delivered_at")),
            delivery_note=raw.get("delivery_note", ""),
            stock_validation=snapshot,
            created_at=datetime.fromisoformat(raw["created_at"]),
            updated_at=datetime.fromisoformat(raw.get("updated_at", raw["created_at"])),
        )


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _dt(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None
