"""JSON-file-backed implementation of OrderRepository."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from pathlib import Path

from storefront.domain.model.order import Order, OrderLine, OrderStatus
from storefront.domain.model.value_objects import ActorKey, Money
from storefront.domain.repository.order_repository import OrderRepository
from storefront.infrastructure.persistence.json_file import JsonRecordFile


class JsonOrderRepository(OrderRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonRecordFile(file_path)

    # --- OrderRepository interface ----------------------------------------------

    def get_by_order_id(self, order_id: str) -> Order | None:
        return self._find("order_id", order_id)

    def get_by_checkout_id(self, checkout_id: str) -> Order | None:
        return self._find("checkout_id", checkout_id)

    def save(self, order: Order) -> None:
        with self._file.lock:
            orders = self._file.load()

            if order.id is None:
                order.id = max((o["id"] for o in orders), default=0) + 1

            # Upsert: replace if exists, otherwise append
            for i, raw in enumerate(orders):
                if raw["id"] == order.id:
                    orders[i] = self._to_raw(order)
                    break
            else:
                orders.append(self._to_raw(order))

            self._file.persist(orders)

    # --- Serialization ----------------------------------------------------------

    def _find(self, field: str, value) -> Order | None:
        with self._file.lock:
            orders = self._file.load()
        for raw in orders:
            if raw.get(field) == value:
                return self._to_domain(raw)
        return None

    @staticmethod
    def _to_raw(order: Order) -> dict:
        return {
            "id": order.id,
            "order_id": order.order_id,
            "checkout_id": order.checkout_id,
            "actor_key": str(order.actor_key),
            "status": order.status.value,
            "total_amount": str(order.total_amount.amount),
            "currency": order.currency,
            "created_at": order.created_at.isoformat(),
            "updated_at": order.updated_at.isoformat(),
            "lines": [
                {
                    "product_id": line.product_id,
                    "title": line.title,
                    "quantity": line.quantity,
                    "unit_price": str(line.unit_price.amount),
                    "currency": line.unit_price.currency,
                    "sku": line.sku,
                }
                for line in order.lines
            ],
        }

    @staticmethod
    def _to_domain(raw: dict) -> Order:
        lines = [
            OrderLine(
                product_id=i["product_id"],
                title=i["title"],
                quantity=i["quantity"],
                unit_price=Money(Decimal(i["unit_price"]), i.get("currency", "USD")),
                sku=i.get("sku"),
            )
            for i in raw["lines"]
        ]
        return Order(
            id=raw["id"],
            actor_key=ActorKey.parse(raw["actor_key"]),
            total_amount=Money(Decimal(raw["total_amount"]), raw.get("currency", "USD")),
            lines=lines,
            status=OrderStatus(raw["status"]),
            order_id=raw.get("order_id"),
            checkout_id=raw.get("checkout_id"),
            created_at=datetime.fromisoformat(raw["created_at"]),
            updated_at=datetime.fromisoformat(raw["updated_at"]),
        )
