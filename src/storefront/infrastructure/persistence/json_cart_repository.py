"""JSON-file-backed implementation of CartRepository."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from pathlib import Path

from storefront.domain.model.cart import Cart, CartLine, ProductSnapshot
from storefront.domain.model.value_objects import ActorKey, Money, Quantity
from storefront.domain.repository.cart_repository import CartRepository
from storefront.infrastructure.persistence.json_file import JsonRecordFile


class JsonCartRepository(CartRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonRecordFile(file_path)

    # --- CartRepository interface -----------------------------------------------

    def get(self, actor_key: ActorKey) -> Cart | None:
        key = str(actor_key)
        with self._file.lock:
            records = self._file.load()
        for raw in records:
            if raw["actor_key"] == key:
                return self._to_domain(raw)
        return None

    def commit(self, saves: list[Cart], deletes: list[ActorKey]) -> None:
        dropped = {str(k) for k in deletes}
        with self._file.lock:
            records = [r for r in self._file.load() if r["actor_key"] not in dropped]

            # Upsert: replace if exists, otherwise append
            for cart in saves:
                raw_cart = self._to_raw(cart)
                for i, raw in enumerate(records):
                    if raw["actor_key"] == raw_cart["actor_key"]:
                        records[i] = raw_cart
                        break
                else:
                    records.append(raw_cart)

            self._file.persist(records)

    # --- Serialization ----------------------------------------------------------

    @staticmethod
    def _to_raw(cart: Cart) -> dict:
        return {
            "actor_key": str(cart.actor_key),
            "updated_at": cart.updated_at.isoformat(),
            "lines": [
                {
                    "product_id": line.product_id,
                    "quantity": line.quantity.value,
                    "unit_price": str(line.unit_price.amount),
                    "currency": line.unit_price.currency,
                    "name": line.snapshot.name,
                    "badge": line.snapshot.badge,
                    "palette": list(line.snapshot.palette),
                    "variant_id": line.variant_id,
                    "added_at": line.added_at.isoformat(),
                }
                for line in cart.lines
            ],
        }

    @staticmethod
    def _to_domain(raw: dict) -> Cart:
        lines = [
            CartLine(
                product_id=i["product_id"],
                quantity=Quantity(i["quantity"]),
                unit_price=Money(Decimal(i["unit_price"]), i.get("currency", "USD")),
                snapshot=ProductSnapshot(
                    name=i["name"],
                    badge=i.get("badge", ""),
                    palette=tuple(i.get("palette", [])),
                ),
                variant_id=i.get("variant_id"),
                added_at=datetime.fromisoformat(i["added_at"]),
            )
            for i in raw["lines"]
        ]
        return Cart(
            actor_key=ActorKey.parse(raw["actor_key"]),
            lines=lines,
            updated_at=datetime.fromisoformat(raw["updated_at"]),
        )
