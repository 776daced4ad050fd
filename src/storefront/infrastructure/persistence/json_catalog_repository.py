"""JSON-file-backed implementation of CatalogRepository."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from pathlib import Path

from storefront.domain.exceptions import PersistenceFailure
from storefront.domain.model.catalog import (
    CatalogBatch,
    CatalogEntry,
    CatalogImage,
    CatalogVariant,
)
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.catalog_repository import CatalogRepository
from storefront.infrastructure.persistence.json_file import JsonRecordFile


class JsonCatalogRepository(CatalogRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonRecordFile(file_path)

    # --- CatalogRepository interface --------------------------------------------

    def load(self) -> CatalogBatch | None:
        with self._file.lock:
            records = self._file.load()
        if not records:
            return None
        try:
            return self._to_domain(records[-1])
        except (KeyError, TypeError, ValueError, ArithmeticError) as exc:
            raise PersistenceFailure(f"Malformed catalog snapshot: {exc}") from exc

    def store(self, batch: CatalogBatch) -> None:
        with self._file.lock:
            self._file.persist([self._to_raw(batch)])

    def clear(self) -> None:
        with self._file.lock:
            self._file.persist([])

    # --- Serialization ----------------------------------------------------------

    @staticmethod
    def _to_raw(batch: CatalogBatch) -> dict:
        return {
            "fetched_at": batch.fetched_at.isoformat(),
            "entries": [
                {
                    "product_id": e.product_id,
                    "title": e.title,
                    "description": e.description,
                    "price": str(e.price.amount),
                    "currency": e.currency,
                    "handle": e.handle,
                    "tags": list(e.tags),
                    "images": [{"url": i.url, "alt": i.alt} for i in e.images],
                    "variants": [
                        {
                            "variant_id": v.variant_id,
                            "title": v.title,
                            "price": str(v.price.amount),
                            "sku": v.sku,
                            "compare_at_price": (
                                str(v.compare_at_price.amount) if v.compare_at_price else None
                            ),
                            "in_stock": v.in_stock,
                            "quantity_available": v.quantity_available,
                        }
                        for v in e.variants
                    ],
                }
                for e in batch.entries
            ],
        }

    @staticmethod
    def _to_domain(raw: dict) -> CatalogBatch:
        fetched_at = datetime.fromisoformat(raw["fetched_at"])
        entries = []
        for e in raw["entries"]:
            currency = e.get("currency", "USD")
            entries.append(
                CatalogEntry(
                    product_id=e["product_id"],
                    title=e["title"],
                    description=e.get("description", ""),
                    price=Money(Decimal(e["price"]), currency),
                    handle=e.get("handle", ""),
                    tags=tuple(e.get("tags", [])),
                    images=tuple(CatalogImage(i["url"], i.get("alt")) for i in e.get("images", [])),
                    variants=tuple(
                        CatalogVariant(
                            variant_id=v["variant_id"],
                            title=v["title"],
                            price=Money(Decimal(v["price"]), currency),
                            sku=v.get("sku"),
                            compare_at_price=(
                                Money(Decimal(v["compare_at_price"]), currency)
                                if v.get("compare_at_price")
                                else None
                            ),
                            in_stock=v.get("in_stock", True),
                            quantity_available=v.get("quantity_available", 0),
                        )
                        for v in e.get("variants", [])
                    ),
                    fetched_at=fetched_at,
                )
            )
        return CatalogBatch(entries=tuple(entries), fetched_at=fetched_at)
