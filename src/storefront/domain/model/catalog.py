"""Catalog entries cached from the commerce platform.

Entries are immutable. A refresh replaces the whole batch; nothing is ever
patched in place.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta

from storefront.domain.model.value_objects import Money


@dataclass(frozen=True)
class CatalogImage:
    url: str
    alt: str | None = None


@dataclass(frozen=True)
class CatalogVariant:
    variant_id: str
    title: str
    price: Money
    sku: str | None = None
    compare_at_price: Money | None = None
    in_stock: bool = True
    quantity_available: int = 0


@dataclass(frozen=True)
class CatalogEntry:
    product_id: str
    title: str
    description: str
    price: Money
    images: tuple[CatalogImage, ...] = ()
    variants: tuple[CatalogVariant, ...] = ()
    handle: str = ""
    tags: tuple[str, ...] = ()
    fetched_at: datetime | None = None

    @property
    def currency(self) -> str:
        return self.price.currency

    @property
    def sold_variant(self) -> CatalogVariant | None:
        """Products are sold as their first variant."""
        return self.variants[0] if self.variants else None

    @property
    def inventory_count(self) -> int:
        return sum(v.quantity_available for v in self.variants)


@dataclass(frozen=True)
class CatalogBatch:
    """All entries returned by one upstream fetch."""

    entries: tuple[CatalogEntry, ...]
    fetched_at: datetime
    _by_id: dict[str, CatalogEntry] = field(
        init=False, repr=False, compare=False, default_factory=dict
    )

    def __post_init__(self) -> None:
        self._by_id.update({e.product_id: e for e in self.entries})

    def age(self, now: datetime) -> timedelta:
        return now - self.fetched_at

    def is_fresh(self, now: datetime, ttl: timedelta) -> bool:
        return self.age(now) < ttl

    def find(self, product_id: str) -> CatalogEntry | None:
        return self._by_id.get(product_id)


@dataclass(frozen=True)
class CatalogView:
    """What the product cache hands back to callers.

    ``stale`` is set when the upstream refresh failed and an older batch is
    being served instead.
    """

    entries: tuple[CatalogEntry, ...]
    fetched_at: datetime
    stale: bool = False
