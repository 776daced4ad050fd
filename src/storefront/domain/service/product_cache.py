"""Domain service: ProductCache.

Time-boxed cache of the upstream catalog. Availability beats freshness:

1. A batch younger than the TTL is served without touching the platform.
2. Otherwise the whole catalog is refetched and the batch swapped in one
   reference assignment, so readers see either the old or the new batch,
   never a mix.
3. If the refetch fails the previous batch is served, flagged ``stale``.
   Only when nothing was ever cached does the failure reach the caller.

Refreshes are single-flight: concurrent readers that find the batch
expired queue on one lock and reuse whatever the first of them fetched.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass, replace
from datetime import datetime, timedelta, timezone

import structlog

from storefront.domain.exceptions import (
    EntityNotFoundError,
    PersistenceFailure,
    UpstreamUnavailable,
)
from storefront.domain.gateway.commerce_platform import CommercePlatform
from storefront.domain.model.catalog import CatalogBatch, CatalogEntry, CatalogView
from storefront.domain.repository.catalog_repository import CatalogRepository

logger = structlog.get_logger(__name__)

DEFAULT_TTL = timedelta(minutes=15)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class CatalogLookup:
    entry: CatalogEntry
    stale: bool = False


@dataclass(frozen=True)
class InventoryLevel:
    product_id: str
    title: str
    inventory_count: int


class ProductCache:

    def __init__(
        self,
        platform: CommercePlatform,
        ttl: timedelta = DEFAULT_TTL,
        clock: Callable[[], datetime] = _utcnow,
        snapshots: CatalogRepository | None = None,
    ) -> None:
        self._platform = platform
        self._ttl = ttl
        self._clock = clock
        self._snapshots = snapshots
        self._batch: CatalogBatch | None = self._recall()
        # A batch is fresh only if fetched under the current expire() generation.
        self._generation = 0
        self._batch_generation = 0
        self._generation_lock = threading.Lock()
        self._refresh_lock = threading.Lock()

    # --- Reads ------------------------------------------------------------------

    def list(self) -> CatalogView:
        batch = self._batch
        if batch is not None and self._is_fresh(batch):
            return _view(batch)
        return self._refresh_or_stale(seen=batch)

    def get(self, product_id: str) -> CatalogLookup:
        """Look up one product, refreshing when the cached batch lacks it."""
        batch = self._batch
        if batch is not None and self._is_fresh(batch):
            entry = batch.find(product_id)
            if entry is not None:
                return CatalogLookup(entry)

        view = self._refresh_or_stale(seen=batch)
        for entry in view.entries:
            if entry.product_id == product_id:
                return CatalogLookup(entry, stale=view.stale)

        if view.stale:
            raise UpstreamUnavailable(
                f"Product '{product_id}' is not cached and the catalog is unreachable"
            )
        raise EntityNotFoundError(f"Product not found: '{product_id}'")

    def inventory_levels(self) -> list[InventoryLevel]:
        view = self.list()
        levels = [
            InventoryLevel(e.product_id, e.title, e.inventory_count) for e in view.entries
        ]
        return sorted(levels, key=lambda level: level.title)

    # --- Invalidation -----------------------------------------------------------

    def invalidate(self) -> None:
        """Forget the cached batch entirely."""
        self._batch = None
        if self._snapshots is not None:
            self._snapshots.clear()
        logger.info("Product cache cleared")

    def expire(self) -> None:
        """Keep the cached batch for stale serving but refresh on next read."""
        with self._generation_lock:
            self._generation += 1
        logger.info("Product cache marked stale")

    # --- Internal helpers -------------------------------------------------------

    def _is_fresh(self, batch: CatalogBatch) -> bool:
        if self._batch_generation != self._generation:
            return False
        return batch.is_fresh(self._clock(), self._ttl)

    def _refresh_or_stale(self, seen: CatalogBatch | None) -> CatalogView:
        with self._refresh_lock:
            current = self._batch
            if current is not None and current is not seen and self._is_fresh(current):
                return _view(current)

            with self._generation_lock:
                generation = self._generation
            try:
                logger.info("Fetching products from upstream")
                entries = self._platform.fetch_catalog()
            except UpstreamUnavailable as exc:
                if current is None:
                    logger.error("Catalog unavailable and nothing cached", error=str(exc))
                    raise
                logger.warning(
                    "Serving stale cached products due to upstream failure",
                    error=str(exc),
                    age_seconds=int(current.age(self._clock()).total_seconds()),
                )
                return _view(current, stale=True)

            now = self._clock()
            fresh = CatalogBatch(
                entries=tuple(replace(e, fetched_at=now) for e in entries),
                fetched_at=now,
            )
            self._batch = fresh
            self._batch_generation = generation
            self._remember(fresh)
            logger.info("Product cache refreshed", count=len(fresh.entries))
            return _view(fresh)

    def _recall(self) -> CatalogBatch | None:
        if self._snapshots is None:
            return None
        try:
            return self._snapshots.load()
        except PersistenceFailure as exc:
            logger.error("Could not load catalog snapshot", error=str(exc))
            return None

    def _remember(self, batch: CatalogBatch) -> None:
        if self._snapshots is None:
            return
        try:
            self._snapshots.store(batch)
        except PersistenceFailure as exc:
            # Non-fatal: the batch is already live in memory.
            logger.error("Could not store catalog snapshot", error=str(exc))


def _view(batch: CatalogBatch, stale: bool = False) -> CatalogView:
    return CatalogView(entries=batch.entries, fetched_at=batch.fetched_at, stale=stale)
