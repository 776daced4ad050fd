"""Application service: Browse Catalog use cases (queries)."""

from __future__ import annotations

from storefront.application.dto import CatalogDTO, CatalogEntryDTO
from storefront.domain.model.catalog import CatalogEntry
from storefront.domain.service.product_cache import ProductCache

STALE_WARNING = "Showing cached data due to temporary service issues"


class ListCatalogHandler:

    def __init__(self, product_cache: ProductCache) -> None:
        self._product_cache = product_cache

    def handle(self) -> CatalogDTO:
        view = self._product_cache.list()
        return CatalogDTO(
            products=[_to_dto(entry) for entry in view.entries],
            stale=view.stale,
            fetched_at=view.fetched_at.strftime("%Y-%m-%d %H:%M:%S UTC"),
            warning=STALE_WARNING if view.stale else None,
        )


class ShowProductHandler:

    def __init__(self, product_cache: ProductCache) -> None:
        self._product_cache = product_cache

    def handle(self, product_id: str) -> tuple[CatalogEntryDTO, bool]:
        """Return the product and whether it came from a stale batch."""
        lookup = self._product_cache.get(product_id)
        return _to_dto(lookup.entry), lookup.stale


def _to_dto(entry: CatalogEntry) -> CatalogEntryDTO:
    return CatalogEntryDTO(
        product_id=entry.product_id,
        title=entry.title,
        description=entry.description,
        price=str(entry.price),
        currency=entry.currency,
        inventory_count=entry.inventory_count,
        variant_ids=[v.variant_id for v in entry.variants],
    )
