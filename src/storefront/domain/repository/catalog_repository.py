"""Abstract store for the last catalog batch fetched from the platform.

Lets a restarted process serve the previous catalog (stale if need be)
before its first successful refresh.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.catalog import CatalogBatch


class CatalogRepository(ABC):

    @abstractmethod
    def load(self) -> CatalogBatch | None:
        """Return the last stored batch, or None."""

    @abstractmethod
    def store(self, batch: CatalogBatch) -> None:
        """Replace the stored batch with *batch*."""

    @abstractmethod
    def clear(self) -> None:
        """Forget the stored batch."""
