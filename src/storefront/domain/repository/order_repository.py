"""Abstract repository for the Order aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.order import Order


class OrderRepository(ABC):

    @abstractmethod
    def get_by_order_id(self, order_id: str) -> Order | None:
        """Return the order the platform knows as *order_id*, or None."""

    @abstractmethod
    def get_by_checkout_id(self, checkout_id: str) -> Order | None:
        """Return the order opened for *checkout_id*, or None."""

    @abstractmethod
    def save(self, order: Order) -> None:
        """Persist a new or updated order."""
