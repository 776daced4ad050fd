"""Abstract gateway to the external commerce platform.

The platform owns the catalog, checkout sessions, payments and
customers. The domain only sees this interface.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from storefront.domain.model.catalog import CatalogEntry


@dataclass(frozen=True)
class CheckoutLineItem:
    variant_id: str
    quantity: int


@dataclass(frozen=True)
class CheckoutSession:
    checkout_id: str
    web_url: str


@dataclass(frozen=True)
class PlatformCustomer:
    customer_id: str
    email: str
    first_name: str | None = None
    last_name: str | None = None


class CommercePlatform(ABC):

    @abstractmethod
    def fetch_catalog(self) -> list[CatalogEntry]:
        """Fetch the whole product catalog.

        Raises UpstreamUnavailable on any transport or upstream failure.
        """

    @abstractmethod
    def create_checkout(
        self,
        lines: list[CheckoutLineItem],
        email: str | None = None,
    ) -> CheckoutSession:
        """Open a payable checkout session for *lines*."""

    @abstractmethod
    def find_customer_by_email(self, email: str) -> PlatformCustomer | None:
        """Return the platform customer with *email*, or None."""

    @abstractmethod
    def create_customer(
        self,
        email: str,
        first_name: str | None = None,
        last_name: str | None = None,
    ) -> PlatformCustomer:
        """Register a new platform customer."""
