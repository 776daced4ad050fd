"""In-memory fakes for testing.

These implement the same abstract interfaces as the JSON repositories and
the Shopify client but keep everything in dicts. No file I/O, no network.
"""

from __future__ import annotations

import copy
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from storefront.domain.exceptions import PersistenceFailure, UpstreamUnavailable
from storefront.domain.gateway.commerce_platform import (
    CheckoutLineItem,
    CheckoutSession,
    CommercePlatform,
    PlatformCustomer,
)
from storefront.domain.model.cart import Cart
from storefront.domain.model.catalog import CatalogBatch, CatalogEntry, CatalogVariant
from storefront.domain.model.order import Order
from storefront.domain.model.value_objects import ActorKey, Money
from storefront.domain.repository.cart_repository import CartRepository
from storefront.domain.repository.catalog_repository import CatalogRepository
from storefront.domain.repository.order_repository import OrderRepository


class FakeCartRepository(CartRepository):
    """Stores deep copies so callers cannot mutate persisted state by accident."""

    def __init__(self) -> None:
        self._store: dict[ActorKey, Cart] = {}
        self.commits = 0
        self.fail_next_commit = False

    def get(self, actor_key: ActorKey) -> Cart | None:
        cart = self._store.get(actor_key)
        return copy.deepcopy(cart) if cart is not None else None

    def commit(self, saves: list[Cart], deletes: list[ActorKey]) -> None:
        if self.fail_next_commit:
            self.fail_next_commit = False
            raise PersistenceFailure("disk full")
        for key in deletes:
            self._store.pop(key, None)
        for cart in saves:
            self._store[cart.actor_key] = copy.deepcopy(cart)
        self.commits += 1

    def keys(self) -> list[ActorKey]:
        return list(self._store)


class FakeOrderRepository(OrderRepository):

    def __init__(self) -> None:
        self._store: dict[int, Order] = {}
        self._next_id = 1

    def get_by_order_id(self, order_id: str) -> Order | None:
        return self._find(lambda o: o.order_id == order_id)

    def get_by_checkout_id(self, checkout_id: str) -> Order | None:
        return self._find(lambda o: o.checkout_id == checkout_id)

    def save(self, order: Order) -> None:
        if order.id is None:
            order.id = self._next_id
            self._next_id += 1
        self._store[order.id] = copy.deepcopy(order)

    def all(self) -> list[Order]:
        return [copy.deepcopy(o) for o in self._store.values()]

    def _find(self, predicate) -> Order | None:
        for order in self._store.values():
            if predicate(order):
                return copy.deepcopy(order)
        return None


class FakeCatalogRepository(CatalogRepository):

    def __init__(self, batch: CatalogBatch | None = None) -> None:
        self.batch = batch
        self.fail_store = False
        self.fail_load = False

    def load(self) -> CatalogBatch | None:
        if self.fail_load:
            raise PersistenceFailure("Could not read catalog.json")
        return self.batch

    def store(self, batch: CatalogBatch) -> None:
        if self.fail_store:
            raise PersistenceFailure("read-only file system")
        self.batch = batch

    def clear(self) -> None:
        self.batch = None


class FakeCommercePlatform(CommercePlatform):
    """Scriptable platform: flip ``fail`` to simulate an outage."""

    def __init__(self, entries: list[CatalogEntry] | None = None) -> None:
        self.entries = list(entries or [])
        self.fail = False
        self.fetch_calls = 0
        self.checkouts: list[list[CheckoutLineItem]] = []
        self.customers: dict[str, PlatformCustomer] = {}

    def fetch_catalog(self) -> list[CatalogEntry]:
        self.fetch_calls += 1
        if self.fail:
            raise UpstreamUnavailable("connection refused")
        return list(self.entries)

    def create_checkout(
        self,
        lines: list[CheckoutLineItem],
        email: str | None = None,
    ) -> CheckoutSession:
        if self.fail:
            raise UpstreamUnavailable("connection refused")
        self.checkouts.append(list(lines))
        token = f"chk{len(self.checkouts)}"
        return CheckoutSession(
            checkout_id=token,
            web_url=f"https://shop.example.com/checkouts/{token}",
        )

    def find_customer_by_email(self, email: str) -> PlatformCustomer | None:
        return self.customers.get(email)

    def create_customer(
        self,
        email: str,
        first_name: str | None = None,
        last_name: str | None = None,
    ) -> PlatformCustomer:
        customer = PlatformCustomer(
            customer_id=str(1000 + len(self.customers)),
            email=email,
            first_name=first_name,
            last_name=last_name,
        )
        self.customers[email] = customer
        return customer


class FakeClock:
    """A clock tests can move forward by hand."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


def make_entry(
    product_id: str = "prod-1",
    title: str = "Widget",
    price: str = "15.00",
    stock: int = 10,
) -> CatalogEntry:
    """Helper to build a catalog entry with one variant."""
    return CatalogEntry(
        product_id=product_id,
        title=title,
        description=f"A fine {title.lower()}",
        price=Money(Decimal(price)),
        variants=(
            CatalogVariant(
                variant_id=f"{product_id}-v1",
                title="Default",
                price=Money(Decimal(price)),
                quantity_available=stock,
            ),
        ),
    )
