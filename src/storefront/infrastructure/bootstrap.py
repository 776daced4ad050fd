"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from dataclasses import dataclass

from storefront.domain.gateway.commerce_platform import CommercePlatform
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.service.actor_resolver import ActorResolver
from storefront.domain.service.cart_store import CartStore
from storefront.domain.service.checkout_validator import CheckoutValidator
from storefront.domain.service.keyed_locks import KeyedLocks
from storefront.domain.service.order_ledger import OrderLedger
from storefront.domain.service.product_cache import ProductCache
from storefront.infrastructure.config import Settings
from storefront.infrastructure.persistence.json_cart_repository import JsonCartRepository
from storefront.infrastructure.persistence.json_catalog_repository import (
    JsonCatalogRepository,
)
from storefront.infrastructure.persistence.json_order_repository import (
    JsonOrderRepository,
)
from storefront.infrastructure.upstream.shopify_platform import ShopifyPlatform
from storefront.infrastructure.upstream.webhooks import WebhookVerifier


@dataclass
class Storefront:
    settings: Settings
    platform: CommercePlatform
    cart_store: CartStore
    product_cache: ProductCache
    validator: CheckoutValidator
    ledger: OrderLedger
    order_repo: OrderRepository
    resolver: ActorResolver
    verifier: WebhookVerifier

    def close(self) -> None:
        close = getattr(self.platform, "close", None)
        if close is not None:
            close()


def shopify_platform(settings: Settings) -> ShopifyPlatform:
    return ShopifyPlatform(
        shop_domain=settings.shop_domain,
        storefront_token=settings.storefront_token,
        admin_token=settings.admin_token,
        api_version=settings.api_version,
        timeout=settings.upstream_timeout,
    )


def open_storefront(settings: Settings, platform: CommercePlatform | None = None) -> Storefront:
    data_dir = settings.data_dir
    platform = platform or shopify_platform(settings)

    # Cart keys and "order:"/"checkout:" keys never collide; the ledger
    # may take a cart key while holding an order key, never the reverse.
    locks = KeyedLocks()
    cart_store = CartStore(JsonCartRepository(data_dir / "carts.json"), locks)
    order_repo = JsonOrderRepository(data_dir / "orders.json")
    product_cache = ProductCache(
        platform,
        ttl=settings.catalog_ttl,
        snapshots=JsonCatalogRepository(data_dir / "catalog.json"),
    )

    return Storefront(
        settings=settings,
        platform=platform,
        cart_store=cart_store,
        product_cache=product_cache,
        validator=CheckoutValidator(cart_store),
        ledger=OrderLedger(order_repo, cart_store, locks),
        order_repo=order_repo,
        resolver=ActorResolver(),
        verifier=WebhookVerifier(settings.webhook_secret),
    )
