"""Application service: Record Platform Notification use case.

Entry point for order webhooks that have already passed signature
verification. Inventory-level notifications do not touch the ledger;
they only mark the product cache for refresh.
"""

from __future__ import annotations

from storefront.domain.model.notification import OrderNotification
from storefront.domain.model.order import TransitionOutcome
from storefront.domain.service.order_ledger import OrderLedger
from storefront.domain.service.product_cache import ProductCache


class RecordNotificationHandler:

    def __init__(self, ledger: OrderLedger) -> None:
        self._ledger = ledger

    def handle(self, notification: OrderNotification) -> TransitionOutcome:
        return self._ledger.apply(notification).outcome


class RecordInventoryChangeHandler:

    def __init__(self, product_cache: ProductCache) -> None:
        self._product_cache = product_cache

    def handle(self) -> None:
        self._product_cache.expire()
