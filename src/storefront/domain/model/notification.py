"""Order notifications pushed by the commerce platform.

By the time a notification is built its signature has already been
checked; the ledger trusts it.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from storefront.domain.model.order import OrderLine, OrderStatus
from storefront.domain.model.value_objects import Money


class NotificationEvent(Enum):
    CREATED = "orders/create"
    PAID = "orders/paid"
    UPDATED = "orders/updated"
    CANCELLED = "orders/cancelled"


@dataclass(frozen=True)
class OrderNotification:
    event: NotificationEvent
    order_id: str
    checkout_id: str | None = None
    customer_id: str | None = None
    financial_status: str | None = None
    fulfillment_status: str | None = None
    total_price: Money | None = None
    lines: tuple[OrderLine, ...] = ()

    def target_status(self) -> OrderStatus:
        """The status this notification asks the ledger to reach."""
        if self.event is NotificationEvent.PAID:
            return OrderStatus.PAID
        if self.event is NotificationEvent.CANCELLED:
            return OrderStatus.CANCELLED
        if self.event is NotificationEvent.CREATED:
            return OrderStatus.PAID if self.financial_status == "paid" else OrderStatus.PENDING

        if self.financial_status == "paid":
            if self.fulfillment_status == "fulfilled":
                return OrderStatus.COMPLETED
            return OrderStatus.PAID
        if self.financial_status == "refunded":
            return OrderStatus.REFUNDED
        if self.financial_status == "partially_refunded":
            return OrderStatus.PARTIALLY_REFUNDED
        return OrderStatus.PENDING
