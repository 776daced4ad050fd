"""Domain service: OrderLedger.

Records what happened to each checkout once control has passed to the
commerce platform. Orders move only when the platform says so, and only
forward:

    pending -> paid -> completed
    paid    -> refunded | partially_refunded
    pending -> cancelled

Notifications are idempotent. A replayed or out-of-date notification is
reported as DUPLICATE and changes nothing; one that would move an order
sideways or backwards is REJECTED and logged. The owning actor's cart is
cleared when, and only when, the ``paid`` edge is actually taken.
"""

from __future__ import annotations

import structlog

from storefront.domain.model.notification import NotificationEvent, OrderNotification
from storefront.domain.model.order import (
    Order,
    OrderLine,
    Transition,
    TransitionOutcome,
)
from storefront.domain.model.value_objects import ActorKey, Money
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.service.cart_store import CartStore
from storefront.domain.service.keyed_locks import KeyedLocks

logger = structlog.get_logger(__name__)


class OrderLedger:

    def __init__(
        self,
        order_repo: OrderRepository,
        cart_store: CartStore,
        locks: KeyedLocks | None = None,
    ) -> None:
        self._order_repo = order_repo
        self._cart_store = cart_store
        self._locks = locks or KeyedLocks()

    def open_pending(
        self,
        actor_key: ActorKey,
        checkout_id: str,
        total_amount: Money,
        lines: list[OrderLine],
    ) -> Order:
        """Record a checkout that has just been accepted upstream."""
        with self._locks.hold(f"checkout:{checkout_id}"):
            existing = self._order_repo.get_by_checkout_id(checkout_id)
            if existing is not None:
                return existing
            order = Order.open(
                actor_key=actor_key,
                total_amount=total_amount,
                lines=lines,
                checkout_id=checkout_id,
            )
            self._order_repo.save(order)

        logger.info(
            "Checkout recorded",
            checkout_id=checkout_id,
            actor=str(actor_key),
            total=str(total_amount),
        )
        return order

    def apply(self, notification: OrderNotification) -> Transition:
        """Apply one verified platform notification.

        The checkout key is held too, so a notification racing the
        hand-off's ``open_pending`` cannot record a second order.
        """
        keys = [f"order:{notification.order_id}"]
        if notification.checkout_id:
            keys.append(f"checkout:{notification.checkout_id}")
        with self._locks.hold(*keys):
            return self._apply_locked(notification)

    # --- Internal helpers -------------------------------------------------------

    def _apply_locked(self, notification: OrderNotification) -> Transition:
        order = self._find(notification)
        changed = False

        if order is None:
            if notification.event is not NotificationEvent.CREATED:
                logger.warning(
                    "Order not found in ledger",
                    order_id=notification.order_id,
                    topic=notification.event.value,
                )
                return Transition(TransitionOutcome.IGNORED)
            if not notification.customer_id:
                logger.warning(
                    "Order webhook missing customer ID", order_id=notification.order_id
                )
                return Transition(TransitionOutcome.IGNORED)
            order = Order.open(
                actor_key=ActorKey.account(notification.customer_id),
                total_amount=notification.total_price or Money.zero(),
                lines=list(notification.lines),
                order_id=notification.order_id,
                checkout_id=notification.checkout_id,
            )
            changed = True
        elif order.order_id != notification.order_id:
            order.attach_order_id(notification.order_id)
            changed = True

        self._warn_on_total_mismatch(order, notification)

        target = notification.target_status()
        transition = order.advance_to(target)

        if transition.passed_paid:
            # Must precede the save: a replay after a failed save clears again.
            self._cart_store.clear(order.actor_key)

        if changed or transition.outcome is TransitionOutcome.APPLIED:
            self._order_repo.save(order)

        log = logger.warning if transition.outcome is TransitionOutcome.REJECTED else logger.info
        log(
            "Order notification processed",
            order_id=notification.order_id,
            topic=notification.event.value,
            target=target.value,
            status=order.status.value,
            outcome=transition.outcome.value,
        )
        return transition

    def _find(self, notification: OrderNotification) -> Order | None:
        order = self._order_repo.get_by_order_id(notification.order_id)
        if order is None and notification.checkout_id:
            order = self._order_repo.get_by_checkout_id(notification.checkout_id)
        return order

    @staticmethod
    def _warn_on_total_mismatch(order: Order, notification: OrderNotification) -> None:
        reported = notification.total_price
        if reported is None or reported == order.total_amount:
            return
        logger.warning(
            "Platform total differs from cart total",
            order_id=notification.order_id,
            cart_total=str(order.total_amount),
            platform_total=str(reported),
        )
