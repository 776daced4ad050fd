"""Order aggregate: the ledger's record of one checkout's outcome.

Orders are created when a checkout is accepted upstream and are then moved
forward only by platform notifications. Status never regresses and orders
are never deleted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.value_objects import ActorKey, Money


class OrderStatus(Enum):
    PENDING = "pending"
    PAID = "paid"
    COMPLETED = "completed"
    REFUNDED = "refunded"
    PARTIALLY_REFUNDED = "partially_refunded"
    CANCELLED = "cancelled"


# Forward edges of the status lattice.
_FORWARD: dict[OrderStatus, tuple[OrderStatus, ...]] = {
    OrderStatus.PENDING: (OrderStatus.PAID, OrderStatus.CANCELLED),
    OrderStatus.PAID: (
        OrderStatus.COMPLETED,
        OrderStatus.REFUNDED,
        OrderStatus.PARTIALLY_REFUNDED,
    ),
}


def forward_path(start: OrderStatus, target: OrderStatus) -> list[OrderStatus] | None:
    """Statuses visited walking forward from *start* to *target*.

    The result excludes *start* and ends with *target*. Returns None when
    *target* is not reachable.
    """
    if start == target:
        return []
    for nxt in _FORWARD.get(start, ()):
        rest = forward_path(nxt, target)
        if rest is not None:
            return [nxt, *rest]
    return None


class TransitionOutcome(Enum):
    APPLIED = "applied"
    DUPLICATE = "duplicate"  # already at or past the target
    REJECTED = "rejected"  # target would regress or jump sideways
    IGNORED = "ignored"  # nothing to apply it to


@dataclass(frozen=True)
class Transition:
    outcome: TransitionOutcome
    path: tuple[OrderStatus, ...] = ()

    @property
    def passed_paid(self) -> bool:
        return OrderStatus.PAID in self.path


@dataclass(frozen=True)
class OrderLine:
    product_id: str
    title: str
    quantity: int
    unit_price: Money
    sku: str | None = None

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Order:
    """Aggregate root for a checkout outcome.

    ``checkout_id`` is known from the moment the hand-off succeeds;
    ``order_id`` arrives later with the platform's first notification.
    """

    id: int | None
    actor_key: ActorKey
    total_amount: Money
    lines: list[OrderLine] = field(default_factory=list)
    status: OrderStatus = OrderStatus.PENDING
    order_id: str | None = None
    checkout_id: str | None = None
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def open(
        actor_key: ActorKey,
        total_amount: Money,
        lines: list[OrderLine],
        checkout_id: str | None = None,
        order_id: str | None = None,
    ) -> Order:
        if not checkout_id and not order_id:
            raise ValidationError("An order needs a checkout ID or an order ID")
        return Order(
            id=None,
            actor_key=actor_key,
            total_amount=total_amount,
            lines=list(lines),
            checkout_id=checkout_id,
            order_id=order_id,
        )

    # --- State transitions ----------------------------------------------------

    def advance_to(self, target: OrderStatus) -> Transition:
        """Move forward to *target* if the lattice allows it.

        Replays and statuses already passed are reported as DUPLICATE;
        anything else that is not forward is REJECTED. Neither raises.
        """
        if target == self.status:
            return Transition(TransitionOutcome.DUPLICATE)

        path = forward_path(self.status, target)
        if path is not None:
            self.status = target
            self.updated_at = _now()
            return Transition(TransitionOutcome.APPLIED, tuple(path))

        if forward_path(target, self.status) is not None:
            return Transition(TransitionOutcome.DUPLICATE)
        return Transition(TransitionOutcome.REJECTED)

    def attach_order_id(self, order_id: str) -> None:
        if self.order_id and self.order_id != order_id:
            raise ValidationError(
                f"Checkout {self.checkout_id} already belongs to order {self.order_id}"
            )
        self.order_id = order_id

    @property
    def currency(self) -> str:
        return self.total_amount.currency
