"""Checkout request and verdict.

A CheckoutRequest is untrusted client input. Only product ids and
quantities are taken from it; prices always come from the cart.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.value_objects import ActorKey, Money


@dataclass(frozen=True)
class ProposedLine:
    product_id: str
    quantity: int


@dataclass(frozen=True)
class CheckoutRequest:
    actor_key: ActorKey
    proposed_lines: tuple[ProposedLine, ...]
    customer_email: str | None = None

    def __post_init__(self) -> None:
        if not self.proposed_lines:
            raise ValidationError("Cart items are required")
        for line in self.proposed_lines:
            if not line.product_id or not str(line.product_id).strip():
                raise ValidationError("Each item must have a valid product ID")
            if isinstance(line.quantity, bool) or not isinstance(line.quantity, int):
                raise ValidationError(
                    f"Quantity for {line.product_id} must be an integer"
                )
            if line.quantity < 1:
                raise ValidationError(
                    f"Quantity for {line.product_id} must be at least 1"
                )


@dataclass(frozen=True)
class LineProblem:
    product_id: str
    message: str


@dataclass(frozen=True)
class PricedLine:
    """A requested line priced from the cart."""

    product_id: str
    name: str
    quantity: int
    unit_price: Money
    variant_id: str | None = None


@dataclass(frozen=True)
class CheckoutVerdict:
    valid: bool
    total_amount: Money
    errors: tuple[LineProblem, ...] = field(default_factory=tuple)
    priced_lines: tuple[PricedLine, ...] = field(default_factory=tuple)

    @property
    def messages(self) -> list[str]:
        return [e.message for e in self.errors]
