"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass

from storefront.domain.model.cart import Cart
from storefront.domain.model.order import Order


@dataclass(frozen=True)
class CheckoutItemSpec:
    """Input: what the client wants to check out (product ID + quantity)."""

    product_id: str
    quantity: int


@dataclass(frozen=True)
class CartLineDTO:
    product_id: str
    name: str
    badge: str
    palette: list[str]
    quantity: int
    unit_price: str  # formatted, e.g. "$4.50"
    line_total: str


@dataclass(frozen=True)
class CartDTO:
    actor: str
    items: list[CartLineDTO]
    total_items: int
    total_price: str
    is_empty: bool


@dataclass(frozen=True)
class CatalogEntryDTO:
    product_id: str
    title: str
    description: str
    price: str
    currency: str
    inventory_count: int
    variant_ids: list[str]


@dataclass(frozen=True)
class CatalogDTO:
    products: list[CatalogEntryDTO]
    stale: bool
    fetched_at: str
    warning: str | None = None


@dataclass(frozen=True)
class CheckoutVerdictDTO:
    valid: bool
    errors: list[str]
    total_amount: str
    items_count: int

    @property
    def message(self) -> str:
        return "Cart is valid for checkout" if self.valid else "Cart validation failed"


@dataclass(frozen=True)
class CheckoutDTO:
    checkout_id: str
    checkout_url: str
    total_amount: str


@dataclass(frozen=True)
class OrderStatusDTO:
    checkout_id: str | None
    order_id: str | None
    status: str
    total_amount: str
    created_at: str


# --- Mapping --------------------------------------------------------------------


def to_cart_dto(cart: Cart) -> CartDTO:
    return CartDTO(
        actor=str(cart.actor_key),
        items=[
            CartLineDTO(
                product_id=line.product_id,
                name=line.snapshot.name,
                badge=line.snapshot.badge,
                palette=list(line.snapshot.palette),
                quantity=line.quantity.value,
                unit_price=str(line.unit_price),
                line_total=str(line.line_total),
            )
            for line in cart.lines
        ],
        total_items=cart.total_items,
        total_price=str(cart.total()),
        is_empty=cart.is_empty,
    )


def to_order_status_dto(order: Order) -> OrderStatusDTO:
    return OrderStatusDTO(
        checkout_id=order.checkout_id,
        order_id=order.order_id,
        status=order.status.value,
        total_amount=str(order.total_amount),
        created_at=order.created_at.strftime("%Y-%m-%d %H:%M UTC"),
    )
