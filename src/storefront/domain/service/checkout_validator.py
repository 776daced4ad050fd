"""Domain service: CheckoutValidator.

Cross-checks a client's checkout request against the server-side cart.
The client only gets to say *which* products and *how many*; every price
used for the total comes from the cart line captured at add-to-cart time.
A client therefore cannot check out anything at a price or quantity it
never put in its own cart.
"""

from __future__ import annotations

from storefront.domain.model.cart import Cart
from storefront.domain.model.checkout import (
    CheckoutRequest,
    CheckoutVerdict,
    LineProblem,
    PricedLine,
)
from storefront.domain.model.value_objects import Money
from storefront.domain.service.cart_store import CartStore


class CheckoutValidator:

    def __init__(self, cart_store: CartStore) -> None:
        self._cart_store = cart_store

    def validate(self, request: CheckoutRequest) -> CheckoutVerdict:
        """Validate *request* against the actor's current cart. Never mutates it."""
        cart = self._cart_store.get(request.actor_key)
        return validate_against(cart, request)


def validate_against(cart: Cart, request: CheckoutRequest) -> CheckoutVerdict:
    # Repeated lines for one product are checked as their combined quantity.
    requested: dict[str, int] = {}
    for proposed in request.proposed_lines:
        requested[proposed.product_id] = requested.get(proposed.product_id, 0) + proposed.quantity

    currency = cart.lines[0].unit_price.currency if cart.lines else "USD"
    total = Money.zero(currency)
    problems: list[LineProblem] = []
    priced: list[PricedLine] = []

    for product_id, quantity in requested.items():
        line = cart.find_line(product_id)
        if line is None:
            problems.append(
                LineProblem(product_id, f"Item {product_id}: line not found in cart")
            )
            continue

        if line.quantity.value < quantity:
            problems.append(
                LineProblem(
                    product_id,
                    f"Insufficient quantity for item {line.snapshot.name} "
                    f"({product_id}): requested {quantity}, cart holds {line.quantity}",
                )
            )
            continue

        total = total + line.unit_price * quantity
        priced.append(
            PricedLine(
                product_id, line.snapshot.name, quantity, line.unit_price, line.variant_id
            )
        )

    return CheckoutVerdict(
        valid=not problems,
        total_amount=total,
        errors=tuple(problems),
        priced_lines=tuple(priced),
    )
