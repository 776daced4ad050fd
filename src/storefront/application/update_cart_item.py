"""Application service: Update Cart Item use case.

Setting a quantity of zero (or less) removes the item.
"""

from __future__ import annotations

from storefront.application.dto import CartDTO, to_cart_dto
from storefront.domain.model.value_objects import ActorKey
from storefront.domain.service.cart_store import CartStore


class UpdateCartItemHandler:

    def __init__(self, cart_store: CartStore) -> None:
        self._cart_store = cart_store

    def handle(self, actor_key: ActorKey, product_id: str, quantity: int) -> CartDTO:
        cart = self._cart_store.set_quantity(actor_key, product_id, quantity)
        return to_cart_dto(cart)
