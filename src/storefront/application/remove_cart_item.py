"""Application service: Remove Cart Item and Clear Cart use cases."""

from __future__ import annotations

from storefront.application.dto import CartDTO, to_cart_dto
from storefront.domain.model.value_objects import ActorKey
from storefront.domain.service.cart_store import CartStore


class RemoveCartItemHandler:

    def __init__(self, cart_store: CartStore) -> None:
        self._cart_store = cart_store

    def handle(self, actor_key: ActorKey, product_id: str) -> CartDTO:
        return to_cart_dto(self._cart_store.remove_line(actor_key, product_id))


class ClearCartHandler:

    def __init__(self, cart_store: CartStore) -> None:
        self._cart_store = cart_store

    def handle(self, actor_key: ActorKey) -> CartDTO:
        return to_cart_dto(self._cart_store.clear(actor_key))
