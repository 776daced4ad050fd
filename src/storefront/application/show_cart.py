"""Application service: Show Cart use case (query)."""

from __future__ import annotations

from storefront.application.dto import CartDTO, to_cart_dto
from storefront.domain.model.value_objects import ActorKey
from storefront.domain.service.cart_store import CartStore


class ShowCartHandler:

    def __init__(self, cart_store: CartStore) -> None:
        self._cart_store = cart_store

    def handle(self, actor_key: ActorKey) -> CartDTO:
        return to_cart_dto(self._cart_store.get(actor_key))
