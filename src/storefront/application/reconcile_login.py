"""Application service: Reconcile Login use case.

Called once the identity layer has authenticated a shopper. If the request
still carries the anonymous session the shopper was browsing under, that
session's cart is folded into the account cart and deleted.
"""

from __future__ import annotations

from dataclasses import dataclass

from storefront.application.dto import CartDTO, to_cart_dto
from storefront.domain.exceptions import ValidationError
from storefront.domain.service.actor_resolver import ActorResolver, RequestContext
from storefront.domain.service.cart_store import CartStore


@dataclass(frozen=True)
class LoginResult:
    cart: CartDTO
    merged_from: str | None


class ReconcileLoginHandler:

    def __init__(self, cart_store: CartStore, resolver: ActorResolver) -> None:
        self._cart_store = cart_store
        self._resolver = resolver

    def handle(self, request: RequestContext) -> LoginResult:
        resolved = self._resolver.resolve(request)
        if resolved.actor_key.is_anonymous:
            raise ValidationError("Login reconciliation requires an authenticated account")

        if resolved.pending_merge is None:
            cart = self._cart_store.get(resolved.actor_key)
            return LoginResult(cart=to_cart_dto(cart), merged_from=None)

        cart = self._cart_store.merge_into_account(resolved.pending_merge, resolved.actor_key)
        return LoginResult(cart=to_cart_dto(cart), merged_from=str(resolved.pending_merge))
