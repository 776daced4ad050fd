"""Application service: Add To Cart use case.

The unit price is taken from the product cache, never from the client. It is
the price of the variant that checkout will hand to the platform.
Badge and palette are display-only and may come from the storefront page.
"""

from __future__ import annotations

from storefront.application.dto import CartDTO, to_cart_dto
from storefront.domain.exceptions import ValidationError
from storefront.domain.model.cart import ProductSnapshot
from storefront.domain.model.value_objects import ActorKey
from storefront.domain.service.cart_store import CartStore
from storefront.domain.service.product_cache import ProductCache


class AddToCartHandler:

    def __init__(self, cart_store: CartStore, product_cache: ProductCache) -> None:
        self._cart_store = cart_store
        self._product_cache = product_cache

    def handle(
        self,
        actor_key: ActorKey,
        product_id: str,
        quantity: int,
        badge: str = "",
        palette: tuple[str, ...] = (),
    ) -> CartDTO:
        if not product_id or not product_id.strip():
            raise ValidationError("Product ID and valid quantity are required")
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise ValidationError("Product ID and valid quantity are required")

        lookup = self._product_cache.get(product_id)
        entry = lookup.entry
        variant = entry.sold_variant
        snapshot = ProductSnapshot(name=entry.title, badge=badge, palette=tuple(palette))

        cart = self._cart_store.add_line(
            actor_key,
            product_id=entry.product_id,
            quantity=quantity,
            unit_price=variant.price if variant else entry.price,  # <-- price snapshot
            snapshot=snapshot,
            variant_id=variant.variant_id if variant else None,
        )
        return to_cart_dto(cart)
